# host data generation and blocking host <-> device transfers
import attrs
import numpy as np
import pyopencl as cl

FLOAT_SIZE = np.dtype(np.float32).itemsize
# verify 1 in every 100 elements
VERIFY_FRACTION = 100
DEFAULT_SEED = 0


class SampleStream:
    """Seeded source of uniform [0, 1) float32 values.

    The stream is owned by whoever creates it and handed to generate();
    successive draws continue the same sequence instead of restarting it.
    """

    def __init__(self, seed=DEFAULT_SEED):
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def draw(self, count):
        # capture the state first so the draw can be replayed for verification
        state = self.rng.bit_generator.state
        return state, self.rng.random(count, dtype=np.float32)


@attrs.define(frozen=True, eq=False)
class HostBuffer:
    values: np.ndarray
    state: dict

    @property
    def size(self):
        return self.values.size

    @property
    def nbytes(self):
        return self.values.nbytes


@attrs.define(eq=False)
class DeviceBuffer:
    data: cl.Buffer
    size: int

    def release(self):
        self.data.release()


def generate(byte_count, stream: SampleStream) -> HostBuffer:
    state, values = stream.draw(byte_count // FLOAT_SIZE)
    return HostBuffer(values=values, state=state)


def replay(state, count):
    """Redraw the first `count` values a stream produced from `state`."""
    bitgen = getattr(np.random, state["bit_generator"])()
    bitgen.state = state
    return np.random.Generator(bitgen).random(count, dtype=np.float32)


def sample_size(elements):
    return elements // VERIFY_FRACTION


def upload(compiled, host: HostBuffer) -> DeviceBuffer:
    mf = cl.mem_flags
    buf = cl.Buffer(compiled.context, mf.READ_WRITE, host.nbytes)
    cl.enqueue_copy(compiled.queue, buf, host.values, is_blocking=True)
    return DeviceBuffer(data=buf, size=host.size)


def download_sample(compiled, device_buffer: DeviceBuffer, count):
    """Blocking read of the first `count` elements of a device buffer."""
    if count > device_buffer.size:
        raise ValueError(f"cannot read {count} elements from a buffer of {device_buffer.size}")
    out = np.empty(count, dtype=np.float32)
    if count:
        cl.enqueue_copy(compiled.queue, out, device_buffer.data, is_blocking=True)
    return out
