# run the two work partitioning strategies and time them from the host
import logging
import time

import attrs
import numpy as np
import pyopencl as cl

from .errors import VerificationFailure
from .staging import download_sample, sample_size, upload
from .verify import verify

logger = logging.getLogger(__name__)


@attrs.define(frozen=True, slots=True)
class Strategy:
    name: str
    kernel_name: str


# one work-item per compute unit, each looping over a contiguous slice
RANGE = Strategy(name="Range Based", kernel_name="range_op")
# one work-item per element, no loop
ELEMENT = Strategy(name="Element Based", kernel_name="element_op")
STRATEGIES = (RANGE, ELEMENT)


@attrs.define(frozen=True, slots=True)
class BenchmarkResult:
    strategy_name: str
    elapsed_seconds: float
    elements_per_second: float
    elements: int


def _launch_shape(compiled, device_buffer, strategy):
    if strategy == RANGE:
        return (compiled.device.max_compute_units,), (1,), (device_buffer.data, np.int32(device_buffer.size))
    # local size left to the runtime
    return (device_buffer.size,), None, (device_buffer.data,)


def dispatch(compiled, device_buffer, strategy) -> float:
    """Enqueue one strategy's kernel and block until it finishes.

    Returns host wall clock seconds from just before the enqueue to the
    completion of event.wait(), so scheduling overhead is included.
    """
    global_size, local_size, args = _launch_shape(compiled, device_buffer, strategy)
    kernel = cl.Kernel(compiled.program, strategy.kernel_name)
    kernel.set_args(*args)

    t0 = time.perf_counter()
    evt = cl.enqueue_nd_range_kernel(compiled.queue, kernel, global_size, local_size)
    evt.wait()
    t1 = time.perf_counter()
    return t1 - t0


def run_strategy(compiled, host, strategy) -> BenchmarkResult:
    # range_op works in place, so every run starts from a fresh upload
    device_buffer = upload(compiled, host)
    try:
        elapsed = dispatch(compiled, device_buffer, strategy)
        sample = download_sample(compiled, device_buffer, sample_size(host.size))
    finally:
        device_buffer.release()

    logger.debug("%s: %d elements in %.6f s, verifying %d", strategy.name, host.size, elapsed, sample.size)
    if not verify(sample, host.state):
        raise VerificationFailure(strategy.name)

    return BenchmarkResult(
        strategy_name=strategy.name,
        elapsed_seconds=elapsed,
        elements_per_second=host.size / elapsed,
        elements=host.size,
    )


def run_host_baseline(host) -> BenchmarkResult:
    # same transform with numpy on the host, for comparison
    t0 = time.perf_counter()
    np.sqrt(host.values)
    t1 = time.perf_counter()
    elapsed = t1 - t0
    return BenchmarkResult(
        strategy_name="Host Baseline",
        elapsed_seconds=elapsed,
        elements_per_second=host.size / elapsed,
        elements=host.size,
    )


def format_result(result) -> str:
    return (f"{result.strategy_name + ':':<15}"
            f"{result.elements_per_second / 1e6:.2f}M Elements Per Second"
            f" ({result.elapsed_seconds * 1e3:.3f} ms)")
