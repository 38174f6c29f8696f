# compile the vector ops kernel file for a single device
import logging
import os
from pathlib import Path

import attrs
import pyopencl as cl

from .errors import BuildError, ConfigError

logger = logging.getLogger(__name__)

CL_FILE_NAME = "vectorops.cl"


@attrs.define(frozen=True, slots=True)
class CompiledProgram:
    device: object
    context: cl.Context
    queue: cl.CommandQueue
    program: cl.Program


def default_kernel_path() -> Path:
    env = os.environ.get("CLFLOPS_KERNEL")
    if env:
        return Path(env).expanduser()

    candidates = [
        Path.cwd() / CL_FILE_NAME,
        Path(__file__).resolve().with_name(CL_FILE_NAME),
    ]
    for path in candidates:
        if path.is_file():
            return path
    # nothing found, let load_kernel_source report the working directory one
    return candidates[0]


def load_kernel_source(path) -> str:
    path = Path(path)
    try:
        return path.read_text()
    except OSError as e:
        raise ConfigError(f"Error opening {path} for reading") from e


def build_program(device, source: str) -> CompiledProgram:
    """Compile `source` for exactly one device.

    A compiler failure is not retried: it means the device or its driver
    cannot run the kernels, so the caller gives up on this device.
    """
    context = cl.Context([device.handle])
    queue = cl.CommandQueue(context, device.handle)
    try:
        program = cl.Program(context, source).build(devices=[device.handle])
    except cl.RuntimeError as e:
        # pyopencl folds the per-device build log into the message
        raise BuildError(device, str(e)) from e
    logger.debug("built kernels for %s", device.name)
    return CompiledProgram(device=device, context=context, queue=queue, program=program)
