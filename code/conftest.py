from pathlib import Path

import pytest

from clflops.device import enumerate_devices
from clflops.errors import DiscoveryError
from clflops.program import build_program

KERNEL_PATH = Path(__file__).parent / "clflops" / "vectorops.cl"


@pytest.fixture(scope="session")
def cl_device():
    try:
        devices = enumerate_devices()
    except DiscoveryError:
        pytest.skip("no OpenCL platform installed")
    if not devices:
        pytest.skip("no OpenCL device found")
    return devices[0]


@pytest.fixture(scope="session")
def kernel_source():
    return KERNEL_PATH.read_text()


@pytest.fixture(scope="session")
def compiled(cl_device, kernel_source):
    return build_program(cl_device, kernel_source)
