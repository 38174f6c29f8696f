import pytest

from clflops.errors import BuildError, ConfigError
from clflops.program import CL_FILE_NAME, build_program, default_kernel_path, load_kernel_source


def test_kernel_entry_points(kernel_source):
    assert "__kernel void range_op" in kernel_source
    assert "__kernel void element_op" in kernel_source


def test_missing_kernel_file(tmp_path):
    with pytest.raises(ConfigError, match="Error opening"):
        load_kernel_source(tmp_path / "nope.cl")


def test_default_kernel_path_env(monkeypatch, tmp_path):
    monkeypatch.setenv("CLFLOPS_KERNEL", str(tmp_path / "mine.cl"))
    assert default_kernel_path() == tmp_path / "mine.cl"


def test_default_kernel_path_falls_back_to_shipped(monkeypatch, tmp_path):
    monkeypatch.delenv("CLFLOPS_KERNEL", raising=False)
    monkeypatch.chdir(tmp_path)
    path = default_kernel_path()
    assert path.name == CL_FILE_NAME
    assert path.is_file()
    # shipped as package data beside the modules
    assert path.parent.name == "clflops"


def test_build(compiled):
    assert compiled.program.range_op is not None
    assert compiled.program.element_op is not None


def test_build_error_carries_log(cl_device):
    with pytest.raises(BuildError) as info:
        build_program(cl_device, "__kernel void broken(__global float *x) { x[0] = ; }")
    assert info.value.device is cl_device
    assert info.value.log
