import numpy as np

from clflops.staging import SampleStream, generate
from clflops.verify import verify


def make_sample(n=1000):
    host = generate(4 * n, SampleStream(seed=3))
    return host, np.sqrt(host.values)


def test_accepts_exact_sqrt():
    host, out = make_sample()
    assert verify(out, host.state)


def test_accepts_within_tolerance():
    host, out = make_sample()
    assert verify(out + np.float32(5e-7), host.state)


def test_rejects_one_bad_element():
    host, out = make_sample()
    out[500] += np.float32(1e-5)
    assert not verify(out, host.state)


def test_rejects_nan_and_inf():
    host, out = make_sample()
    bad = out.copy()
    bad[0] = np.nan
    assert not verify(bad, host.state)
    bad = out.copy()
    bad[-1] = np.inf
    assert not verify(bad, host.state)


def test_rejects_untransformed_input():
    host, _ = make_sample()
    assert not verify(host.values, host.state)


def test_other_transform():
    host, _ = make_sample()
    assert verify(host.values * 2, host.state, transform=lambda x: x * 2)


def test_empty_sample_is_valid():
    host, _ = make_sample()
    assert verify(np.empty(0, np.float32), host.state)
