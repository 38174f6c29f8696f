# check a sample of device output against the same transform done on the host
import numpy as np

from .staging import replay

TOLERANCE = 1e-6


def verify(sampled_output, expected_state, tolerance=TOLERANCE, transform=np.sqrt) -> bool:
    """Return True if every sampled element matches transform(input).

    `expected_state` is the generator state the device input was drawn from;
    the inputs are replayed from it rather than trusted from the device.
    NaN or Inf anywhere in the sample fails the check.
    """
    out = np.asarray(sampled_output, dtype=np.float64)
    if out.size == 0:
        return True
    if not np.all(np.isfinite(out)):
        return False

    expected = transform(replay(expected_state, out.size).astype(np.float64))
    return bool(np.all(np.abs(out - expected) <= tolerance))
