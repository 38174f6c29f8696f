# enumerate every OpenCL device once and describe them for -l
import logging

import attrs
import pyopencl as cl

from .errors import NoPlatformError

logger = logging.getLogger(__name__)


@attrs.define(frozen=True, slots=True)
class Device:
    index: int
    platform_index: int
    platform_vendor: str
    platform_name: str
    name: str
    device_type: str = "ALL"
    max_compute_units: int = 1
    global_mem_size: int = 0
    # the pyopencl.Device behind the record, None for hand-built records
    handle: object = attrs.field(default=None, eq=False, repr=False)


def _platforms():
    try:
        platforms = cl.get_platforms()
    except cl.Error as e:
        # the ICD loader reports "no platforms" as an error, not an empty list
        raise NoPlatformError("No platforms found. Verify runtime installation.") from e
    if not platforms:
        raise NoPlatformError("No platforms found. Verify runtime installation.")
    return platforms


def enumerate_devices() -> list[Device]:
    """Flatten all devices of all platforms into one zero-indexed list.

    Order is platform-major, device-minor, which is the order the OpenCL
    runtime returns them in, so indices stay stable within a process.
    """
    devices = []
    for p_idx, platform in enumerate(_platforms()):
        try:
            handles = platform.get_devices(cl.device_type.ALL)
        except cl.RuntimeError as e:
            logger.debug("platform %s reports no devices: %s", platform.name, e)
            continue
        for dev in handles:
            devices.append(Device(
                index=len(devices),
                platform_index=p_idx,
                platform_vendor=platform.vendor.strip(),
                platform_name=platform.name.strip(),
                name=dev.name.strip(),
                device_type=cl.device_type.to_string(dev.type),
                max_compute_units=dev.max_compute_units,
                global_mem_size=dev.global_mem_size,
                handle=dev,
            ))
    logger.debug("found %d device(s)", len(devices))
    return devices


def describe(devices) -> str:
    lines = []
    current = None
    for dev in devices:
        if dev.platform_index != current:
            current = dev.platform_index
            lines.append(f"{dev.platform_vendor} {dev.platform_name}:")
        lines.append(f"[{dev.index}] {dev.name} ({dev.device_type}, "
                     f"{dev.max_compute_units} compute units)")
    return "\n".join(lines)
