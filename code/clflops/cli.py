"""Measure element-wise sqrt throughput on every OpenCL device.

Usage:
  clflops -l                 list devices and exit
  clflops [-s SIZE] [INDEX]  benchmark all devices, or only device INDEX

SIZE is a byte count with an optional M/m (10^6) or G/g (10^9) suffix.
"""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path

import attrs
import pyopencl as cl

from .device import describe, enumerate_devices
from .dispatch import STRATEGIES, format_result, run_host_baseline, run_strategy
from .errors import BuildError, ClflopsError, ConfigError, VerificationFailure
from .program import build_program, default_kernel_path, load_kernel_source
from .staging import FLOAT_SIZE, SampleStream, generate

logger = logging.getLogger("clflops")

DEFAULT_SIZE = "512M"
SIZE_SUFFIXES = {"": 1, "M": 10**6, "m": 10**6, "G": 10**9, "g": 10**9}
# range_op takes the element count as an int
MAX_ELEMENTS = 2**31 - 1


@attrs.define(frozen=True, slots=True)
class BenchConfig:
    list_devices: bool = False
    device_index: int | None = None
    workload_bytes: int = 512 * 10**6
    kernel_path: Path | None = None
    host_baseline: bool = False


def parse_size(text: str) -> int:
    m = re.fullmatch(r"\s*(\d+)\s*(\S*)\s*", text)
    if m is None:
        raise ConfigError(f"Invalid size \"{text}\"")
    count, prefix = m.groups()
    if prefix not in SIZE_SUFFIXES:
        raise ConfigError(f"Unidentified size prefix \"{prefix}\"")
    return int(count) * SIZE_SUFFIXES[prefix]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clflops",
        description="Benchmark element-wise sqrt throughput on OpenCL devices.",
    )
    parser.add_argument("-l", "--list", dest="list_devices", action="store_true", help="List devices and exit.")
    parser.add_argument("-s", "--size", default=DEFAULT_SIZE, help="Workload size in bytes, M/G suffix allowed (default: 512M).")
    parser.add_argument("device_index", nargs="?", type=int, default=None, help="Only benchmark this device.")
    parser.add_argument("--kernel", type=Path, default=None, help="Kernel source file (default: vectorops.cl).")
    parser.add_argument("--host-baseline", action="store_true", help="Also time numpy sqrt on the host.")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def resolve_config(ns: argparse.Namespace) -> BenchConfig:
    workload_bytes = parse_size(ns.size)
    elements = workload_bytes // FLOAT_SIZE
    if elements < 1:
        raise ConfigError(f"Size {workload_bytes} is smaller than one float")
    if elements > MAX_ELEMENTS:
        raise ConfigError(f"Size {workload_bytes} exceeds {MAX_ELEMENTS} floats")
    return BenchConfig(
        list_devices=ns.list_devices,
        device_index=ns.device_index,
        workload_bytes=workload_bytes,
        kernel_path=ns.kernel,
        host_baseline=ns.host_baseline,
    )


def benchmark_device(device, source, host):
    """Build for one device and run every strategy on it.

    A bad result skips that strategy's throughput line; the other strategy
    still runs. BuildError and OpenCL errors propagate to the caller.
    """
    print(device.name)
    results = []
    try:
        compiled = build_program(device, source)
        for strategy in STRATEGIES:
            try:
                result = run_strategy(compiled, host, strategy)
            except VerificationFailure as e:
                logger.error("%s: %s", e.strategy_name, e)
                continue
            print(format_result(result))
            results.append(result)
    finally:
        print()
    return results


def run(config: BenchConfig) -> int:
    devices = enumerate_devices()

    if config.list_devices:
        print(describe(devices))
        return 0

    if config.device_index is not None:
        if not 0 <= config.device_index < len(devices):
            raise ConfigError(f"No device {config.device_index} found.")
        targets = [devices[config.device_index]]
    else:
        targets = devices

    source = load_kernel_source(config.kernel_path or default_kernel_path())
    stream = SampleStream()
    host = generate(config.workload_bytes, stream)
    logger.debug("workload: %d floats (%d bytes), seed %d", host.size, host.nbytes, stream.seed)

    if config.host_baseline:
        print(format_result(run_host_baseline(host)))
        print()

    status = 0
    for device in targets:
        try:
            benchmark_device(device, source, host)
        except BuildError as e:
            logger.error("%s\n%s", e, e.log)
            status = 1
        except cl.Error as e:
            logger.error("OpenCL error on %s: %s", device.name, e)
            status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

    try:
        return run(resolve_config(ns))
    except ClflopsError as e:
        logger.error("%s", e)
        return 1
