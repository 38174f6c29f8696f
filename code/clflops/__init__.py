"""Element-wise sqrt throughput benchmark for OpenCL devices."""
from .cli import main

__all__ = ["main"]
