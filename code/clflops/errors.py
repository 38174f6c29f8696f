# error kinds raised by the benchmark harness; main() turns them into exit codes


class ClflopsError(Exception):
    pass


class DiscoveryError(ClflopsError):
    """No OpenCL platform is available, so no device can exist."""


NoPlatformError = DiscoveryError


class ConfigError(ClflopsError):
    """Bad command line input or a missing kernel file."""


class BuildError(ClflopsError):
    def __init__(self, device, log):
        super().__init__(f"Error building for {device.name}. Verify OpenCL installation.")
        self.device = device
        self.log = log


class VerificationFailure(ClflopsError):
    def __init__(self, strategy_name):
        super().__init__("Invalid computation from device.")
        self.strategy_name = strategy_name
