class HarnessError(Exception):
    """Base class for every failure raised by the webapp harness."""


class PortAllocationError(HarnessError):
    """No unused local port could be obtained."""


class SpawnError(HarnessError):
    """The dev server process could not be started."""


class DiscoveryError(HarnessError):
    """The dev server output closed or was malformed before its URL was found."""


class StartupTimeoutError(HarnessError):
    """The dev server did not become ready before the startup deadline."""


class ShutdownDeliveryError(HarnessError):
    """The graceful stop request could not be delivered to the admin server."""


class ShutdownTimeoutError(HarnessError):
    """The dev server did not exit within the grace period after /quit."""


class ProcessExitError(HarnessError):
    """The dev server exited abnormally during a normal close."""

    def __init__(self, returncode: int):
        super().__init__(f"dev server exited with status {returncode}")
        self.returncode = returncode


class InstanceStateError(HarnessError):
    """An operation was called in a lifecycle state that does not allow it."""


class SeedError(HarnessError):
    """The static data seeding command failed."""
