"""Errors raised by the kclcat library."""


class KclcatError(RuntimeError):
    """Base class for all the errors emitted by kclcat."""


class ConfigMissing(KclcatError):
    """The configuration is absent or incomplete and setup is needed."""


class AuthFailure(KclcatError):
    """The remote host rejected the access credential."""


class RemoteUnavailable(KclcatError):
    """The remote host returned a non-success status or cannot be reached."""


class NotFound(KclcatError, LookupError):
    """The requested file or revision does not exist on the remote host."""


class CalculationError(KclcatError):
    """The external mass calculation failed or produced malformed output."""


class CacheCorrupt(KclcatError):
    """The local cache file cannot be parsed."""
