"""Custom exceptions for Hoarder Sync.

All sync-related exceptions inherit from HoarderSyncError, which allows
the sync engine to convert any of them into a failure result with a
single handler.
"""


class HoarderSyncError(Exception):
    """Base class for sync errors.

    Errors that abort (part of) a sync pass inherit from this class.
    """

    pass


class TransportError(HoarderSyncError):
    """Request to the Hoarder API failed.

    Raised for non-2xx responses (status_code is set) and for network
    failures (status_code is None).
    """

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(Exception):
    """Invalid configuration.

    This is NOT a HoarderSyncError - configuration issues should be fixed
    by the operator before a pass can run.
    """

    pass


class ParseError(HoarderSyncError):
    """The API returned a payload that does not look like a bookmark list."""

    pass
