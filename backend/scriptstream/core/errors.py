"""
Fault taxonomy for command stream assembly and execution.

LocatorInvalid and FetchFailed come from resource resolution; CommandStream
wraps either one in ResourceUnavailable. InterpreterFault wraps whatever the
embedded engine raised. TransportError is the transport layer's own failure,
translated to FetchFailed by the cache.
"""

from typing import Any


class ScriptStreamError(Exception):
    """Base class for all scriptstream faults."""

    pass


class TransportError(Exception):
    """Raised by Transport when a remote fetch does not succeed."""

    def __init__(self, message: str, *, status: int | None = None, payload: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload


class LocatorInvalid(ScriptStreamError):
    """Locator is neither an existing local file nor a valid remote address."""

    def __init__(self, locator: str) -> None:
        super().__init__(f"Resource {locator} not found")
        self.locator = locator


class FetchFailed(ScriptStreamError):
    """Locator looked like a remote address but could not be fetched."""

    def __init__(self, locator: str, *, status: int | None = None, detail: str = "") -> None:
        msg = f"Resource {locator} could not be loaded"
        if status is not None:
            msg += f" (HTTP {status})"
        super().__init__(msg)
        self.locator = locator
        self.status = status
        self.detail = detail


class ResourceUnavailable(ScriptStreamError):
    """Raised by CommandStream.add_file; `reason` is the LocatorInvalid or FetchFailed."""

    def __init__(self, locator: str, reason: LocatorInvalid | FetchFailed) -> None:
        super().__init__(str(reason))
        self.locator = locator
        self.reason = reason


class InterpreterFault(ScriptStreamError):
    """The embedded interpreter failed while executing the assembled stream."""

    def __init__(self, detail: Any) -> None:
        super().__init__(f"Script execution failed: {detail}")
        self.detail = detail
