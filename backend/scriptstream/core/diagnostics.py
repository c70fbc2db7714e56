"""
Operator-facing presentation of script faults.

The engine only raises typed faults; this module turns them into a message
and an HTML-escaped <pre> block for the HTTP layer. Nothing here exits the
process.
"""

import html

from scriptstream.core.errors import (
    FetchFailed,
    InterpreterFault,
    LocatorInvalid,
    ResourceUnavailable,
    ScriptStreamError,
)


def describe_fault(exc: ScriptStreamError) -> str:
    """Plain-text description of *exc*, including the server response for failed fetches."""
    reason = exc.reason if isinstance(exc, ResourceUnavailable) else exc
    if isinstance(reason, LocatorInvalid):
        return f"File {reason.locator} not found"
    if isinstance(reason, FetchFailed):
        lines = [f"Resource {reason.locator} could not be loaded."]
        if reason.status is not None:
            lines.append(f"HTTP status: {reason.status}")
        lines.append(f"Server Response: {reason.detail}")
        return "\n".join(lines)
    if isinstance(reason, InterpreterFault):
        return f"{type(reason.detail).__name__}: {reason.detail}"
    return str(reason)


def render_fault_html(exc: ScriptStreamError) -> str:
    """describe_fault() wrapped in <pre>, with HTML special characters escaped."""
    return f"<pre>{html.escape(describe_fault(exc))}</pre>"
