"""
Embedded JavaScript interpreter (dukpy / Duktape).

CommandStream only needs `execute_source(source)` and the tuple of exception
types that mean "the script failed" (`fault_types`). DukpyInterpreter
provides both and defines the global `print` that the console preamble maps
log/error onto; printed lines go to Python logging.
"""

import logging
import threading
from typing import Any, Protocol

import dukpy

from scriptstream.core.config import settings

_log = logging.getLogger(__name__)

_PRINT_FUNCTION = "scriptstream.print"

_PRINT_JS = (
    "var print = function() {"
    f" call_python('{_PRINT_FUNCTION}', Array.prototype.join.call(arguments, ' '));"
    " };"
)


class Interpreter(Protocol):
    fault_types: tuple[type[BaseException], ...]

    def execute_source(self, source: str) -> Any: ...


class DukpyInterpreter:
    """
    One Duktape context. Global state (variables, the `global` shim) persists
    between execute_source calls on the same instance.
    """

    fault_types: tuple[type[BaseException], ...] = (dukpy.JSRuntimeError,)

    def __init__(self, *, print_logger: logging.Logger | None = None) -> None:
        self._print_log = print_logger or logging.getLogger(settings.JS_PRINT_LOGGER)
        self._lock = threading.Lock()
        self._js = dukpy.JSInterpreter()
        self._js.export_function(_PRINT_FUNCTION, self._print)
        self._js.evaljs(_PRINT_JS)

    def _print(self, message: Any = "") -> None:
        self._print_log.info("%s", message)

    def execute_source(self, source: str) -> Any:
        """Evaluate *source*; return its completion value as JSON-compatible Python, or None."""
        with self._lock:
            return self._js.evaljs(source)


_interpreter: DukpyInterpreter | None = None
_interpreter_lock = threading.Lock()


def get_interpreter() -> DukpyInterpreter:
    """Return the process-wide interpreter, created on first use."""
    global _interpreter
    if _interpreter is None:
        with _interpreter_lock:
            if _interpreter is None:
                _interpreter = DukpyInterpreter()
                _log.debug("Created shared Duktape interpreter")
    return _interpreter
