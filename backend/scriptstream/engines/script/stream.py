"""
CommandStream: ordered, append-only assembly of one executable JS source.

Every stream starts with two preamble lines (a console stub whose log/error
map to `print`, and an empty `global` object). After that come inline
snippets, resource bodies from the ResourceCache and `var X = global.X`
export lines, in call order. render() joins them with newlines; execute()
hands the result to an interpreter.

    stream = CommandStream()
    stream.add_files([
        {"file": "/path/to/react.min.js", "globals": "React"},
        {"file": "https://cdn.example.com/plugins.min.js", "globals": ["jQuery", "$"]},
    ])
    stream.add_inline("React.version")
    stream.execute()
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scriptstream.core.errors import FetchFailed, InterpreterFault, LocatorInvalid, ResourceUnavailable

from .interpreter import Interpreter, get_interpreter
from .resource_cache import ResourceCache, get_resource_cache

_log = logging.getLogger(__name__)

CONSOLE_PREAMBLE = "var console = {warn: function(){}, log: print, error: print}"
GLOBAL_PREAMBLE = "var global = {}"
FRAGMENT_SEPARATOR = "\n"


def _normalize_globals(names: str | Sequence[str] | None) -> tuple[str, ...]:
    if not names:
        return ()
    if isinstance(names, str):
        return (names,)
    return tuple(names)


def export_statement(name: str) -> str:
    """Statement re-declaring `global.<name>` as a top-level variable."""
    return f"var {name} = global.{name}"


class ResourceRef(BaseModel):
    """A resource to add: `file` (path or URL) and the globals it exposes."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    locator: str = Field(alias="file")
    exposed_globals: tuple[str, ...] = Field(default=(), alias="globals")

    @field_validator("exposed_globals", mode="before")
    @classmethod
    def _one_or_many(cls, v: Any) -> Any:
        if not v or isinstance(v, str):
            return _normalize_globals(v)
        return v


class CommandStream:
    """
    Per-session command stream. Resources resolve through *cache* (default:
    the process-wide cache); execute() uses *interpreter* if given, else the
    shared one.
    """

    def __init__(
        self,
        *,
        cache: ResourceCache | None = None,
        interpreter: Interpreter | None = None,
    ) -> None:
        self._cache = cache if cache is not None else get_resource_cache()
        self._interpreter = interpreter
        self._commands: list[str] = [CONSOLE_PREAMBLE, GLOBAL_PREAMBLE]

    def __len__(self) -> int:
        return len(self._commands)

    @property
    def fragments(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def add_inline(self, snippet: str) -> None:
        """Append *snippet* as-is. Syntax is the caller's responsibility."""
        self._commands.append(snippet)

    def add_command(self, command: str) -> None:
        self.add_inline(command)

    def add_file(self, locator: str, globals: str | Sequence[str] | None = None) -> None:
        """
        Append the body of *locator* (file path or URL), then one
        `var name = global.name` line per name in *globals*.

        Raises ResourceUnavailable if the locator cannot be resolved; nothing
        is appended in that case.
        """
        names = _normalize_globals(globals)
        try:
            body = self._cache.resolve(locator)
        except (LocatorInvalid, FetchFailed) as e:
            raise ResourceUnavailable(locator, e) from e
        self._commands.append(body)
        self._commands.extend(export_statement(name) for name in names)

    def add_files(self, entries: Iterable[ResourceRef | Mapping[str, Any]]) -> None:
        """
        add_file for each entry in order. Entries are ResourceRef or mappings
        with `file` and optional `globals`. Stops at the first failure;
        entries already added stay in the stream.
        """
        for entry in entries:
            ref = entry if isinstance(entry, ResourceRef) else ResourceRef.model_validate(entry)
            self.add_file(ref.locator, ref.exposed_globals)

    def render(self) -> str:
        """The whole stream as one source string."""
        return FRAGMENT_SEPARATOR.join(self._commands)

    def get_command_stream(self) -> str:
        return self.render()

    def execute(self, interpreter: Interpreter | None = None) -> Any:
        """
        Run render() on *interpreter* (or the one given at construction, or the
        shared interpreter) and return the script's completion value.

        Raises InterpreterFault if the engine reports an error.
        """
        interp = interpreter if interpreter is not None else self._interpreter
        if interp is None:
            interp = get_interpreter()
        source = self.render()
        try:
            return interp.execute_source(source)
        except interp.fault_types as e:
            _log.debug("Interpreter fault on %d-fragment stream: %s", len(self._commands), e)
            raise InterpreterFault(e) from e
