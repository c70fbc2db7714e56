"""
Script engine: JavaScript command streams run on an embedded Duktape interpreter.

Exports: CommandStream, ResourceRef, ResourceCache, Transport, DukpyInterpreter,
get_resource_cache, get_interpreter.
"""

from .interpreter import DukpyInterpreter, Interpreter, get_interpreter
from .resource_cache import ResourceCache, close_resource_cache, get_resource_cache
from .stream import CommandStream, ResourceRef
from .transport import Transport

__all__ = [
    "CommandStream",
    "ResourceRef",
    "ResourceCache",
    "Transport",
    "Interpreter",
    "DukpyInterpreter",
    "get_resource_cache",
    "close_resource_cache",
    "get_interpreter",
]
