"""
Engines: JavaScript command streams (script).
"""

from scriptstream.engines.script import CommandStream, ResourceCache, ResourceRef

__all__ = [
    "CommandStream",
    "ResourceCache",
    "ResourceRef",
]
