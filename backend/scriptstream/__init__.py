"""
scriptstream: assemble JavaScript command streams from inline snippets and
cached file/URL resources, and run them on an embedded interpreter.
"""
