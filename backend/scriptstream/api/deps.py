from typing import Annotated

from fastapi import Depends

from scriptstream.engines.script import (
    DukpyInterpreter,
    ResourceCache,
    get_interpreter,
    get_resource_cache,
)

ResourceCacheDep = Annotated[ResourceCache, Depends(get_resource_cache)]
InterpreterDep = Annotated[DukpyInterpreter, Depends(get_interpreter)]
