import logging

from fastapi import APIRouter

from scriptstream.api.deps import InterpreterDep, ResourceCacheDep
from scriptstream.engines.script import CommandStream, ResourceCache
from scriptstream.schemas import RenderResponse, ScriptRequest, ScriptResult

_log = logging.getLogger(__name__)

router = APIRouter(prefix="/scripts", tags=["scripts"])


def build_stream(body: ScriptRequest, cache: ResourceCache) -> CommandStream:
    """Apply the request steps, in order, to a fresh CommandStream."""
    stream = CommandStream(cache=cache)
    for step in body.steps:
        if step.file is not None:
            stream.add_file(step.file, step.globals)
        else:
            stream.add_inline(step.inline or "")
    return stream


@router.post("/render")
def render_script(body: ScriptRequest, cache: ResourceCacheDep) -> RenderResponse:
    """
    Assemble the stream without running it.
    """
    stream = build_stream(body, cache)
    return RenderResponse(source=stream.render(), fragments=len(stream))


@router.post("/execute")
def execute_script(
    body: ScriptRequest, cache: ResourceCacheDep, interpreter: InterpreterDep
) -> ScriptResult:
    """
    Assemble the stream and run it; `data` is the completion value of the last statement.
    """
    stream = build_stream(body, cache)
    result = stream.execute(interpreter)
    _log.debug("Executed %d-fragment stream", len(stream))
    return ScriptResult(data=result)
