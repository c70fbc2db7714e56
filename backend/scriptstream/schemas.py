"""
Pydantic schemas for the /scripts API.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator


class ScriptStep(BaseModel):
    """One step of a stream: either `inline` source or a `file` (path or URL) with optional `globals`."""

    inline: str | None = None
    file: str | None = Field(default=None, min_length=1)
    globals: str | list[str] | None = None

    @model_validator(mode="after")
    def exactly_one_source(self) -> "ScriptStep":
        if (self.inline is None) == (self.file is None):
            raise ValueError("Each step needs exactly one of 'inline' or 'file'.")
        if self.inline is not None and self.globals is not None:
            raise ValueError("'globals' only applies to 'file' steps.")
        return self


class ScriptRequest(BaseModel):
    """Body for POST /scripts/render and /scripts/execute. Steps are applied in order."""

    steps: list[ScriptStep] = Field(default_factory=list)


class RenderResponse(BaseModel):
    source: str
    fragments: int


class ScriptResult(BaseModel):
    success: bool = True
    message: str | None = None
    data: Any = None
