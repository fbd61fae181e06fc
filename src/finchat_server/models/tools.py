"""Pydantic models for the tool discovery endpoint."""

from pydantic import BaseModel, Field


class ToolParameterResponse(BaseModel):
    name: str
    type: str
    description: str
    required: bool


class ToolSpecResponse(BaseModel):
    """A tool as advertised to the model."""

    name: str
    description: str
    parameters: list[ToolParameterResponse] = Field(default_factory=list)


class ToolListResponse(BaseModel):
    tools: list[ToolSpecResponse]
