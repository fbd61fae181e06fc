"""Tool discovery endpoint router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from finchat_server.dependencies import get_tool_registry
from finchat_server.models.tools import ToolListResponse, ToolSpecResponse
from finchat_server.tools import ToolRegistry

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("", response_model=ToolListResponse, summary="List advertised tools")
async def list_tools(
    registry: Annotated[ToolRegistry, Depends(get_tool_registry)],
) -> ToolListResponse:
    """List every tool the model may request, with its parameter schema."""
    return ToolListResponse(
        tools=[ToolSpecResponse.model_validate(spec.to_dict()) for spec in registry.specs()]
    )
