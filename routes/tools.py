"""
Tool endpoints - list the Godot tools and invoke them over HTTP.

POST /tools/{name} takes the tool arguments as a JSON object and returns
{"result": "<tool output>"}. Failures map to status codes:
- 404: unknown tool
- 422: arguments failed validation (nothing was sent to Godot)
- 400: Godot answered with an error (detail is the message from Godot)
- 503: no Godot connection
- 504: Godot did not answer in time
"""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, HTTPException
from langchain_core.tools import BaseTool
from pydantic import ValidationError

from godot.errors import GodotConnectionError
from godot_tools import GodotCommandError, godot_tools


logger = logging.getLogger("godot_bridge.tools")

router = APIRouter(prefix="/tools", tags=["Tools"])

_tools_by_name: dict[str, BaseTool] = {t.name: t for t in godot_tools}


@router.get("")
async def list_tools() -> list[dict[str, Any]]:
    """List every tool with its description and argument schema."""
    return [
        {
            "name": t.name,
            "description": t.description,
            "args_schema": t.args_schema.model_json_schema(),
        }
        for t in godot_tools
    ]


@router.post("/{tool_name}")
async def invoke_tool(tool_name: str, arguments: dict[str, Any]) -> dict[str, str]:
    """Run one tool call."""
    tool = _tools_by_name.get(tool_name)
    if tool is None:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")

    logger.info(f"Tool call: {tool_name} action={arguments.get('action')}")

    try:
        result = await tool.ainvoke(arguments)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False, include_input=False)
        )
    except GodotCommandError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GodotConnectionError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except asyncio.TimeoutError:
        raise HTTPException(status_code=504, detail=f"Godot did not respond to {tool_name}")

    return {"result": result}
