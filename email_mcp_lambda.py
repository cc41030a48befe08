"""
email_mcp_lambda.py
-------------------
HTTP MCP server (JSON-RPC 2.0 on POST /) for the Resend email tools.

Start:
    uvicorn email_mcp_lambda:app --port 8000

Each caller passes its own Resend key in the ``resend-api-key`` header;
requests without it are refused.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

import config
import tools
from prompts import PROMPTS, get_prompt

logger = logging.getLogger(__name__)

app = FastAPI(title="Resend MCP Server", version=config.SERVER_VERSION)

# JSON-RPC error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
TOOL_ERROR = -32000


def _result(request_id: Any, result: dict) -> JSONResponse:
    return JSONResponse({"jsonrpc": "2.0", "id": request_id, "result": result})


def _error(request_id: Any, code: int, message: str) -> JSONResponse:
    return JSONResponse({
        "jsonrpc": "2.0",
        "id": request_id,
        "error": {"code": code, "message": message},
    })


def _api_key(request: Request) -> Optional[str]:
    return request.headers.get(config.API_KEY_HEADER) or None


# -------------------------------------------------------
# Health check
# -------------------------------------------------------
@app.get("/")
async def health():
    return {"status": "ok", "service": "resend-mcp-server"}


# -------------------------------------------------------
# MCP JSON-RPC 2.0 handler
# -------------------------------------------------------
@app.post("/")
async def mcp_handler(request: Request):
    try:
        body = await request.json()
    except ValueError:
        return _error(None, PARSE_ERROR, "Parse error")
    if not isinstance(body, dict):
        return _error(None, INVALID_REQUEST, "Invalid request")

    method = body.get("method", "")
    params = body.get("params") or {}
    request_id = body.get("id")

    # --- notifications (no id) → never respond ---
    if request_id is None:
        return Response(status_code=204)

    if not isinstance(params, dict):
        return _error(request_id, INVALID_PARAMS, "params must be an object")

    # --- initialize ---
    if method == "initialize":
        return _result(request_id, {
            "protocolVersion": config.PROTOCOL_VERSION,
            "serverInfo": {"name": config.SERVER_NAME, "version": config.SERVER_VERSION},
            "capabilities": {"tools": {}, "prompts": {}},
        })

    # --- tools/list ---
    elif method == "tools/list":
        return _result(request_id, {"tools": [entry.to_mcp() for entry in tools.TOOLS.values()]})

    # --- tools/call ---
    elif method == "tools/call":
        tool_name = params.get("name")
        arguments = params.get("arguments") or {}
        logger.info(f"Calling tool: {tool_name}")

        try:
            text = await run_in_threadpool(tools.call_tool, tool_name, arguments, _api_key(request))
        except tools.UnknownTool as e:
            return _error(request_id, METHOD_NOT_FOUND, str(e))
        except tools.InvalidArguments as e:
            return _error(request_id, INVALID_PARAMS, str(e))
        except tools.ToolError as e:
            logger.error(f"Tool '{tool_name}' failed: {e}")
            return _error(request_id, TOOL_ERROR, str(e))

        return _result(request_id, {"content": [{"type": "text", "text": text}]})

    # --- prompts/list ---
    elif method == "prompts/list":
        return _result(request_id, {
            "prompts": [
                {"name": entry.name, "title": entry.title, "description": entry.description}
                for entry in PROMPTS.values()
            ]
        })

    # --- prompts/get ---
    elif method == "prompts/get":
        name = params.get("name")
        try:
            text = get_prompt(name)
        except ValueError as e:
            return _error(request_id, METHOD_NOT_FOUND, str(e))

        return _result(request_id, {
            "description": PROMPTS[name].description,
            "messages": [{"role": "user", "content": {"type": "text", "text": text}}],
        })

    # --- unknown method ---
    else:
        return _error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    uvicorn.run(app, host="0.0.0.0", port=8000)
