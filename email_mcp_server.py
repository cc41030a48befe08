"""
email_mcp_server.py
-------------------
Local stdio MCP server exposing the Resend email tools and prompts.

Register it with any MCP host as a stdio server:
    command: "python"
    args: ["email_mcp_server.py"]
    env: {"RESEND_API_KEY": "re_..."}

stdio has no request headers, so the API key comes from RESEND_API_KEY.
Logs go to stderr; stdout carries the protocol.
"""

import logging

from anyio import to_thread
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

import config
import tools
from prompts import PROMPTS, get_prompt

logger = logging.getLogger(__name__)

server = Server(config.SERVER_NAME)


@server.list_tools()
async def list_tools() -> list[types.Tool]:
    return [
        types.Tool(
            name=entry.name,
            description=entry.description,
            inputSchema=entry.input_schema(),
            annotations=types.ToolAnnotations(**entry.annotations()),
        )
        for entry in tools.TOOLS.values()
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[types.TextContent]:
    logger.info(f"Calling tool: {name}")
    try:
        text = await to_thread.run_sync(
            tools.call_tool, name, arguments, config.RESEND_API_KEY
        )
    except tools.ToolError as e:
        logger.error(f"Tool '{name}' failed: {e}")
        raise ValueError(str(e)) from e

    return [types.TextContent(type="text", text=text)]


@server.list_prompts()
async def list_prompts() -> list[types.Prompt]:
    return [
        types.Prompt(name=entry.name, description=entry.description)
        for entry in PROMPTS.values()
    ]


@server.get_prompt()
async def get_prompt_handler(name: str, arguments: dict | None = None) -> types.GetPromptResult:
    text = get_prompt(name)
    return types.GetPromptResult(
        description=PROMPTS[name].description,
        messages=[
            types.PromptMessage(
                role="user",
                content=types.TextContent(type="text", text=text),
            )
        ],
    )


async def main():
    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options(),
        )


if __name__ == "__main__":
    import asyncio

    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    asyncio.run(main())
