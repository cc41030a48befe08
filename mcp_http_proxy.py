"""
mcp_http_proxy.py
-----------------
MCP stdio-to-HTTP proxy for the Resend MCP server.

An MCP host spawns this as a stdio server. It reads JSON-RPC 2.0 messages
from stdin, forwards them to the HTTP server with the caller's Resend key in
the ``resend-api-key`` header, and writes responses back to stdout, never
answering notifications (no-id msgs).

Usage:
    command: "python"
    args: ["mcp_http_proxy.py", "https://mcp.example.com"]
    env: {"RESEND_API_KEY": "re_..."}
"""

import json
import logging
import sys
from typing import Optional, TextIO

import requests

import config

logger = logging.getLogger(__name__)


def forward(msg: dict, url: str, api_key: str) -> Optional[dict]:
    """Forward one message. Returns the response to write, or None for notifications."""
    msg_id = msg.get("id")          # None for notifications
    headers = {config.API_KEY_HEADER: api_key} if api_key else {}

    try:
        resp = requests.post(url, json=msg, headers=headers, timeout=config.REQUEST_TIMEOUT)
        resp_data = resp.json() if msg_id is not None else None
    except (requests.RequestException, ValueError) as exc:
        logger.error(f"Forwarding {msg.get('method', '')} failed: {exc}")
        if msg_id is None:
            return None
        return {
            "jsonrpc": "2.0",
            "id": msg_id,
            "error": {"code": -32603, "message": str(exc)},
        }

    # JSON-RPC rule: NEVER respond to notifications (no id)
    if msg_id is None:
        return None
    return resp_data


def run(url: str, api_key: str, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
    for raw_line in stdin:
        line = raw_line.strip()
        if not line:
            continue

        try:
            msg = json.loads(line)
        except json.JSONDecodeError:
            logger.warning(f"Skipping non-JSON line: {line[:80]}")
            continue

        resp_data = forward(msg, url, api_key)
        if resp_data is None:
            continue

        stdout.write(json.dumps(resp_data) + "\n")
        stdout.flush()


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format=config.LOG_FORMAT)
    url = sys.argv[1] if len(sys.argv) > 1 else config.MCP_SERVER_URL
    run(url, config.RESEND_API_KEY)


if __name__ == "__main__":
    main()
