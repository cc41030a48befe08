"""
config.py
---------
Environment-driven settings. Values come from the process environment,
optionally seeded from a local .env file.
"""

import os

from dotenv import load_dotenv

load_dotenv()

# ── Resend ────────────────────────────────────────────────────────────────────

# Used by the stdio server (no request headers there) and by the proxy.
RESEND_API_KEY: str = os.getenv("RESEND_API_KEY", "")
RESEND_API_URL: str = os.getenv("RESEND_API_URL", "https://api.resend.com").rstrip("/")
REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))

# Header the HTTP server reads the caller's key from
API_KEY_HEADER = "resend-api-key"

# ── MCP ───────────────────────────────────────────────────────────────────────

MCP_SERVER_URL: str = os.getenv("MCP_SERVER_URL", "http://localhost:8000")
SERVER_NAME = "resend"
SERVER_VERSION = "1.0.0"
PROTOCOL_VERSION = "2024-11-05"

# ── Logging ───────────────────────────────────────────────────────────────────

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"
