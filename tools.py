"""
tools.py
--------
Resend email tools exposed over MCP.

    send-email               → send now, or schedule with a free-form scheduledAt
    schedule-email-advanced  → schedule with an explicit scheduling option
    list-emails              → list sent / scheduled emails

Both servers (stdio and HTTP) dispatch through call_tool(); they only differ
in where the Resend API key comes from.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Type

import requests
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationError

from resend_client import ResendClient
from scheduling import (
    ScheduleMode,
    ScheduleRequest,
    ScheduleValidationError,
    mode_for_value,
    normalize,
)

logger = logging.getLogger(__name__)

DEFAULT_SENDER = "Resend MCP <onboarding@resend.dev>"

_ASK_USER = "You MUST ask the user for this parameter. Under no circumstance provide it yourself"


# ─────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────

class ToolError(Exception):
    """A failure reported back to the calling host. The message is user-facing."""


class UnknownTool(ToolError):
    pass


class InvalidArguments(ToolError):
    pass


# ─────────────────────────────────────────────
# Argument models
# ─────────────────────────────────────────────

class _EmailArgs(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to: EmailStr = Field(..., description="Recipient email address")
    subject: str = Field(..., description="Email subject line")
    text: str = Field(..., description="Plain text email content")
    from_: Optional[EmailStr] = Field(
        None,
        alias="from",
        description=(
            f"Sender email address. {_ASK_USER}. If the user doesn't provide a sender "
            "email address, you can use `onboarding@resend.dev`"
        ),
    )
    html: Optional[str] = Field(
        None,
        description="HTML email content, only do this if you need special formatting or the user asks for it.",
    )
    cc: Optional[List[EmailStr]] = Field(
        None, description=f"Optional array of CC email addresses. {_ASK_USER}"
    )
    bcc: Optional[List[EmailStr]] = Field(
        None, description=f"Optional array of BCC email addresses. {_ASK_USER}"
    )
    replyTo: Optional[List[EmailStr]] = Field(
        None,
        description=f"Optional email addresses for the email readers to reply to. {_ASK_USER}",
    )


class SendEmailArgs(_EmailArgs):
    scheduledAt: Optional[str] = Field(
        None,
        description=(
            "Optional parameter to schedule the email. Accepts natural language "
            "(e.g., 'tomorrow at 10am EST', 'in 2 hours', 'Friday at 3pm ET') or ISO 8601 "
            "date format (e.g., '2024-12-25T10:00:00Z'). Maximum 30 days in advance."
        ),
    )


class ScheduleEmailAdvancedArgs(_EmailArgs):
    schedulingOption: ScheduleMode = Field(
        ...,
        description=(
            "Choose how to specify the schedule time: natural_language (e.g., \"tomorrow at 9am\"), "
            "iso_date (ISO 8601 format), or relative_time (e.g., \"in 2 hours\")"
        ),
    )
    scheduleValue: str = Field(
        ...,
        description=(
            "The schedule value based on the chosen option. Examples: \"tomorrow at 10am EST\", "
            "\"2024-12-25T10:00:00Z\", \"in 30 minutes\""
        ),
    )
    timezone: Optional[str] = Field(
        None,
        description=(
            "Timezone for the scheduled time (e.g., \"America/New_York\", \"UTC\"). "
            "Only needed for natural language scheduling."
        ),
    )


class ListEmailsArgs(BaseModel):
    limit: int = Field(20, ge=1, le=100, description="Number of emails to retrieve (1-100, default: 20)")
    offset: int = Field(0, ge=0, description="Number of emails to skip (for pagination)")


# ─────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────

def require_api_key(api_key: Optional[str]) -> str:
    if not api_key:
        raise ToolError("API key is required. Please provide resend-api-key header.")
    return api_key


def _normalize_schedule(request: ScheduleRequest, now: Optional[datetime]) -> str:
    try:
        schedule = normalize(request, now or datetime.now(timezone.utc))
    except ScheduleValidationError as e:
        raise ToolError(f"Scheduling validation failed: {e}") from e
    return schedule.value


def build_email_request(args: _EmailArgs, scheduled_at: Optional[str] = None) -> Dict[str, Any]:
    """Outbound request with only the optional fields the caller actually set."""
    email_request: Dict[str, Any] = {
        "to": args.to,
        "subject": args.subject,
        "text": args.text,
        "from": args.from_ or DEFAULT_SENDER,
    }
    if args.replyTo:
        email_request["replyTo"] = list(args.replyTo)
    if args.html:
        email_request["html"] = args.html
    if scheduled_at:
        email_request["scheduledAt"] = scheduled_at
    if args.cc:
        email_request["cc"] = list(args.cc)
    if args.bcc:
        email_request["bcc"] = list(args.bcc)
    return email_request


def _log_request(label: str, email_request: Dict[str, Any]) -> None:
    summary = {k: v for k, v in email_request.items() if k not in ("text", "html")}
    logger.info(f"{label}: {json.dumps(summary)}")


def _deliver(api_key: str, email_request: Dict[str, Any], verb: str) -> Dict[str, Any]:
    client = ResendClient(api_key)
    try:
        response = client.send_email(email_request)
    except requests.RequestException as e:
        raise ToolError(f"Failed to {verb} email: {e}") from e

    if response.error:
        raise ToolError(f"Failed to {verb} email: {json.dumps(response.error)}")
    return response.data or {}


# ─────────────────────────────────────────────
# Tool handlers
# ─────────────────────────────────────────────

def send_email(args: SendEmailArgs, api_key: str, now: Optional[datetime] = None) -> str:
    """Send an email now, or schedule it when scheduledAt is given."""
    api_key = require_api_key(api_key)

    scheduled_at = None
    if args.scheduledAt:
        scheduled_at = _normalize_schedule(
            ScheduleRequest(mode=mode_for_value(args.scheduledAt), raw_value=args.scheduledAt),
            now,
        )

    action = "Scheduling" if scheduled_at else "Sending"
    logger.info(
        f"{action} email with from: {args.from_}"
        + (f", scheduled for: {scheduled_at}" if scheduled_at else "")
    )

    email_request = build_email_request(args, scheduled_at)
    _log_request("Email request", email_request)

    data = _deliver(api_key, email_request, "schedule" if scheduled_at else "send")

    if scheduled_at:
        return (
            f"Email scheduled successfully! Email ID: {data.get('id')}\n"
            f"Scheduled for: {scheduled_at}\n"
            f"Recipient: {args.to}\n"
            f"Subject: {args.subject}"
        )
    return f"Email sent successfully! {json.dumps(data)}"


def schedule_email_advanced(
    args: ScheduleEmailAdvancedArgs, api_key: str, now: Optional[datetime] = None
) -> str:
    """Schedule an email with an explicit scheduling option."""
    api_key = require_api_key(api_key)

    scheduled_at = _normalize_schedule(
        ScheduleRequest(
            mode=args.schedulingOption,
            raw_value=args.scheduleValue,
            timezone=args.timezone,
        ),
        now,
    )

    logger.info(
        f"Scheduling email with option: {args.schedulingOption.value}, "
        f"value: {args.scheduleValue}, formatted: {scheduled_at}"
    )

    email_request = build_email_request(args, scheduled_at)
    _log_request("Advanced email request", email_request)

    data = _deliver(api_key, email_request, "schedule")

    return (
        f"Email scheduled successfully!\n"
        f"Email ID: {data.get('id')}\n"
        f"Scheduled for: {scheduled_at}\n"
        f"Recipient: {args.to}\n"
        f"Subject: {args.subject}"
    )


def list_emails(args: ListEmailsArgs, api_key: str) -> str:
    """List emails from the Resend account, including scheduled ones."""
    api_key = require_api_key(api_key)
    logger.info(f"Listing emails with limit: {args.limit}, offset: {args.offset}")

    client = ResendClient(api_key)
    try:
        response = client.list_emails(limit=args.limit, offset=args.offset)
    except requests.RequestException as e:
        raise ToolError(f"Failed to list emails: {e}") from e

    if response.error:
        raise ToolError(f"Failed to list emails: {json.dumps(response.error)}")

    emails = (response.data or {}).get("data") or []
    summary = []
    for email in emails:
        item = {
            "id": email.get("id"),
            "to": email.get("to"),
            "subject": email.get("subject"),
            "created_at": email.get("created_at"),
            "last_event": email.get("last_event"),
        }
        if email.get("scheduled_at"):
            item["scheduled_at"] = email["scheduled_at"]
        summary.append(item)

    total = (response.data or {}).get("total", len(summary))
    return f"Emails retrieved successfully! Total: {total}\n\nEmails:\n{json.dumps(summary, indent=2)}"


# ─────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────

@dataclass
class ToolSpec:
    name: str
    title: str
    description: str
    args_model: Type[BaseModel]
    handler: Callable[..., str]
    read_only: bool = False
    idempotent: bool = False

    def input_schema(self) -> Dict[str, Any]:
        return self.args_model.model_json_schema(by_alias=True)

    def annotations(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "readOnlyHint": self.read_only,
            "destructiveHint": False,
            "idempotentHint": self.idempotent,
        }

    def to_mcp(self) -> Dict[str, Any]:
        """Tool entry as returned by tools/list."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
            "annotations": self.annotations(),
        }


TOOLS: Dict[str, ToolSpec] = {
    entry.name: entry
    for entry in [
        ToolSpec(
            name="send-email",
            title="Send Email",
            description="Send an email using Resend",
            args_model=SendEmailArgs,
            handler=send_email,
        ),
        ToolSpec(
            name="schedule-email-advanced",
            title="Schedule Email (Advanced)",
            description=(
                "Schedule an email with advanced scheduling options and validation. "
                "Provides better control over timing and timezone handling."
            ),
            args_model=ScheduleEmailAdvancedArgs,
            handler=schedule_email_advanced,
        ),
        ToolSpec(
            name="list-emails",
            title="List Emails",
            description="List emails from your Resend account, including sent and scheduled emails",
            args_model=ListEmailsArgs,
            handler=list_emails,
            read_only=True,
            idempotent=True,
        ),
    ]
}


def call_tool(name: str, arguments: Optional[Dict[str, Any]], api_key: Optional[str]) -> str:
    """Validate arguments, check the credential, and run the named tool."""
    entry = TOOLS.get(name)
    if entry is None:
        raise UnknownTool(f"Unknown tool: {name}")

    try:
        args = entry.args_model.model_validate(arguments or {})
    except ValidationError as e:
        raise InvalidArguments(f"Invalid arguments for {name}: {e}") from e

    require_api_key(api_key)
    return entry.handler(args, api_key)
