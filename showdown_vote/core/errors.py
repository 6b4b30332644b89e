"""
Rejection codes shared by services and API routers

Every rejection reaches the caller as ``{"error": CODE}`` so clients can
switch on a stable string instead of parsing messages.
"""

from typing import Optional

INVALID_INPUT = "INVALID_INPUT"
UNAUTHORIZED = "UNAUTHORIZED"
RELAY_KEY_NOT_SET = "RELAY_KEY_NOT_SET"
PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
INVALID_SHOWDOWN = "INVALID_SHOWDOWN"
INVALID_USER = "INVALID_USER"
VOTING_CLOSED = "VOTING_CLOSED"
INTERNAL_ERROR = "INTERNAL_ERROR"

# Finer admission reasons attached to VOTING_CLOSED
STATUS_NOT_OPEN = "STATUS_NOT_OPEN"
NOT_YET_OPEN = "NOT_YET_OPEN"
CLOSED = "CLOSED"
INVALID_WINDOW = "INVALID_WINDOW"

# Success-shaped vote status
ALREADY_VOTED = "ALREADY_VOTED"


def error_body(code: str, reason: Optional[str] = None) -> dict:
    """Build the wire shape for a rejection."""
    body = {"error": code}
    if reason:
        body["reason"] = reason
    return body
