"""
Relay authentication

The upstream relay proves itself with a pre-shared secret in the
``X-Relay-Key`` header. A server without a configured secret must never
treat the ingest endpoint as open.
"""

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, status

from showdown_vote.core import errors
from showdown_vote.core.config import settings

logger = logging.getLogger(__name__)


async def require_relay_key(x_relay_key: Optional[str] = Header(None, alias="X-Relay-Key")) -> None:
    """FastAPI dependency guarding relay-only endpoints."""
    required = settings.relay_key
    if not required:
        logger.error("RELAY_KEY is not configured; refusing relay request")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=errors.RELAY_KEY_NOT_SET
        )
    if not x_relay_key or not hmac.compare_digest(x_relay_key.encode(), required.encode()):
        logger.warning("Relay request rejected: bad or missing X-Relay-Key")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=errors.UNAUTHORIZED
        )
