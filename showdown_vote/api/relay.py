"""
Relay ingestion endpoint

The upstream system of record pushes snapshots here. Bodies are accepted
as any JSON object; shape drift is absorbed by the normalizer.
"""

import json
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.core import errors
from showdown_vote.core.auth import require_relay_key
from showdown_vote.core.config import settings
from showdown_vote.core.metrics import INGEST_COUNT
from showdown_vote.db.session import get_db
from showdown_vote.services.ingestion import ingest_snapshot

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/relay/state", dependencies=[Depends(require_relay_key)])
async def receive_state_snapshot(
    request: Request,
    session: AsyncSession = Depends(get_db)
):
    """
    Receive a contest state snapshot from the relay.

    Returns ``{"ok": true}`` once every usable sub-object has been stored.
    """
    body = await request.body()
    if len(body) > settings.max_snapshot_bytes:
        INGEST_COUNT.labels(status="too_large").inc()
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=errors.PAYLOAD_TOO_LARGE
        )

    try:
        payload = json.loads(body)
    except ValueError:
        INGEST_COUNT.labels(status="invalid").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors.INVALID_INPUT)

    result = await ingest_snapshot(session, payload)
    if not result["ok"]:
        INGEST_COUNT.labels(status="invalid").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])

    INGEST_COUNT.labels(status="ok").inc()
    return {"ok": True}
