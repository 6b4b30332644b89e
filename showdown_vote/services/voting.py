"""
Vote arbitration and audience registration

Showdown status is owned upstream; the only value that admits votes is
VOTING_OPEN, optionally narrowed by the vote open/close window. The
admission gate always runs against the stored showdown row at the moment
of the write.

Repeat votes follow a first-vote-wins policy: the unique (showdown, user)
key rejects the second insert and the caller is told which choice was
recorded.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.core import errors
from showdown_vote.models.showdown import Showdown
from showdown_vote.repos.audience_user_repo import get_audience_user_by_id, upsert_audience_user
from showdown_vote.repos.entity_repo import get_entity
from showdown_vote.repos.vote_repo import get_vote, insert_vote_if_absent, tally_votes
from showdown_vote.services.normalizer import SIDES, as_utc

# Configure logging
logger = logging.getLogger(__name__)

VOTING_OPEN = "VOTING_OPEN"


def evaluate_admission(
    status: Optional[str],
    now: datetime,
    open_time: Optional[datetime] = None,
    close_time: Optional[datetime] = None
) -> Optional[str]:
    """
    Decide whether a vote may be accepted.

    Returns:
        None when admissible, otherwise the rejection reason
    """
    if status != VOTING_OPEN:
        return errors.STATUS_NOT_OPEN

    now = as_utc(now)
    open_time = as_utc(open_time)
    close_time = as_utc(close_time)

    if open_time and close_time and open_time > close_time:
        return errors.INVALID_WINDOW
    if open_time and now < open_time:
        return errors.NOT_YET_OPEN
    if close_time and now > close_time:
        return errors.CLOSED
    return None


def is_voting_admissible(
    status: Optional[str],
    now: datetime,
    open_time: Optional[datetime] = None,
    close_time: Optional[datetime] = None
) -> bool:
    return evaluate_admission(status, now, open_time, close_time) is None


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def register_user(session: AsyncSession, name: str, email: str) -> Dict[str, Any]:
    """
    Register or re-register an audience user.

    Keyed on the normalized email, so calling this on every app load never
    creates a second identity; the display name follows the latest call.
    """
    name = (name or "").strip()
    email = normalize_email(email)
    if not name or not email:
        return {"ok": False, "error": errors.INVALID_INPUT}

    user_id = await upsert_audience_user(session, name, email)
    return {"ok": True, "userId": str(user_id)}


def _parse_user_id(user_id) -> Optional[UUID]:
    if isinstance(user_id, UUID):
        return user_id
    try:
        return UUID(str(user_id))
    except (TypeError, ValueError):
        return None


async def cast_vote(
    session: AsyncSession,
    user_id,
    showdown_id: str,
    choice: str,
    now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Cast a vote for one side of a showdown.

    Args:
        session: Database session
        user_id: Audience user id (UUID or its string form)
        showdown_id: Upstream showdown id
        choice: "RED" or "BLUE"
        now: Evaluation time (defaults to now)

    Returns:
        ``{"ok": True}`` for a new vote,
        ``{"ok": True, "status": "ALREADY_VOTED", "existingChoice": ...}`` for a repeat,
        ``{"ok": False, "error": CODE[, "reason": ...]}`` on rejection
    """
    if choice not in SIDES:
        return {"ok": False, "error": errors.INVALID_INPUT}

    # Step 1: Showdown must exist
    showdown = await get_entity(session, Showdown, showdown_id)
    if showdown is None:
        return {"ok": False, "error": errors.INVALID_SHOWDOWN}

    # Step 2: Admission gate against the stored row
    now = now or datetime.now(timezone.utc)
    reason = evaluate_admission(showdown.status, now, showdown.vote_open_time, showdown.vote_close_time)
    if reason:
        logger.info(f"Vote rejected for showdown {showdown_id}: {reason}")
        return {"ok": False, "error": errors.VOTING_CLOSED, "reason": reason}

    # Step 3: User must exist
    user_uuid = _parse_user_id(user_id)
    user = await get_audience_user_by_id(session, user_uuid) if user_uuid else None
    if user is None:
        return {"ok": False, "error": errors.INVALID_USER}

    # Step 4: Conditional insert decides duplicates
    if await insert_vote_if_absent(session, showdown.id, user.id, choice):
        return {"ok": True}

    existing = await get_vote(session, showdown.id, user.id)
    return {
        "ok": True,
        "status": errors.ALREADY_VOTED,
        "existingChoice": existing.choice if existing else choice,
    }


async def get_tally(session: AsyncSession, showdown_id: str) -> Dict[str, int]:
    """Current red/blue counts for a showdown, aggregated at request time."""
    return await tally_votes(session, showdown_id)
