"""
Snapshot ingestion

Turns a relay payload into upserts against the entity tables. Order
matters for referential correctness: archive, contest (and the active
pointer), showdowns, couples, dancers. Sub-objects are handled one at a
time; an unusable one is skipped so a partial snapshot never costs
previously known state.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.core import errors
from showdown_vote.models.contest import Contest
from showdown_vote.models.couple import Couple
from showdown_vote.models.dancer import Dancer
from showdown_vote.models.showdown import Showdown
from showdown_vote.repos.app_state_repo import get_active_contest_id, set_active_contest
from showdown_vote.repos.entity_repo import upsert_entity
from showdown_vote.repos.snapshot_repo import archive_snapshot
from showdown_vote.services.normalizer import (
    embedded_couple_objects,
    embedded_dancers,
    extract_contest_id,
    is_contest_record,
    normalize_contest,
    normalize_couple,
    normalize_dancer,
    normalize_showdown,
    records,
    snapshot_section,
)

# Configure logging
logger = logging.getLogger(__name__)


def _sections(payload: Dict[str, Any], contest_raw: Any, section: str) -> List[Dict[str, Any]]:
    """Collect a child collection from the top level and from inside the contest object."""
    items = records(snapshot_section(payload, section))
    if isinstance(contest_raw, dict) and contest_raw is not payload:
        items.extend(records(snapshot_section(contest_raw, section)))
    return items


def _active_showdown_raw(payload: Dict[str, Any], contest_raw: Any) -> Optional[Dict[str, Any]]:
    active_raw = snapshot_section(payload, "active_showdown")
    if not isinstance(active_raw, dict) and isinstance(contest_raw, dict):
        active_raw = snapshot_section(contest_raw, "active_showdown")
    return active_raw if isinstance(active_raw, dict) else None


async def _store(session: AsyncSession, model, row: Dict[str, Any], seen: set) -> bool:
    """
    Upsert one item, skipping it when the store refuses the write.

    Earlier items are already committed, so a rollback here only discards
    this item.
    """
    try:
        await upsert_entity(session, model, row)
    except (SQLAlchemyError, OverflowError) as e:
        await session.rollback()
        logger.debug(f"Skipping {model.__name__} {row['id']}: store rejected it: {e}")
        return False
    seen.add(row["id"])
    return True


async def _upsert_dancers(session: AsyncSession, dancer_rows: List[Dict[str, Any]], seen: set) -> None:
    for row in dancer_rows:
        await _store(session, Dancer, row, seen)


async def ingest_snapshot(
    session: AsyncSession,
    payload: Any,
    received_at: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Ingest one relay snapshot.

    Args:
        session: Database session
        payload: Decoded JSON body; must be an object
        received_at: Receipt time (defaults to now)

    Returns:
        ``{"ok": True, "contestId", "showdowns", "couples", "dancers"}`` or
        ``{"ok": False, "error": "INVALID_INPUT"}`` for a non-object payload
    """
    if not isinstance(payload, dict):
        return {"ok": False, "error": errors.INVALID_INPUT}

    received_at = received_at or datetime.now(timezone.utc)

    contest_raw = payload if is_contest_record(payload) else snapshot_section(payload, "contest")
    contest_row = normalize_contest(contest_raw)
    active_raw = _active_showdown_raw(payload, contest_raw)

    # Step 1: Archive the payload verbatim
    archive_contest_id = contest_row["id"] if contest_row else extract_contest_id(payload)
    await archive_snapshot(session, payload, archive_contest_id, received_at)

    # Step 2: Contest and the active pointer
    if contest_row:
        if contest_row.get("active_showdown_id") is None and active_raw is not None:
            active_row = normalize_showdown(active_raw)
            if active_row is not None:
                contest_row["active_showdown_id"] = active_row["id"]
        if await _store(session, Contest, contest_row, set()):
            await set_active_contest(session, contest_row["id"])
        contest_id = contest_row["id"]
    else:
        contest_id = archive_contest_id or await get_active_contest_id(session)

    showdown_ids = set()
    couple_ids = set()
    dancer_ids = set()

    # Step 3: Active showdown first, then the bracket
    showdown_raws = ([active_raw] if active_raw is not None else []) + _sections(payload, contest_raw, "bracket")
    for raw in showdown_raws:
        row = normalize_showdown(raw, contest_id)
        if row is None or row.get("contest_id") is None:
            logger.debug(f"Skipping showdown without id or contest: {raw!r:.200}")
            continue
        await _store(session, Showdown, row, showdown_ids)

        for couple_raw in embedded_couple_objects(raw):
            couple_row = normalize_couple(couple_raw, row["contest_id"])
            if couple_row is not None:
                await _store(session, Couple, couple_row, couple_ids)
            await _upsert_dancers(session, embedded_dancers(couple_raw), dancer_ids)

    # Step 4: Pairings and their dancers
    for raw in _sections(payload, contest_raw, "pairings"):
        row = normalize_couple(raw, contest_id)
        if row is None:
            logger.debug(f"Skipping couple without id: {raw!r:.200}")
            continue
        await _store(session, Couple, row, couple_ids)
        await _upsert_dancers(session, embedded_dancers(raw), dancer_ids)

    for raw in _sections(payload, contest_raw, "dancers"):
        row = normalize_dancer(raw)
        if row is None:
            logger.debug(f"Skipping dancer without id: {raw!r:.200}")
            continue
        await _upsert_dancers(session, [row], dancer_ids)

    logger.info(
        f"Ingested snapshot for contest {contest_id}: "
        f"{len(showdown_ids)} showdowns, {len(couple_ids)} couples, {len(dancer_ids)} dancers"
    )

    return {
        "ok": True,
        "contestId": contest_id,
        "showdowns": len(showdown_ids),
        "couples": len(couple_ids),
        "dancers": len(dancer_ids),
    }
