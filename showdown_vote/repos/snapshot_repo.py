"""
Raw snapshot repository - append-only archive of relay payloads
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, desc
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.models.raw_snapshot import RawSnapshot


async def archive_snapshot(
    session: AsyncSession,
    payload: Dict[str, Any],
    contest_id: Optional[str],
    received_at: datetime
) -> RawSnapshot:
    """
    Append a payload to the archive verbatim.

    Args:
        session: Database session
        payload: Raw relay payload
        contest_id: Best-effort contest id extracted from the payload
        received_at: Receipt time

    Returns:
        Created RawSnapshot instance
    """
    snapshot = RawSnapshot(
        contest_id=contest_id,
        received_at=received_at,
        payload=payload
    )
    session.add(snapshot)
    await session.commit()
    await session.refresh(snapshot)
    return snapshot


async def get_latest_snapshot(session: AsyncSession, contest_id: str) -> Optional[RawSnapshot]:
    """Most recently received payload for a contest."""
    snapshots = await get_snapshots(session, contest_id, limit=1)
    return snapshots[0] if snapshots else None


async def get_snapshots(
    session: AsyncSession,
    contest_id: Optional[str] = None,
    limit: int = 50,
    offset: int = 0
) -> List[RawSnapshot]:
    """
    Get archived snapshots, most recent first.

    Args:
        session: Database session
        contest_id: Filter by contest id
        limit: Maximum number of snapshots to return
        offset: Number of snapshots to skip
    """
    query = select(RawSnapshot).order_by(desc(RawSnapshot.received_at), desc(RawSnapshot.id))

    if contest_id:
        query = query.where(RawSnapshot.contest_id == contest_id)

    query = query.limit(limit).offset(offset)

    result = await session.execute(query)
    return list(result.scalars().all())
