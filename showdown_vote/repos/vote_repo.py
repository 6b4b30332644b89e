"""
Vote repository - conditional insert and tally aggregation
"""

from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import dialect_insert
from showdown_vote.models.vote import Vote


async def insert_vote_if_absent(
    session: AsyncSession,
    showdown_id: str,
    user_id: UUID,
    choice: str
) -> bool:
    """
    Record a vote unless one already exists for (showdown, user).

    The unique constraint decides the race: concurrent requests from the
    same user, on any server instance, produce exactly one row.

    Returns:
        True if this call created the row, False on collision
    """
    stmt = dialect_insert(session, Vote).values(
        showdown_id=showdown_id,
        user_id=user_id,
        choice=choice
    )
    stmt = stmt.on_conflict_do_nothing(index_elements=[Vote.showdown_id, Vote.user_id])
    result = await session.execute(stmt)
    await session.commit()
    return result.rowcount == 1


async def get_vote(session: AsyncSession, showdown_id: str, user_id: UUID) -> Optional[Vote]:
    """Get the stored vote for (showdown, user)."""
    result = await session.execute(
        select(Vote)
        .where(Vote.showdown_id == showdown_id, Vote.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def tally_votes(session: AsyncSession, showdown_id: str) -> Dict[str, int]:
    """
    Count committed votes per side at request time.

    Returns:
        {"red": int, "blue": int}
    """
    result = await session.execute(
        select(Vote.choice, func.count())
        .where(Vote.showdown_id == showdown_id)
        .group_by(Vote.choice)
    )
    counts = {choice: count for choice, count in result.all()}
    return {"red": int(counts.get("RED", 0)), "blue": int(counts.get("BLUE", 0))}
