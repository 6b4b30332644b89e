"""
App state repository - the single active-contest pointer row
"""

from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import dialect_insert
from showdown_vote.models.app_state import AppState, APP_STATE_ID


async def get_app_state(session: AsyncSession) -> Optional[AppState]:
    """Get the singleton app state row, or None before the first ingestion."""
    result = await session.execute(
        select(AppState)
        .where(AppState.id == APP_STATE_ID)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_active_contest_id(session: AsyncSession) -> Optional[str]:
    state = await get_app_state(session)
    return state.active_contest_id if state else None


async def set_active_contest(session: AsyncSession, contest_id: Optional[str]) -> None:
    """
    Point the singleton at a contest.

    Only a non-null id ever replaces the stored pointer; the stored value is
    coalesced in SQL so concurrent writers from several instances agree.
    """
    if not contest_id:
        return

    stmt = dialect_insert(session, AppState).values(id=APP_STATE_ID, active_contest_id=contest_id)
    stmt = stmt.on_conflict_do_update(
        index_elements=[AppState.id],
        set_={
            "active_contest_id": func.coalesce(stmt.excluded.active_contest_id, AppState.active_contest_id),
            "updated_at": func.now(),
        },
    )
    await session.execute(stmt)
    await session.commit()
