"""
Public read endpoints

These never fail for "no active contest"; they answer with an explicit
empty shape instead.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import get_db
from showdown_vote.services.public_view import compose_current_showdown, compose_public_view

router = APIRouter()


@router.get("/public/state")
async def get_public_state(session: AsyncSession = Depends(get_db)):
    """
    Contest, active matchup, pairings and bracket for the active contest.
    """
    return await compose_public_view(session)


@router.get("/current-showdown")
async def get_current_showdown(session: AsyncSession = Depends(get_db)):
    """Compact active-matchup projection used by older clients."""
    return await compose_current_showdown(session)
