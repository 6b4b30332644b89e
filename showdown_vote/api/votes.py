"""
Vote casting and tally endpoints
"""

import logging
import re
from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, ConfigDict, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.core import errors
from showdown_vote.core.config import settings
from showdown_vote.core.metrics import VOTE_COUNT
from showdown_vote.db.session import get_db
from showdown_vote.services.voting import cast_vote, get_tally

logger = logging.getLogger(__name__)

router = APIRouter()


def is_external_id(value: str) -> bool:
    """True when the value has the upstream system's native id shape."""
    return bool(value) and re.fullmatch(settings.external_id_pattern, value) is not None


class VoteRequest(BaseModel):
    """Vote request model"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: UUID = Field(..., alias="userId")
    showdown_id: str = Field(..., alias="showdownId")
    choice: Literal["RED", "BLUE"]

    @field_validator("showdown_id")
    @classmethod
    def _check_showdown_id(cls, value: str) -> str:
        if not is_external_id(value):
            raise ValueError("invalid showdown id")
        return value


class TallyResponse(BaseModel):
    """Tally response model"""
    red: int
    blue: int


@router.post("/vote")
async def vote_endpoint(
    vote: VoteRequest,
    session: AsyncSession = Depends(get_db)
):
    """
    Cast a vote.

    A repeat vote is a success-shaped response carrying the recorded choice.
    """
    result = await cast_vote(session, vote.user_id, vote.showdown_id, vote.choice)

    if not result["ok"]:
        VOTE_COUNT.labels(outcome=result["error"].lower()).inc()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=errors.error_body(result["error"], result.get("reason"))
        )

    if result.get("status") == errors.ALREADY_VOTED:
        VOTE_COUNT.labels(outcome="already_voted").inc()
        return {"ok": True, "status": errors.ALREADY_VOTED, "existingChoice": result["existingChoice"]}

    VOTE_COUNT.labels(outcome="cast").inc()
    return {"ok": True}


@router.get("/results/{showdown_id}", response_model=TallyResponse)
async def results_endpoint(
    showdown_id: str,
    session: AsyncSession = Depends(get_db)
):
    """Live red/blue counts for a showdown."""
    if not is_external_id(showdown_id):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors.INVALID_SHOWDOWN)
    tally = await get_tally(session, showdown_id)
    return TallyResponse(**tally)
