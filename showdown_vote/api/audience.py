"""
Audience registration endpoint
"""

import re

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import get_db
from showdown_vote.services.voting import normalize_email, register_user

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class RegisterRequest(BaseModel):
    """Audience registration request model"""
    name: str = Field(..., max_length=100)
    email: str = Field(..., max_length=254)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name is required")
        return value

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        value = normalize_email(value)
        if not EMAIL_PATTERN.match(value):
            raise ValueError("invalid email")
        return value


class RegisterResponse(BaseModel):
    """Audience registration response model"""
    userId: str


@router.post("/register", response_model=RegisterResponse)
async def register_endpoint(
    user_data: RegisterRequest,
    session: AsyncSession = Depends(get_db)
):
    """
    Register an audience member, or refresh the name of an existing one.
    """
    result = await register_user(session, user_data.name, user_data.email)
    if not result["ok"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=result["error"])
    return RegisterResponse(userId=result["userId"])
