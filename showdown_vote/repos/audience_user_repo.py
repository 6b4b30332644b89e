"""
Audience user repository
"""

import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import dialect_insert
from showdown_vote.models.audience_user import AudienceUser


async def upsert_audience_user(session: AsyncSession, name: str, email: str) -> UUID:
    """
    Register a user keyed on email.

    A repeat registration updates the display name and keeps the original id.

    Args:
        session: Database session
        name: Display name
        email: Normalized email address

    Returns:
        The user's id
    """
    stmt = dialect_insert(session, AudienceUser).values(id=uuid.uuid4(), name=name, email=email)
    stmt = stmt.on_conflict_do_update(
        index_elements=[AudienceUser.email],
        set_={"name": stmt.excluded.name},
    )
    await session.execute(stmt)

    result = await session.execute(
        select(AudienceUser.id).where(AudienceUser.email == email)
    )
    user_id = result.scalar_one()
    await session.commit()
    return user_id


async def get_audience_user_by_id(session: AsyncSession, user_id: UUID) -> Optional[AudienceUser]:
    """
    Get audience user by ID.

    Args:
        session: Database session
        user_id: User UUID

    Returns:
        AudienceUser instance or None if not found
    """
    result = await session.execute(
        select(AudienceUser)
        .where(AudienceUser.id == user_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_audience_user_by_email(session: AsyncSession, email: str) -> Optional[AudienceUser]:
    result = await session.execute(
        select(AudienceUser)
        .where(AudienceUser.email == email)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()
