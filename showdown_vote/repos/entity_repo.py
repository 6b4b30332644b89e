"""
Entity repository for upstream-sourced records (contest, showdown, couple, dancer)

Rows are keyed by the upstream id and written with upsert semantics. Columns
listed in a model's ``__sticky_fields__`` are coalesced on write so an
incoming null never erases a stored value.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.db.session import dialect_insert


async def upsert_entity(session: AsyncSession, model, row: Dict[str, Any]) -> None:
    """
    Insert or update an entity by primary identity.

    Args:
        session: Database session
        model: Mapped model class (Contest, Showdown, Couple, Dancer)
        row: Canonical row; must carry ``id``

    The statement is committed on its own, so a single upsert is either
    fully visible to readers or not at all.
    """
    if not row.get("id"):
        raise ValueError(f"Cannot upsert {model.__name__} without an id")

    stmt = dialect_insert(session, model).values(**row)
    sticky = getattr(model, "__sticky_fields__", ())

    update_cols = {}
    for key in row:
        if key == "id":
            continue
        if key in sticky:
            update_cols[key] = func.coalesce(stmt.excluded[key], getattr(model, key))
        else:
            update_cols[key] = stmt.excluded[key]
    if hasattr(model, "updated_at"):
        update_cols["updated_at"] = func.now()

    stmt = stmt.on_conflict_do_update(index_elements=[model.id], set_=update_cols)
    await session.execute(stmt)
    await session.commit()


async def get_entity(session: AsyncSession, model, entity_id: str):
    """
    Get an entity by upstream id.

    Always reloads from the store so callers see the latest committed row,
    never a copy cached in the session identity map.
    """
    if not entity_id:
        return None
    result = await session.execute(
        select(model)
        .where(model.id == entity_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def get_entities(session: AsyncSession, model, entity_ids) -> Dict[str, Any]:
    """Get several entities by id, returned as an id -> row mapping."""
    ids = {entity_id for entity_id in entity_ids if entity_id}
    if not ids:
        return {}
    result = await session.execute(
        select(model)
        .where(model.id.in_(ids))
        .execution_options(populate_existing=True)
    )
    return {row.id: row for row in result.scalars().all()}


async def list_by_contest(session: AsyncSession, model, contest_id: str) -> List:
    """
    List entities belonging to a contest in arrival order.

    Args:
        session: Database session
        model: Mapped model class with a ``contest_id`` column
        contest_id: Upstream contest id

    Returns:
        List of model instances
    """
    if not contest_id:
        return []
    result = await session.execute(
        select(model)
        .where(model.contest_id == contest_id)
        .order_by(model.created_at, model.id)
        .execution_options(populate_existing=True)
    )
    return list(result.scalars().all())
