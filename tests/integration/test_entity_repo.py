"""
Integration tests for the state store repositories

These tests verify upsert semantics, sticky fields, the active-contest
pointer and the snapshot archive against a real database.
"""

from datetime import datetime, timedelta, timezone

import pytest

from showdown_vote.models.contest import Contest
from showdown_vote.models.couple import Couple
from showdown_vote.models.dancer import Dancer
from showdown_vote.models.showdown import Showdown
from showdown_vote.repos.app_state_repo import get_active_contest_id, set_active_contest
from showdown_vote.repos.entity_repo import get_entities, get_entity, list_by_contest, upsert_entity
from showdown_vote.repos.snapshot_repo import archive_snapshot, get_latest_snapshot, get_snapshots
from tests.fixtures.snapshots import (
    CONTEST_ID,
    LEAD_DANCER_ID,
    RED_COUPLE_ID,
    SHOWDOWN_ID,
    SHOWDOWN_ID_2,
)


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upsert_inserts_then_updates(async_session):
    """Test that a second upsert replaces non-sticky fields"""
    await upsert_entity(async_session, Contest, {"id": CONTEST_ID, "name": "Spring", "status": "DRAFT"})
    await upsert_entity(async_session, Contest, {"id": CONTEST_ID, "name": "Spring Finals", "status": "ROUND_ACTIVE"})

    contest = await get_entity(async_session, Contest, CONTEST_ID)
    assert contest.name == "Spring Finals"
    assert contest.status == "ROUND_ACTIVE"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_upsert_requires_id(async_session):
    with pytest.raises(ValueError):
        await upsert_entity(async_session, Contest, {"id": None, "name": "No id"})


@pytest.mark.integration
@pytest.mark.asyncio
async def test_showdown_contest_is_sticky(async_session):
    """Test that a null contest reference never erases the stored one"""
    await upsert_entity(async_session, Showdown, {"id": SHOWDOWN_ID, "contest_id": CONTEST_ID, "status": "INTRO"})
    await upsert_entity(async_session, Showdown, {"id": SHOWDOWN_ID, "contest_id": None, "status": "VOTING_OPEN"})

    showdown = await get_entity(async_session, Showdown, SHOWDOWN_ID)
    assert showdown.contest_id == CONTEST_ID
    assert showdown.status == "VOTING_OPEN"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_couple_names_are_sticky(async_session):
    """Test that couple names and contest survive a sparse update"""
    await upsert_entity(async_session, Couple, {
        "id": RED_COUPLE_ID,
        "contest_id": CONTEST_ID,
        "lead_name": "Alex",
        "follow_name": "Sam",
    })
    await upsert_entity(async_session, Couple, {
        "id": RED_COUPLE_ID,
        "contest_id": None,
        "lead_id": LEAD_DANCER_ID,
        "lead_name": None,
        "follow_name": "Samira",
    })

    couple = await get_entity(async_session, Couple, RED_COUPLE_ID)
    assert couple.contest_id == CONTEST_ID
    assert couple.lead_id == LEAD_DANCER_ID
    assert couple.lead_name == "Alex"
    assert couple.follow_name == "Samira"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_dancer_name_is_sticky(async_session):
    await upsert_entity(async_session, Dancer, {"id": LEAD_DANCER_ID, "name": "Alex Rivera"})
    await upsert_entity(async_session, Dancer, {"id": LEAD_DANCER_ID, "name": None})

    dancer = await get_entity(async_session, Dancer, LEAD_DANCER_ID)
    assert dancer.name == "Alex Rivera"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_get_entities_and_list_by_contest(async_session):
    await upsert_entity(async_session, Showdown, {"id": SHOWDOWN_ID, "contest_id": CONTEST_ID})
    await upsert_entity(async_session, Showdown, {"id": SHOWDOWN_ID_2, "contest_id": CONTEST_ID})
    await upsert_entity(async_session, Showdown, {"id": "a07000000000000X01", "contest_id": "a03000000000000X99"})

    found = await get_entities(async_session, Showdown, [SHOWDOWN_ID, None, "a07000000000000Z00"])
    assert set(found) == {SHOWDOWN_ID}

    listed = await list_by_contest(async_session, Showdown, CONTEST_ID)
    assert {s.id for s in listed} == {SHOWDOWN_ID, SHOWDOWN_ID_2}

    assert await get_entity(async_session, Showdown, None) is None
    assert await list_by_contest(async_session, Showdown, None) == []


@pytest.mark.integration
@pytest.mark.asyncio
async def test_active_contest_pointer(async_session):
    """Test that the pointer only moves on a non-null contest id"""
    assert await get_active_contest_id(async_session) is None

    await set_active_contest(async_session, CONTEST_ID)
    assert await get_active_contest_id(async_session) == CONTEST_ID

    await set_active_contest(async_session, None)
    assert await get_active_contest_id(async_session) == CONTEST_ID

    await set_active_contest(async_session, "a03000000000000C02")
    assert await get_active_contest_id(async_session) == "a03000000000000C02"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_snapshot_archive_is_append_only(async_session):
    """Test that every payload is kept and the latest one is found"""
    first_at = datetime(2026, 5, 1, 18, 0, tzinfo=timezone.utc)
    await archive_snapshot(async_session, {"seq": 1}, CONTEST_ID, first_at)
    await archive_snapshot(async_session, {"seq": 2}, CONTEST_ID, first_at + timedelta(seconds=5))
    await archive_snapshot(async_session, {"seq": 3}, None, first_at + timedelta(seconds=10))

    latest = await get_latest_snapshot(async_session, CONTEST_ID)
    assert latest.payload == {"seq": 2}

    all_snapshots = await get_snapshots(async_session)
    assert [s.payload["seq"] for s in all_snapshots] == [3, 2, 1]
