"""
Public read view composition

Everything is rebuilt from the store on each read. The current matchup is
picked out of the already-built bracket list, so both projections always
show the same data. Winner and audience-vote fields are only emitted when
the contest's results visibility is PUBLIC.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from showdown_vote.models.contest import Contest
from showdown_vote.models.couple import Couple
from showdown_vote.models.dancer import Dancer
from showdown_vote.models.showdown import Showdown
from showdown_vote.repos.app_state_repo import get_active_contest_id
from showdown_vote.repos.entity_repo import get_entities, get_entity, list_by_contest
from showdown_vote.repos.snapshot_repo import get_latest_snapshot
from showdown_vote.services.normalizer import as_utc

logger = logging.getLogger(__name__)


def empty_view() -> Dict[str, Any]:
    """The "not available" shape returned when no contest is active."""
    return {
        "contest": None,
        "contestStatus": None,
        "currentRound": None,
        "activeShowdown": None,
        "pairings": [],
        "bracket": [],
        "rounds": [],
        "raw": None,
    }


def _isoformat(value) -> Optional[str]:
    value = as_utc(value)
    return value.isoformat() if value else None


def _display_name(own_name: Optional[str], dancer_id: Optional[str], dancers: Dict[str, Dancer]) -> Optional[str]:
    # The couple's own name wins; the dancer table only fills gaps
    if own_name:
        return own_name
    dancer = dancers.get(dancer_id) if dancer_id else None
    return dancer.name if dancer else None


def couple_projection(couple_id: Optional[str], couples: Dict[str, Couple], dancers: Dict[str, Dancer]):
    if not couple_id:
        return None
    couple = couples.get(couple_id)
    if couple is None:
        return {"coupleId": couple_id, "leadName": None, "followName": None}
    return {
        "coupleId": couple.id,
        "leadName": _display_name(couple.lead_name, couple.lead_id, dancers),
        "followName": _display_name(couple.follow_name, couple.follow_id, dancers),
    }


def showdown_projection(
    showdown: Showdown,
    couples: Dict[str, Couple],
    dancers: Dict[str, Dancer],
    results_public: bool
) -> Dict[str, Any]:
    projection = {
        "id": showdown.id,
        "name": showdown.name,
        "status": showdown.status,
        "round": showdown.round,
        "matchNumber": showdown.match_number,
        "voteOpenTime": _isoformat(showdown.vote_open_time),
        "voteCloseTime": _isoformat(showdown.vote_close_time),
        "red": couple_projection(showdown.red_couple_id, couples, dancers),
        "blue": couple_projection(showdown.blue_couple_id, couples, dancers),
    }
    if results_public:
        projection["winner"] = showdown.winner
        projection["redAudienceVotes"] = showdown.red_audience_votes
        projection["blueAudienceVotes"] = showdown.blue_audience_votes
    return projection


def group_by_round(showdowns: List[Showdown]) -> List[List[Showdown]]:
    """
    Group showdowns into rounds.

    Rounds keep the order in which they first arrived; inside a round
    showdowns are ordered by match number (unnumbered last), then id.
    """
    rounds: Dict[Optional[str], List[Showdown]] = {}
    for showdown in showdowns:
        rounds.setdefault(showdown.round, []).append(showdown)
    return [
        sorted(members, key=lambda s: (s.match_number is None, s.match_number or 0, s.id))
        for members in rounds.values()
    ]


async def compose_public_view(session: AsyncSession, contest_id: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the public read view for a contest.

    Args:
        session: Database session
        contest_id: Contest to show (defaults to the active contest)

    Returns:
        View dict; ``empty_view()`` when there is nothing to show
    """
    if contest_id is None:
        contest_id = await get_active_contest_id(session)

    contest = await get_entity(session, Contest, contest_id)
    if contest is None:
        return empty_view()

    results_public = contest.results_public
    showdowns = await list_by_contest(session, Showdown, contest.id)
    contest_couples = await list_by_contest(session, Couple, contest.id)

    couples = {couple.id: couple for couple in contest_couples}
    referenced = {s.red_couple_id for s in showdowns} | {s.blue_couple_id for s in showdowns}
    couples.update(await get_entities(session, Couple, referenced - set(couples)))

    dancer_ids = set()
    for couple in couples.values():
        if not couple.lead_name:
            dancer_ids.add(couple.lead_id)
        if not couple.follow_name:
            dancer_ids.add(couple.follow_id)
    dancers = await get_entities(session, Dancer, dancer_ids)

    rounds = []
    bracket = []
    for members in group_by_round(showdowns):
        projections = [showdown_projection(s, couples, dancers, results_public) for s in members]
        rounds.append({"round": members[0].round, "showdowns": projections})
        bracket.extend(projections)

    active = None
    if contest.active_showdown_id:
        active = next((item for item in bracket if item["id"] == contest.active_showdown_id), None)

    pairings = [couple_projection(couple.id, couples, dancers) for couple in contest_couples]

    raw = None
    if results_public:
        latest = await get_latest_snapshot(session, contest.id)
        raw = latest.payload if latest else None

    return {
        "contest": contest.to_dict(),
        "contestStatus": contest.status,
        "currentRound": contest.current_round,
        "activeShowdown": active,
        "pairings": pairings,
        "bracket": bracket,
        "rounds": rounds,
        "raw": raw,
    }


def couple_label(projection: Optional[Dict[str, Any]]) -> Optional[str]:
    """Display label "Lead & Follow" for a couple projection."""
    if not projection:
        return None
    lead = projection.get("leadName") or "—"
    follow = projection.get("followName") or "—"
    return f"{lead} & {follow}"


async def compose_current_showdown(session: AsyncSession) -> Dict[str, Any]:
    """Compact projection of the active matchup kept for older clients."""
    view = await compose_public_view(session)
    active = view["activeShowdown"]
    if active is None:
        return {"showdownId": None, "red": None, "blue": None, "status": "CLOSED"}
    return {
        "showdownId": active["id"],
        "red": couple_label(active["red"]),
        "blue": couple_label(active["blue"]),
        "status": active["status"],
    }
