"""
Entity normalizer for upstream snapshots

The system of record has shipped several payload shapes over time:
Salesforce-style records (``Id``, ``Status__c``, ``Red_Couple__r``), the
relay's camelCase objects (``id``, ``status``, ``red``) and snake_case
variants. Each canonical field has an ordered alias list; lookups are
case-insensitive and the first alias yielding a usable value wins.
Supporting a new upstream shape means adding aliases to these tables.

Every function here is pure and never raises on malformed input: unknown
keys are ignored, unusable values become None, and an object without a
resolvable id normalizes to None. A canonical field is only emitted when
one of its aliases is present in the object, so a sparse object updates
only the fields it actually carries. Values are bounded to what the
store can hold: ids longer than a key column are unusable, display text
is clipped and integers must fit a signed 32-bit column.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

SIDES = ("RED", "BLUE")

_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")

MAX_ID_LENGTH = 64
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


# Value coercers

def _text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        return value or None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    return None


def _id(value: Any) -> Optional[str]:
    text = _text(value)
    if text and len(text) <= MAX_ID_LENGTH:
        return text
    return None


def _clipped(limit: int) -> Callable[[Any], Optional[str]]:
    """Text coercer cutting display values down to the column length."""
    def coerce(value: Any) -> Optional[str]:
        text = _text(value)
        return text[:limit] if text else None
    return coerce


def _code(limit: int) -> Callable[[Any], Optional[str]]:
    """Text coercer for enum-like values; too long means unusable, never clipped."""
    def coerce(value: Any) -> Optional[str]:
        text = _text(value)
        if text and len(text) <= limit:
            return text
        return None
    return coerce


def _int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    number = None
    try:
        if isinstance(value, int):
            number = value
        elif isinstance(value, float):
            number = int(value)
        elif isinstance(value, str) and value.strip():
            number = int(float(value.strip()))
    except (ValueError, OverflowError):
        return None
    if number is None or not INT_MIN <= number <= INT_MAX:
        return None
    return number


def _timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 string, epoch milliseconds or datetime -> aware UTC datetime."""
    parsed = None
    if isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (ValueError, OverflowError, OSError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text[-1] in "Zz":
            text = text[:-1] + "+00:00"
        text = _COMPACT_OFFSET.sub(r"\1:\2", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed is None:
        return None
    return as_utc(parsed)


def _side(value: Any) -> Optional[str]:
    text = _text(value)
    if text and text.upper() in SIDES:
        return text.upper()
    return None


def _ref(value: Any) -> Optional[str]:
    """A reference given either as an id or as a nested object carrying one."""
    if isinstance(value, dict):
        return _pick(value, ID_ALIASES, _id)
    return _id(value)


def _nested_ref(value: Any) -> Optional[str]:
    """Like _ref but only accepts nested objects."""
    if isinstance(value, dict):
        return _pick(value, ID_ALIASES, _id)
    return None


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC (SQLite drops the offset on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Alias tables

ID_ALIASES = ("Id", "coupleId", "showdownId", "contestId", "dancerId", "eventId")

FieldSpec = Tuple[str, Tuple[str, ...], Callable[[Any], Any]]

CONTEST_FIELDS: Tuple[FieldSpec, ...] = (
    ("id", ("Id", "contestId", "contest_id"), _id),
    ("name", ("Name", "contestName", "Contest_Name__c"), _clipped(255)),
    ("status", ("Status__c", "status", "contestStatus", "contest_status"), _code(64)),
    ("current_round", ("Current_Round__c", "currentRound", "current_round"), _clipped(128)),
    ("active_showdown_id", ("Active_Showdown__c", "activeShowdownId", "active_showdown_id"), _ref),
    ("active_showdown_id", ("Active_Showdown__r", "activeShowdown"), _nested_ref),
    ("judging_model", ("Judging_Model__c", "judgingModel", "judging_model"), _code(64)),
    ("judge_panel_size", ("Judge_Panel_Size__c", "judgePanelSize", "judge_panel_size"), _int),
    ("event_id", ("Event__c", "eventId", "event_id", "Event__r", "event"), _ref),
    ("results_visibility", ("Results_Visibility__c", "resultsVisibility", "results_visibility"), _code(32)),
)

SHOWDOWN_FIELDS: Tuple[FieldSpec, ...] = (
    ("id", ("Id", "showdownId", "showdown_id"), _id),
    ("contest_id", ("Contest__c", "contestId", "contest_id", "Contest__r", "contest"), _ref),
    ("name", ("Name", "showdownName", "showdown_name"), _clipped(255)),
    ("status", ("Status__c", "status", "showdownStatus"), _code(64)),
    ("round", ("Round__c", "round", "roundName"), _clipped(128)),
    ("match_number", ("Match_Number__c", "matchNumber", "match_number", "Match__c"), _int),
    ("vote_open_time", ("Vote_Open_Time__c", "Voting_Opens_At__c", "voteOpenTime", "vote_open_time"), _timestamp),
    ("vote_close_time", ("Vote_Close_Time__c", "Voting_Closes_At__c", "voteCloseTime", "vote_close_time"), _timestamp),
    ("red_couple_id", ("Red_Couple__c", "redCoupleId", "red_couple_id"), _ref),
    ("red_couple_id", ("Red_Couple__r", "red", "redCouple"), _nested_ref),
    ("blue_couple_id", ("Blue_Couple__c", "blueCoupleId", "blue_couple_id"), _ref),
    ("blue_couple_id", ("Blue_Couple__r", "blue", "blueCouple"), _nested_ref),
    ("red_audience_votes", ("Red_Audience_Votes__c", "redAudienceVotes", "red_audience_votes"), _int),
    ("blue_audience_votes", ("Blue_Audience_Votes__c", "blueAudienceVotes", "blue_audience_votes"), _int),
    ("winner", ("Winner__c", "winner", "winningSide"), _side),
)

COUPLE_FIELDS: Tuple[FieldSpec, ...] = (
    ("id", ("Id", "coupleId", "couple_id"), _id),
    ("contest_id", ("Contest__c", "contestId", "contest_id", "Contest__r"), _ref),
    ("lead_id", ("Lead__c", "Lead_Dancer__c", "leadId", "lead_id"), _ref),
    ("lead_id", ("Lead__r", "Lead_Dancer__r", "lead", "leadDancer"), _nested_ref),
    ("follow_id", ("Follow__c", "Follow_Dancer__c", "followId", "follow_id"), _ref),
    ("follow_id", ("Follow__r", "Follow_Dancer__r", "follow", "followDancer"), _nested_ref),
    ("lead_name", ("Lead_Name__c", "leadName", "lead_name"), _clipped(255)),
    ("follow_name", ("Follow_Name__c", "followName", "follow_name"), _clipped(255)),
)

DANCER_FIELDS: Tuple[FieldSpec, ...] = (
    ("id", ("Id", "dancerId", "dancer_id"), _id),
    ("name", ("Name", "fullName", "Full_Name__c", "displayName", "display_name"), _clipped(255)),
)

# Where sub-objects of a snapshot may live
SNAPSHOT_SECTIONS: Dict[str, Tuple[str, ...]] = {
    "contest": ("contest", "Contest__r", "activeContest", "active_contest"),
    "active_showdown": ("activeShowdown", "showdown", "currentShowdown", "active_showdown", "Active_Showdown__r"),
    "bracket": ("bracket", "showdowns", "Showdowns__r", "matches"),
    "pairings": ("pairings", "couples", "Couples__r"),
    "dancers": ("dancers", "Dancers__r"),
}

EMBEDDED_COUPLES = {
    "RED": ("Red_Couple__r", "red", "redCouple"),
    "BLUE": ("Blue_Couple__r", "blue", "blueCouple"),
}

EMBEDDED_DANCERS = ("Lead__r", "Lead_Dancer__r", "lead", "leadDancer",
                    "Follow__r", "Follow_Dancer__r", "follow", "followDancer")


# Lookup helpers

def _lowered(raw: Dict[str, Any]) -> Dict[str, Any]:
    lowered = {}
    for key, value in raw.items():
        if isinstance(key, str):
            lowered.setdefault(key.lower(), value)
    return lowered


def _pick(raw: Dict[str, Any], aliases: Iterable[str], coerce: Callable[[Any], Any], lowered=None):
    lowered = lowered if lowered is not None else _lowered(raw)
    for alias in aliases:
        value = lowered.get(alias.lower())
        if value is None:
            continue
        coerced = coerce(value)
        if coerced is not None:
            return coerced
    return None


def _normalize(raw: Any, fields: Tuple[FieldSpec, ...]) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    lowered = _lowered(raw)
    row: Dict[str, Any] = {}
    for field, aliases, coerce in fields:
        if row.get(field) is not None:
            continue
        value = _pick(raw, aliases, coerce, lowered)
        # Absent fields stay out of the row; an explicit null is kept
        if value is not None or any(alias.lower() in lowered for alias in aliases):
            row[field] = value
    if not row.get("id"):
        return None
    return row


def records(value: Any) -> List[Dict[str, Any]]:
    """A child collection as a list of objects (plain list or {"records": [...]})."""
    if isinstance(value, dict):
        value = _lowered(value).get("records")
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def snapshot_section(payload: Any, section: str) -> Any:
    """Raw sub-object of a snapshot under any of the section's aliases."""
    if not isinstance(payload, dict):
        return None
    lowered = _lowered(payload)
    for alias in SNAPSHOT_SECTIONS[section]:
        value = lowered.get(alias.lower())
        if value is not None:
            return value
    return None


def is_contest_record(payload: Any) -> bool:
    """True for a bare Salesforce contest record (``attributes.type`` = ...Contest__c)."""
    if not isinstance(payload, dict):
        return False
    attributes = _lowered(payload).get("attributes")
    if not isinstance(attributes, dict):
        return False
    record_type = _text(_lowered(attributes).get("type"))
    return bool(record_type) and record_type.lower().endswith("contest__c")


# Entity normalizers

def normalize_contest(raw: Any) -> Optional[Dict[str, Any]]:
    """Canonical contest row, or None without an id."""
    return _normalize(raw, CONTEST_FIELDS)


def normalize_showdown(raw: Any, contest_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Canonical showdown row, or None without an id.

    ``contest_id`` fills the contest reference when the object has none.
    """
    row = _normalize(raw, SHOWDOWN_FIELDS)
    if row is not None and row.get("contest_id") is None and contest_id:
        row["contest_id"] = contest_id
    return row


def normalize_couple(raw: Any, contest_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
    row = _normalize(raw, COUPLE_FIELDS)
    if row is not None and row.get("contest_id") is None and contest_id:
        row["contest_id"] = contest_id
    return row


def normalize_dancer(raw: Any) -> Optional[Dict[str, Any]]:
    return _normalize(raw, DANCER_FIELDS)


def embedded_couple_objects(showdown_raw: Any) -> List[Dict[str, Any]]:
    """Raw couple objects carried inline in a showdown's red/blue slots."""
    if not isinstance(showdown_raw, dict):
        return []
    lowered = _lowered(showdown_raw)
    objects = []
    for side in SIDES:
        for alias in EMBEDDED_COUPLES[side]:
            nested = lowered.get(alias.lower())
            if isinstance(nested, dict):
                objects.append(nested)
                break
    return objects


def embedded_dancers(couple_raw: Any) -> List[Dict[str, Any]]:
    """Dancers carried inline in a couple's lead/follow slots."""
    if not isinstance(couple_raw, dict):
        return []
    lowered = _lowered(couple_raw)
    dancers = []
    for alias in EMBEDDED_DANCERS:
        dancer = normalize_dancer(lowered.get(alias.lower()))
        if dancer is not None and all(d["id"] != dancer["id"] for d in dancers):
            dancers.append(dancer)
    return dancers


def extract_contest_id(payload: Any) -> Optional[str]:
    """Best-effort contest id for archiving a raw payload."""
    if not isinstance(payload, dict):
        return None
    if is_contest_record(payload):
        contest = normalize_contest(payload)
        return contest["id"] if contest else None

    contest = normalize_contest(snapshot_section(payload, "contest"))
    if contest:
        return contest["id"]

    top_level = _pick(payload, ("contestId", "contest_id", "Contest__c"), _ref)
    if top_level:
        return top_level

    showdown = normalize_showdown(snapshot_section(payload, "active_showdown"))
    return showdown.get("contest_id") if showdown else None
