"""
Unit tests for the vote admission gate
"""

from datetime import datetime, timedelta, timezone

import pytest

from showdown_vote.core import errors
from showdown_vote.services.voting import evaluate_admission, is_voting_admissible, normalize_email

NOW = datetime(2026, 5, 1, 18, 0, tzinfo=timezone.utc)
MINUTE = timedelta(minutes=1)


@pytest.mark.parametrize("status", [None, "INTRO", "VOTING_CLOSED", "COMPLETE", "voting_open"])
def test_only_voting_open_is_admissible(status):
    """Test that every status other than VOTING_OPEN is rejected"""
    assert evaluate_admission(status, NOW) == errors.STATUS_NOT_OPEN


def test_open_status_without_window():
    assert evaluate_admission("VOTING_OPEN", NOW) is None
    assert is_voting_admissible("VOTING_OPEN", NOW)


def test_before_open_time():
    assert evaluate_admission("VOTING_OPEN", NOW, open_time=NOW + MINUTE) == errors.NOT_YET_OPEN


def test_after_close_time():
    assert evaluate_admission("VOTING_OPEN", NOW, close_time=NOW - MINUTE) == errors.CLOSED


def test_window_bounds_are_inclusive():
    """Test that votes exactly at open or close time are accepted"""
    assert evaluate_admission("VOTING_OPEN", NOW, open_time=NOW) is None
    assert evaluate_admission("VOTING_OPEN", NOW, close_time=NOW) is None


def test_inside_window():
    assert is_voting_admissible("VOTING_OPEN", NOW, NOW - MINUTE, NOW + MINUTE)


def test_inverted_window_is_rejected():
    """Test that an open time after the close time never admits"""
    assert evaluate_admission("VOTING_OPEN", NOW, NOW + MINUTE, NOW - MINUTE) == errors.INVALID_WINDOW


def test_status_checked_before_window():
    assert evaluate_admission("INTRO", NOW, NOW - MINUTE, NOW + MINUTE) == errors.STATUS_NOT_OPEN


def test_naive_datetimes_are_treated_as_utc():
    """Test comparison against naive timestamps read back from SQLite"""
    naive_close = NOW.replace(tzinfo=None) - MINUTE
    assert evaluate_admission("VOTING_OPEN", NOW, close_time=naive_close) == errors.CLOSED


def test_normalize_email():
    assert normalize_email("  Fan@Example.COM ") == "fan@example.com"
    assert normalize_email(None) == ""
