"""
Unit tests for the rejection body builder
"""

from showdown_vote.core import errors


def test_error_body_without_reason():
    assert errors.error_body(errors.INVALID_INPUT) == {"error": errors.INVALID_INPUT}
    assert errors.error_body(errors.UNAUTHORIZED, None) == {"error": errors.UNAUTHORIZED}


def test_error_body_with_reason():
    body = errors.error_body(errors.VOTING_CLOSED, errors.NOT_YET_OPEN)
    assert body == {"error": errors.VOTING_CLOSED, "reason": errors.NOT_YET_OPEN}
