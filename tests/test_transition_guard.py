"""
Transition guard tests: the full status matrix plus the requeue-aware path check.
"""

import pytest

from clinicqueue.domain.enums.workflow import QueueStatus as S
from clinicqueue.domain.transitions import allowed_targets, can_transition, is_legal_path


LEGAL = {
    (S.WAITING, S.CALLED),
    (S.WAITING, S.NO_SHOW),
    (S.WAITING, S.CANCELLED),
    (S.CALLED, S.IN_CONSULTATION),
    (S.CALLED, S.NO_SHOW),
    (S.CALLED, S.CANCELLED),
    (S.IN_CONSULTATION, S.AWAITING_EXAM),
    (S.IN_CONSULTATION, S.COMPLETED),
    (S.IN_CONSULTATION, S.CANCELLED),
    (S.AWAITING_EXAM, S.IN_CONSULTATION),
    (S.COMPLETED, S.CLOSED),
}


@pytest.mark.parametrize("current", list(S))
@pytest.mark.parametrize("target", list(S))
def test_status_matrix(current, target):
    assert can_transition(current, target) is ((current, target) in LEGAL)


@pytest.mark.parametrize("status", list(S))
def test_self_loops_are_rejected(status):
    assert not can_transition(status, status)


@pytest.mark.parametrize("status", [S.CLOSED, S.CANCELLED, S.NO_SHOW])
def test_dead_ends_have_no_generic_exit(status):
    assert allowed_targets(status) == frozenset()


def test_requeue_edge_is_not_a_generic_transition():
    assert not can_transition(S.NO_SHOW, S.WAITING)


def test_accepts_raw_strings():
    assert can_transition("waiting", "called")
    assert not can_transition("called", "waiting")


def test_unknown_values_are_rejected():
    assert not can_transition("waiting", "teleported")
    assert not can_transition("limbo", "called")


def test_is_legal_path():
    assert is_legal_path([S.WAITING, S.CALLED, S.IN_CONSULTATION, S.COMPLETED, S.CLOSED])
    assert is_legal_path(
        [S.WAITING, S.CALLED, S.IN_CONSULTATION, S.AWAITING_EXAM, S.IN_CONSULTATION, S.COMPLETED]
    )
    assert is_legal_path([S.WAITING, S.NO_SHOW, S.WAITING, S.CALLED])
    assert is_legal_path([])
    assert not is_legal_path([S.WAITING, S.IN_CONSULTATION])
    assert not is_legal_path([S.CANCELLED, S.WAITING])
