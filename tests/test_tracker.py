"""
Tests for the action trackers.

Covers routing, per-action ordering, aggregation, the routing invariant,
and deep-copy isolation.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field

import pytest

from mutrack.actions import ALL_ACTIONS, Action, GroupVersionResource
from mutrack.errors import CodingError, MutrackError
from mutrack.tracker import ActionTracker, AllActionsTracker

CONFIGMAPS = GroupVersionResource(group="", version="v1", resource="configmaps")
DEPLOYMENTS = GroupVersionResource(group="apps", version="v1", resource="deployments")


# -----------------------------------------------------------------------------
# Minimal record satisfying only the classify/clone_deep contract
# -----------------------------------------------------------------------------


@dataclass
class BareRecord:
    action: Action
    label: str
    payload: list[str] = field(default_factory=list)

    def classify(self) -> Action:
        return self.action

    def clone_deep(self) -> "BareRecord":
        return BareRecord(self.action, self.label, list(self.payload))


@dataclass
class StrayRecord:
    """Reports an action outside the closed set."""

    def classify(self):
        return "Patch"

    def clone_deep(self) -> "StrayRecord":
        return StrayRecord()


# -----------------------------------------------------------------------------
# ActionTracker
# -----------------------------------------------------------------------------


def test_action_tracker_appends_in_order():
    tracker: ActionTracker[BareRecord] = ActionTracker(Action.CREATE)
    first = BareRecord(Action.CREATE, "a")
    second = BareRecord(Action.CREATE, "b")

    tracker.add_request(first)
    tracker.add_request(second)

    assert tracker.action == Action.CREATE
    assert tracker.list_requests() == [first, second]
    assert len(tracker) == 2


def test_action_tracker_rejects_mismatched_action():
    tracker: ActionTracker[BareRecord] = ActionTracker(Action.CREATE)

    with pytest.raises(CodingError, match="coding error"):
        tracker.add_request(BareRecord(Action.UPDATE, "a"))

    assert tracker.list_requests() == []


def test_coding_error_is_not_a_recoverable_error():
    assert issubclass(CodingError, AssertionError)
    assert not issubclass(CodingError, MutrackError)


def test_action_tracker_list_is_live():
    tracker: ActionTracker[BareRecord] = ActionTracker(Action.DELETE)
    listed = tracker.list_requests()

    tracker.add_request(BareRecord(Action.DELETE, "a"))

    assert len(listed) == 1


def test_action_tracker_deep_copy_is_independent():
    tracker: ActionTracker[BareRecord] = ActionTracker(Action.APPLY)
    tracker.add_request(BareRecord(Action.APPLY, "a", ["x"]))
    tracker.add_request(BareRecord(Action.APPLY, "b"))

    copied = tracker.deep_copy()

    assert copied == tracker
    assert copied.action == Action.APPLY
    assert [r.label for r in copied.list_requests()] == ["a", "b"]
    assert copied.list_requests()[0] is not tracker.list_requests()[0]

    tracker.list_requests()[0].payload.append("y")
    tracker.add_request(BareRecord(Action.APPLY, "c"))

    assert copied.list_requests()[0].payload == ["x"]
    assert len(copied) == 2


# -----------------------------------------------------------------------------
# AllActionsTracker
# -----------------------------------------------------------------------------


def test_empty_tracker():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()

    assert tracker.list_actions() == []
    assert tracker.all_requests() == []
    assert tracker.count() == 0
    for action in ALL_ACTIONS:
        assert tracker.requests_for_action(action) == []


def test_create_update_create_scenario(make_request):
    tracker = AllActionsTracker()
    foo_create = make_request(Action.CREATE, "foo")
    foo_update = make_request(Action.UPDATE, "foo")
    bar_create = make_request(Action.CREATE, "bar")

    tracker.add_request(foo_create)
    tracker.add_request(foo_update)
    tracker.add_request(bar_create)

    assert tracker.list_actions() == [Action.CREATE, Action.UPDATE]
    assert tracker.requests_for_action(Action.CREATE) == [foo_create, bar_create]
    assert tracker.requests_for_action(Action.UPDATE) == [foo_update]
    assert tracker.requests_for_action(Action.DELETE) == []


def test_requests_for_action_is_insertion_subsequence():
    records = [
        BareRecord(Action.UPDATE, "u1"),
        BareRecord(Action.CREATE, "c1"),
        BareRecord(Action.UPDATE_STATUS, "s1"),
        BareRecord(Action.UPDATE, "u2"),
        BareRecord(Action.CREATE, "c2"),
        BareRecord(Action.UPDATE, "u3"),
    ]
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_requests(*records)

    for action in ALL_ACTIONS:
        expected = [r for r in records if r.action == action]
        assert tracker.requests_for_action(action) == expected


def test_list_actions_sorted_deterministic_and_unique():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    for action in (Action.UPDATE_STATUS, Action.DELETE, Action.APPLY, Action.DELETE, Action.APPLY_STATUS):
        tracker.add_request(BareRecord(action, "x"))

    first = tracker.list_actions()
    second = tracker.list_actions()

    assert first == second
    assert first == [Action.APPLY, Action.APPLY_STATUS, Action.DELETE, Action.UPDATE_STATUS]
    assert len(set(first)) == len(first)
    assert all(tracker.requests_for_action(a) for a in first)


def test_all_requests_is_union_of_per_action_requests():
    records = [BareRecord(a, f"r{i}") for i, a in enumerate(
        [Action.CREATE, Action.DELETE, Action.CREATE, Action.APPLY, Action.UPDATE]
    )]
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_requests(*records)

    everything = tracker.all_requests()
    union = [r for a in tracker.list_actions() for r in tracker.requests_for_action(a)]

    assert len(everything) == len(records) == tracker.count() == len(tracker)
    assert sorted(r.label for r in everything) == sorted(r.label for r in union)
    assert sorted(r.label for r in tracker) == sorted(r.label for r in records)


def test_add_request_outside_closed_set_records_nothing():
    tracker: AllActionsTracker = AllActionsTracker()

    with pytest.raises(ValueError):
        tracker.add_request(StrayRecord())

    assert tracker.list_actions() == []


def test_add_requests_keeps_earlier_insertions_on_failure():
    tracker: AllActionsTracker = AllActionsTracker()
    ok = BareRecord(Action.CREATE, "ok")

    with pytest.raises(ValueError):
        tracker.add_requests(ok, StrayRecord(), BareRecord(Action.CREATE, "never"))

    assert tracker.requests_for_action(Action.CREATE) == [ok]


def test_deep_copy_is_independent():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_requests(
        BareRecord(Action.CREATE, "a", ["1"]),
        BareRecord(Action.CREATE, "b"),
        BareRecord(Action.UPDATE, "c"),
    )

    copied = tracker.deep_copy()
    assert copied == tracker

    tracker.add_request(BareRecord(Action.DELETE, "d"))

    assert copied.list_actions() == [Action.CREATE, Action.UPDATE]
    assert tracker.list_actions() == [Action.CREATE, Action.DELETE, Action.UPDATE]
    assert copied != tracker


def test_deep_copy_isolates_in_both_directions():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_request(BareRecord(Action.APPLY, "a", ["1"]))

    copied = tracker.deep_copy()
    copied.add_request(BareRecord(Action.APPLY, "b"))
    copied.requests_for_action(Action.APPLY)[0].payload.append("2")

    assert [r.label for r in tracker.requests_for_action(Action.APPLY)] == ["a"]
    assert tracker.requests_for_action(Action.APPLY)[0].payload == ["1"]


def test_copy_module_deepcopy_delegates():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_request(BareRecord(Action.CREATE, "a", ["1"]))

    copied = copy.deepcopy(tracker)
    tracker.requests_for_action(Action.CREATE)[0].payload.append("2")

    assert isinstance(copied, AllActionsTracker)
    assert copied.requests_for_action(Action.CREATE)[0].payload == ["1"]


def test_requests_for_resource(make_request):
    tracker = AllActionsTracker()
    cm_a = make_request(Action.CREATE, "foo", namespace="ns-a")
    cm_b = make_request(Action.UPDATE, "foo", namespace="ns-b")
    cm_other = make_request(Action.DELETE, "bar", namespace="ns-a")
    deploy = make_request(Action.CREATE, "foo", namespace="ns-a", resource=DEPLOYMENTS)
    tracker.add_requests(cm_a, cm_b, cm_other, deploy)

    by_type = tracker.requests_for_resource(CONFIGMAPS)
    assert sorted(r.request_number for r in by_type) == sorted(
        r.request_number for r in (cm_a, cm_b, cm_other)
    )
    assert tracker.requests_for_resource(CONFIGMAPS, namespace="ns-a", name="foo") == [cm_a]
    assert tracker.requests_for_resource(DEPLOYMENTS, name="foo") == [deploy]
    assert tracker.requests_for_resource(CONFIGMAPS, name="missing") == []


def test_requests_for_resource_requires_metadata():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_request(BareRecord(Action.CREATE, "a"))

    with pytest.raises(TypeError, match="action_metadata"):
        tracker.requests_for_resource(CONFIGMAPS)


def test_repr_lists_counts():
    tracker: AllActionsTracker[BareRecord] = AllActionsTracker()
    tracker.add_requests(BareRecord(Action.UPDATE, "a"), BareRecord(Action.CREATE, "b"))

    assert repr(tracker) == "AllActionsTracker(Create=1, Update=1)"
