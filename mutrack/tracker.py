"""
Action-categorized mutation trackers.

Records are routed by the action they report into one append-only list per
action. Reads hand back the live lists; only deep_copy() produces snapshots
that are safe to hand to another owner.

Not thread-safe: callers sharing a tracker across threads must lock around it.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, Iterator, TypeVar

from .actions import Action, GroupVersionResource
from .errors import CodingError
from .requests import AddressableRecord, MutationRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=MutationRecord)


class ActionTracker(Generic[T]):
    """Ordered records that all belong to one action."""

    def __init__(self, action: Action):
        self._action = action
        self._requests: list[T] = []

    @property
    def action(self) -> Action:
        return self._action

    def add_request(self, request: T) -> None:
        """Append a record. It must report this tracker's action."""
        reported = request.classify()
        if reported != self._action:
            raise CodingError(
                f"coding error: {reported!s} request routed to {self._action!s} tracker"
            )
        self._requests.append(request)

    def list_requests(self) -> list[T]:
        """The live list of records, in insertion order (not a copy)."""
        return self._requests

    def deep_copy(self) -> ActionTracker[T]:
        ret: ActionTracker[T] = ActionTracker(self._action)
        ret._requests = [r.clone_deep() for r in self._requests]
        return ret

    def __len__(self) -> int:
        return len(self._requests)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ActionTracker):
            return NotImplemented
        return self._action == other._action and self._requests == other._requests

    def __repr__(self) -> str:
        return f"ActionTracker({self._action!s}, {len(self._requests)} requests)"


class AllActionsTracker(Generic[T]):
    """
    Top-level tracker: routes each record to the tracker for its action.

    Only actions that have seen at least one record have an entry, so an
    empty tracker has no sub-trackers at all.
    """

    def __init__(self) -> None:
        self._action_to_tracker: dict[Action, ActionTracker[T]] = {}

    def add_request(self, request: T) -> None:
        """Record one mutation.

        Raises ValueError if the record reports an action outside the
        closed set; nothing is recorded in that case.
        """
        action = Action(request.classify())
        tracker = self._action_to_tracker.get(action)
        if tracker is None:
            logger.debug("Creating tracker for action %s", action)
            tracker = self._action_to_tracker[action] = ActionTracker(action)
        tracker.add_request(request)
        logger.debug("Recorded %s request (%d for this action)", action, len(tracker))

    def add_requests(self, *requests: T) -> None:
        """Record several mutations in order. Earlier ones stay if a later one fails."""
        for request in requests:
            self.add_request(request)

    def list_actions(self) -> list[Action]:
        """Actions with at least one record, sorted by their textual value."""
        return sorted(self._action_to_tracker, key=lambda a: a.value)

    def requests_for_action(self, action: Action) -> list[T]:
        """Records for one action in insertion order; empty if none were seen."""
        tracker = self._action_to_tracker.get(action)
        if tracker is None:
            return []
        return tracker.list_requests()

    def all_requests(self) -> list[T]:
        """Every record across all actions.

        Order within an action follows insertion; order across actions is
        not meaningful. Use request numbers when a global order is needed.
        """
        ret: list[T] = []
        for tracker in self._action_to_tracker.values():
            ret.extend(tracker.list_requests())
        return ret

    def requests_for_resource(
        self,
        resource: GroupVersionResource,
        namespace: str | None = None,
        name: str | None = None,
    ) -> list[T]:
        """Records aimed at a resource type, optionally narrowed to one namespace or object.

        Requires records that expose action_metadata().
        """
        ret: list[T] = []
        for request in self.all_requests():
            if not isinstance(request, AddressableRecord):
                raise TypeError(
                    f"{type(request).__name__} does not expose action_metadata()"
                )
            meta = request.action_metadata()
            if meta.resource != resource:
                continue
            if namespace is not None and meta.namespace != namespace:
                continue
            if name is not None and meta.name != name:
                continue
            ret.append(request)
        return ret

    def count(self) -> int:
        """Total number of recorded mutations."""
        return sum(len(t) for t in self._action_to_tracker.values())

    def deep_copy(self) -> AllActionsTracker[T]:
        """A fully independent copy: new mapping, new trackers, copied records."""
        ret: AllActionsTracker[T] = AllActionsTracker()
        for action, tracker in self._action_to_tracker.items():
            ret._action_to_tracker[action] = tracker.deep_copy()
        return ret

    def __deepcopy__(self, memo: dict[int, Any]) -> AllActionsTracker[T]:
        return self.deep_copy()

    def __len__(self) -> int:
        return self.count()

    def __iter__(self) -> Iterator[T]:
        return iter(self.all_requests())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AllActionsTracker):
            return NotImplemented
        return self._action_to_tracker == other._action_to_tracker

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{a!s}={len(self._action_to_tracker[a])}" for a in self.list_actions()
        )
        return f"AllActionsTracker({counts})"
