"""
Mutation record contract and the concrete request records.

Trackers only need two things from a record: which action it belongs to,
and an independent copy of itself. Anything richer (addressing, ordering)
is layered on top for the queries that need it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Iterable, Protocol, Self, runtime_checkable

from .actions import Action, ActionMetadata, GroupVersionKind


@runtime_checkable
class MutationRecord(Protocol):
    """
    Protocol for anything that can be tracked.

    clone_deep() must return a value of the same type that is content-equal
    to the original and shares no mutable memory with it.
    """

    def classify(self) -> Action:
        """The action category this record belongs to."""
        ...

    def clone_deep(self) -> Self:
        """Independent, type-preserving deep copy."""
        ...


@runtime_checkable
class AddressableRecord(MutationRecord, Protocol):
    """A record that also knows which resource it targeted."""

    def action_metadata(self) -> ActionMetadata:
        ...


@dataclass
class SerializedRequest:
    """
    A single write request as it was sent.

    body is the object sent; options are the request options
    (fieldManager, force, dryRun, ...).
    """

    metadata: ActionMetadata
    kind: GroupVersionKind | None = None
    body: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    def classify(self) -> Action:
        return self.metadata.action

    def action_metadata(self) -> ActionMetadata:
        return self.metadata

    def clone_deep(self) -> Self:
        # metadata and kind are frozen; only the payload dicts need copying
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict."""
        return {
            "metadata": self.metadata.to_dict(),
            "kind": self.kind.to_dict() if self.kind else None,
            "body": copy.deepcopy(self.body),
            "options": copy.deepcopy(self.options),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SerializedRequest:
        """Reconstruct from a plain dict."""
        kind = data.get("kind")
        return cls(
            metadata=ActionMetadata.from_dict(data["metadata"]),
            kind=GroupVersionKind.from_dict(kind) if kind else None,
            body=copy.deepcopy(data.get("body") or {}),
            options=copy.deepcopy(data.get("options") or {}),
        )


@dataclass
class TrackedSerializedRequest(SerializedRequest):
    """
    A serialized request stamped with the order it was issued in.

    request_number is assigned by whoever produces the records; it is the
    only source of ordering across actions.
    """

    request_number: int = 0

    def suggested_filenames(self) -> tuple[str, str, str]:
        """Return (metadata, body, options) filenames for this request."""
        name = self.metadata.name or "generated"
        prefix = f"{self.request_number:03d}"
        return (
            f"{prefix}-metadata-{name}.yaml",
            f"{prefix}-body-{name}.yaml",
            f"{prefix}-options-{name}.yaml",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["request_number"] = self.request_number
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrackedSerializedRequest:
        base = SerializedRequest.from_dict(data)
        return cls(
            metadata=base.metadata,
            kind=base.kind,
            body=base.body,
            options=base.options,
            request_number=int(data.get("request_number", 0)),
        )


def sort_by_request_number(
    requests: Iterable[TrackedSerializedRequest],
) -> list[TrackedSerializedRequest]:
    """Order records by the sequence number their producer assigned (stable)."""
    return sorted(requests, key=lambda r: r.request_number)
