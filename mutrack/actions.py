"""
Action taxonomy for tracked mutations.

An action captures what kind of write a request performed, not which HTTP
verb carried it: status-subresource writes are their own categories even
though they travel as the same verb as their main-resource counterparts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Action(str, Enum):
    """Mutation categories.

    - APPLY: server-side apply against the main resource
    - APPLY_STATUS: server-side apply against the status subresource
    - UPDATE: full update of the main resource
    - UPDATE_STATUS: full update of the status subresource
    - CREATE: object creation
    - DELETE: object deletion

    Apply is really a subset of patch, but tracking it separately is useful.
    """
    APPLY = "Apply"
    APPLY_STATUS = "ApplyStatus"
    UPDATE = "Update"
    UPDATE_STATUS = "UpdateStatus"
    CREATE = "Create"
    DELETE = "Delete"

    def __str__(self) -> str:
        return self.value

    @property
    def is_status(self) -> bool:
        return self in (Action.APPLY_STATUS, Action.UPDATE_STATUS)

    @property
    def directory_name(self) -> str:
        """Lower-case hyphenated form, e.g. ``update-status``."""
        return _DIRECTORY_NAMES[self]

    @classmethod
    def from_directory_name(cls, name: str) -> Action:
        for action, dirname in _DIRECTORY_NAMES.items():
            if dirname == name:
                return action
        raise ValueError(f"Unknown action directory: {name}")


_DIRECTORY_NAMES = {
    Action.APPLY: "apply",
    Action.APPLY_STATUS: "apply-status",
    Action.UPDATE: "update",
    Action.UPDATE_STATUS: "update-status",
    Action.CREATE: "create",
    Action.DELETE: "delete",
}

# All valid actions
ALL_ACTIONS = frozenset(Action)


def _split_gv(parts: list[str], text: str) -> tuple[str, str, str]:
    if len(parts) == 3:
        return parts[0], parts[1], parts[2]
    if len(parts) == 2:
        return "", parts[0], parts[1]
    raise ValueError(f"Expected group/version/name or version/name, got: {text!r}")


@dataclass(frozen=True)
class GroupVersionResource:
    """Addresses a resource type. The core group is the empty string."""

    group: str
    version: str
    resource: str

    def __str__(self) -> str:
        if self.group:
            return f"{self.resource}.{self.version}.{self.group}"
        return f"{self.resource}.{self.version}"

    @property
    def group_or_core(self) -> str:
        return self.group or "core"

    @classmethod
    def parse(cls, text: str) -> GroupVersionResource:
        """Parse ``group/version/resource`` (or ``version/resource`` for core)."""
        group, version, resource = _split_gv(text.strip().split("/"), text)
        if not version or not resource:
            raise ValueError(f"Version and resource are required: {text!r}")
        return cls(group=group, version=version, resource=resource)

    def to_dict(self) -> dict[str, str]:
        return {"group": self.group, "version": self.version, "resource": self.resource}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GroupVersionResource:
        return cls(
            group=str(data.get("group", "") or ""),
            version=str(data.get("version", "") or ""),
            resource=str(data.get("resource", "") or ""),
        )


@dataclass(frozen=True)
class GroupVersionKind:
    """Addresses an object kind. The core group is the empty string."""

    group: str
    version: str
    kind: str

    def __str__(self) -> str:
        if self.group:
            return f"{self.kind}.{self.version}.{self.group}"
        return f"{self.kind}.{self.version}"

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}" if self.group else self.version

    @classmethod
    def parse(cls, text: str) -> GroupVersionKind:
        group, version, kind = _split_gv(text.strip().split("/"), text)
        if not version or not kind:
            raise ValueError(f"Version and kind are required: {text!r}")
        return cls(group=group, version=version, kind=kind)

    def to_dict(self) -> dict[str, str]:
        return {"group": self.group, "version": self.version, "kind": self.kind}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GroupVersionKind:
        return cls(
            group=str(data.get("group", "") or ""),
            version=str(data.get("version", "") or ""),
            kind=str(data.get("kind", "") or ""),
        )


@dataclass(frozen=True)
class ActionMetadata:
    """Who a mutation was aimed at, and what kind of mutation it was.

    An empty namespace means the resource is cluster-scoped.
    """

    action: Action
    resource: GroupVersionResource
    namespace: str = ""
    name: str = ""

    @property
    def cluster_scoped(self) -> bool:
        return not self.namespace

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict."""
        return {
            "action": self.action.value,
            "resource": self.resource.to_dict(),
            "namespace": self.namespace,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActionMetadata:
        """Reconstruct from a plain dict. Unknown actions raise ValueError."""
        return cls(
            action=Action(data["action"]),
            resource=GroupVersionResource.from_dict(data.get("resource") or {}),
            namespace=str(data.get("namespace", "") or ""),
            name=str(data.get("name", "") or ""),
        )
