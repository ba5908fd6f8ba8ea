"""
Action-categorized tracking of API mutation requests.

Records of create, update, apply and delete requests are collected per
action so tests and dry runs can assert exactly which writes happened.

Components:
- actions: Action taxonomy and resource addressing (GVR/GVK, ActionMetadata)
- requests: Record contract (MutationRecord) and serialized request records
- tracker: Per-action and all-actions trackers
- mutation_dir: YAML fixture directories of recorded requests
- summary: Aggregate counts and Markdown reports

Design principles:
- Append-only: records are never removed
- Per-action order: insertion order is kept within an action, not across
- Isolated snapshots: deep_copy() shares nothing with its source
"""

__version__ = "0.1.0"

from .actions import ALL_ACTIONS, Action, ActionMetadata, GroupVersionKind, GroupVersionResource
from .errors import CodingError, ConfigError, MutationDirectoryError, MutrackError
from .requests import (
    AddressableRecord,
    MutationRecord,
    SerializedRequest,
    TrackedSerializedRequest,
    sort_by_request_number,
)
from .tracker import ActionTracker, AllActionsTracker

__all__ = [
    "__version__",
    # Actions
    "ALL_ACTIONS",
    "Action",
    "ActionMetadata",
    "GroupVersionKind",
    "GroupVersionResource",
    # Records
    "AddressableRecord",
    "MutationRecord",
    "SerializedRequest",
    "TrackedSerializedRequest",
    "sort_by_request_number",
    # Trackers
    "ActionTracker",
    "AllActionsTracker",
    # Errors
    "CodingError",
    "ConfigError",
    "MutationDirectoryError",
    "MutrackError",
]
