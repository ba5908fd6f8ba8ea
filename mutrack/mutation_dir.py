"""
Mutation directories: recorded requests laid out as YAML files.

Layout (one directory per action, then addressed like a must-gather):

    <root>/<action>/cluster-scoped-resources/<group>/<resource>/NNN-metadata-<name>.yaml
    <root>/<action>/namespaces/<namespace>/<group>/<resource>/NNN-body-<name>.yaml

The core group is written as "core". Options files are only written when a
request carries options.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from .actions import Action, ActionMetadata, GroupVersionKind, GroupVersionResource
from .errors import MutationDirectoryError
from .requests import TrackedSerializedRequest, sort_by_request_number
from .tracker import AllActionsTracker

logger = logging.getLogger(__name__)

# NNN-metadata-<name>.yaml; names may themselves contain "-metadata-"
_METADATA_FILE = re.compile(r"\d{3,}-metadata-.+\.yaml")


def _resource_dir(root: Path, meta: ActionMetadata) -> Path:
    action_dir = root / meta.action.directory_name
    if meta.cluster_scoped:
        base = action_dir / "cluster-scoped-resources"
    else:
        base = action_dir / "namespaces" / meta.namespace
    return base / meta.resource.group_or_core / meta.resource.resource


def _metadata_doc(request: TrackedSerializedRequest) -> dict[str, Any]:
    meta = request.metadata
    return {
        "action": meta.action.value,
        "resource": meta.resource.to_dict(),
        "namespace": meta.namespace,
        "name": meta.name,
        "kind": request.kind.to_dict() if request.kind else None,
        "requestNumber": request.request_number,
    }


def _dump(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)


def _load_mapping(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise MutationDirectoryError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MutationDirectoryError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def write_mutation_directory(
    tracker: AllActionsTracker[TrackedSerializedRequest],
    root: Path,
) -> int:
    """
    Write every tracked request under root.

    Refuses to write into an existing non-empty directory so fixtures are
    never silently merged, and refuses requests whose files would collide
    (same action, resource, namespace, request number and name). Nothing is
    written when a collision is found.

    Returns:
        Number of requests written
    """
    if root.exists():
        if not root.is_dir():
            raise MutationDirectoryError(f"Not a directory: {root}")
        if any(root.iterdir()):
            raise MutationDirectoryError(f"Refusing to write into non-empty directory: {root}")

    # Requests sharing a directory, number and name would overwrite each other
    planned: dict[Path, TrackedSerializedRequest] = {}
    for action in tracker.list_actions():
        for request in tracker.requests_for_action(action):
            metadata_path = _resource_dir(root, request.metadata) / request.suggested_filenames()[0]
            other = planned.get(metadata_path)
            if other is not None:
                raise MutationDirectoryError(
                    f"Requests #{other.request_number} {other.metadata.name or '(generated)'} and "
                    f"#{request.request_number} {request.metadata.name or '(generated)'} "
                    f"would both be written to {metadata_path}"
                )
            planned[metadata_path] = request

    written = 0
    for metadata_path, request in planned.items():
        _, body_name, options_name = request.suggested_filenames()
        target = metadata_path.parent
        _dump(metadata_path, _metadata_doc(request))
        _dump(target / body_name, request.body)
        if request.options:
            _dump(target / options_name, request.options)
        written += 1

    logger.info("Wrote %d requests to %s", written, root)
    return written


def _read_request(metadata_path: Path, action: Action) -> TrackedSerializedRequest:
    doc = _load_mapping(metadata_path)
    try:
        meta = ActionMetadata(
            action=Action(doc["action"]),
            resource=GroupVersionResource.from_dict(doc.get("resource") or {}),
            namespace=str(doc.get("namespace", "") or ""),
            name=str(doc.get("name", "") or ""),
        )
        request_number = int(doc.get("requestNumber", 0))
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise MutationDirectoryError(f"Invalid metadata in {metadata_path}: {e}") from e

    if meta.action != action:
        raise MutationDirectoryError(
            f"{metadata_path} declares action {meta.action!s} but lives under {action.directory_name}/"
        )

    kind_doc = doc.get("kind")
    request = TrackedSerializedRequest(
        metadata=meta,
        kind=GroupVersionKind.from_dict(kind_doc) if isinstance(kind_doc, dict) else None,
        request_number=request_number,
    )

    _, body_name, options_name = request.suggested_filenames()
    body_path = metadata_path.parent / body_name
    if not body_path.exists():
        raise MutationDirectoryError(f"Missing body file for {metadata_path}: {body_name}")
    request.body = _load_mapping(body_path)

    options_path = metadata_path.parent / options_name
    if options_path.exists():
        request.options = _load_mapping(options_path)
    return request


def read_mutation_directory(root: Path) -> AllActionsTracker[TrackedSerializedRequest]:
    """
    Load a mutation directory into a tracker.

    Within each action, requests are inserted in request-number order.
    """
    if not root.is_dir():
        raise MutationDirectoryError(f"Mutation directory not found: {root}")

    tracker: AllActionsTracker[TrackedSerializedRequest] = AllActionsTracker()
    for action_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        try:
            action = Action.from_directory_name(action_dir.name)
        except ValueError as e:
            raise MutationDirectoryError(f"{e} (in {root})") from e

        requests = [
            _read_request(path, action)
            for path in sorted(action_dir.rglob("*.yaml"))
            if _METADATA_FILE.fullmatch(path.name)
        ]
        tracker.add_requests(*sort_by_request_number(requests))

    logger.info("Read %d requests from %s", tracker.count(), root)
    return tracker
