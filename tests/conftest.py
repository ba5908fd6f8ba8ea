"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Callable

import pytest

from mutrack.actions import Action, ActionMetadata, GroupVersionKind, GroupVersionResource
from mutrack.requests import TrackedSerializedRequest
from mutrack.tracker import AllActionsTracker

CONFIGMAPS = GroupVersionResource(group="", version="v1", resource="configmaps")
DEPLOYMENTS = GroupVersionResource(group="apps", version="v1", resource="deployments")
STORAGECLASSES = GroupVersionResource(group="storage.k8s.io", version="v1", resource="storageclasses")

_KINDS = {
    CONFIGMAPS: GroupVersionKind(group="", version="v1", kind="ConfigMap"),
    DEPLOYMENTS: GroupVersionKind(group="apps", version="v1", kind="Deployment"),
    STORAGECLASSES: GroupVersionKind(group="storage.k8s.io", version="v1", kind="StorageClass"),
}

MakeRequest = Callable[..., TrackedSerializedRequest]


@pytest.fixture
def make_request() -> MakeRequest:
    """Factory for tracked requests with sequential request numbers."""
    counter = {"n": 0}

    def _make(
        action: Action,
        name: str,
        *,
        namespace: str = "",
        resource: GroupVersionResource = CONFIGMAPS,
        body: dict | None = None,
        options: dict | None = None,
    ) -> TrackedSerializedRequest:
        counter["n"] += 1
        kind = _KINDS.get(resource)
        if body is None:
            body = {
                "apiVersion": kind.api_version if kind else "v1",
                "kind": kind.kind if kind else "Unknown",
                "metadata": {"name": name, **({"namespace": namespace} if namespace else {})},
            }
        return TrackedSerializedRequest(
            metadata=ActionMetadata(action=action, resource=resource, namespace=namespace, name=name),
            kind=kind,
            body=body,
            options=options or {},
            request_number=counter["n"],
        )

    return _make


@pytest.fixture
def populated_tracker(make_request: MakeRequest) -> AllActionsTracker[TrackedSerializedRequest]:
    """Tracker with creates, an update and a status apply across namespaces."""
    tracker: AllActionsTracker[TrackedSerializedRequest] = AllActionsTracker()
    tracker.add_requests(
        make_request(Action.CREATE, "foo", namespace="ns-a"),
        make_request(Action.UPDATE, "foo", namespace="ns-a", options={"fieldManager": "operator"}),
        make_request(Action.CREATE, "web", namespace="ns-b", resource=DEPLOYMENTS),
        make_request(Action.APPLY_STATUS, "web", namespace="ns-b", resource=DEPLOYMENTS,
                     options={"fieldManager": "status-controller", "force": True}),
        make_request(Action.DELETE, "fast", resource=STORAGECLASSES),
    )
    return tracker
