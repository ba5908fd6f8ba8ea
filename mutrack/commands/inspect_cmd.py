"""Mutation directory inspection commands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..actions import Action, GroupVersionResource
from ..errors import MutrackError
from ..mutation_dir import read_mutation_directory
from ..requests import TrackedSerializedRequest, sort_by_request_number
from ..summary import format_summary, summarize
from ..tracker import AllActionsTracker


def _load(mutation_dir: Path, err: Console) -> AllActionsTracker[TrackedSerializedRequest] | None:
    try:
        return read_mutation_directory(mutation_dir)
    except MutrackError as e:
        err.print(str(e), style="bold red")
        return None


def run_actions(mutation_dir: Path, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    tracker = _load(mutation_dir, err)
    if tracker is None:
        return 1

    counts = {a.value: len(tracker.requests_for_action(a)) for a in tracker.list_actions()}
    if output_json:
        print(json.dumps(counts, indent=2))
        return 0

    table = Table(title="Actions")
    table.add_column("action", style="cyan", no_wrap=True)
    table.add_column("requests", justify="right")
    for action, count in counts.items():
        table.add_row(action, str(count))
    Console().print(table)
    return 0


def run_requests(
    mutation_dir: Path,
    *,
    action: str | None = None,
    namespace: str | None = None,
    resource: str | None = None,
    name: str | None = None,
    output_json: bool = False,
) -> int:
    err = Console(stderr=True)

    gvr = None
    if resource:
        try:
            gvr = GroupVersionResource.parse(resource)
        except ValueError as e:
            err.print(str(e), style="bold red")
            return 1

    tracker = _load(mutation_dir, err)
    if tracker is None:
        return 1

    if gvr is not None:
        requests = tracker.requests_for_resource(gvr, namespace=namespace, name=name)
        if action:
            requests = [r for r in requests if r.classify() == Action(action)]
    else:
        requests = tracker.requests_for_action(Action(action)) if action else tracker.all_requests()
        if namespace is not None:
            requests = [r for r in requests if r.metadata.namespace == namespace]
        if name is not None:
            requests = [r for r in requests if r.metadata.name == name]

    requests = sort_by_request_number(requests)

    if output_json:
        data: list[dict[str, Any]] = [r.to_dict() for r in requests]
        print(json.dumps(data, indent=2, sort_keys=True))
        return 0

    table = Table(title=f"Requests ({len(requests)})")
    table.add_column("#", justify="right", style="dim")
    table.add_column("action", style="cyan", no_wrap=True)
    table.add_column("resource", style="magenta")
    table.add_column("namespace")
    table.add_column("name")
    for r in requests:
        meta = r.metadata
        table.add_row(
            str(r.request_number),
            meta.action.value,
            str(meta.resource),
            meta.namespace or "-",
            meta.name or "(generated)",
        )
    Console().print(table)
    return 0


def run_summary(mutation_dir: Path, *, output_json: bool = False) -> int:
    err = Console(stderr=True)
    tracker = _load(mutation_dir, err)
    if tracker is None:
        return 1

    if output_json:
        print(json.dumps(summarize(tracker), indent=2, sort_keys=True))
    else:
        print(format_summary(tracker), end="")
    return 0
