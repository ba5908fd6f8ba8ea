"""
Aggregate views over a tracker.

Counts are derived on demand; nothing here changes tracker state.
"""

from __future__ import annotations

from typing import Any

from .requests import AddressableRecord
from .tracker import AllActionsTracker


def summarize(tracker: AllActionsTracker[Any]) -> dict[str, Any]:
    """Generate a summary of recorded mutations.

    Resource and namespace breakdowns are only filled in for records that
    expose action_metadata().
    """
    total = tracker.count()
    if total == 0:
        return {"total_requests": 0}

    action_counts: dict[str, int] = {}
    for action in tracker.list_actions():
        action_counts[action.value] = len(tracker.requests_for_action(action))

    resource_counts: dict[str, int] = {}
    namespaces: set[str] = set()
    for request in tracker.all_requests():
        if not isinstance(request, AddressableRecord):
            continue
        meta = request.action_metadata()
        key = str(meta.resource)
        resource_counts[key] = resource_counts.get(key, 0) + 1
        if meta.namespace:
            namespaces.add(meta.namespace)

    return {
        "total_requests": total,
        "action_counts": action_counts,
        "resource_counts": resource_counts,
        "namespaces": sorted(namespaces),
    }


def format_summary(tracker: AllActionsTracker[Any]) -> str:
    """Format summary as markdown."""
    s = summarize(tracker)
    if s["total_requests"] == 0:
        return "No mutations recorded."

    lines = [
        "# Mutation Summary",
        "",
        f"- Total requests: {s['total_requests']}",
        f"- Namespaces: {', '.join(s['namespaces']) or '(cluster-scoped only)'}",
        "",
        "## Actions",
        "",
        "| Action | Count |",
        "|--------|------:|",
    ]
    for action, count in s["action_counts"].items():
        lines.append(f"| {action} | {count} |")

    if s["resource_counts"]:
        lines.extend([
            "",
            "## Resources",
            "",
            "| Resource | Requests |",
            "|----------|---------:|",
        ])
        for resource, count in sorted(s["resource_counts"].items(), key=lambda x: (-x[1], x[0])):
            lines.append(f"| {resource} | {count} |")

    return "\n".join(lines) + "\n"
