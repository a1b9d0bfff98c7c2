"""Transitive drift exposure across service dependencies."""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable
from dataclasses import dataclass, field

from driftwatch.model import CompareResult


@dataclass
class Dependency:
    """A service depending on another."""

    service: str
    depends_on: str


@dataclass
class ReachabilityResult:
    """Which drifted services can affect a service, and who depends on it."""

    service: str
    affected_by: list[str] = field(default_factory=list)
    reachable_from: list[str] = field(default_factory=list)
    total_exposure: int = 0


def _drifted_ancestors(
    service: str, drifted: set[str], upstream: dict[str, list[str]]
) -> list[str]:
    visited: set[str] = set()
    queue = deque([service])
    affected = []
    while queue:
        current = queue.popleft()
        for dep in upstream.get(current, []):
            if dep in visited:
                continue
            visited.add(dep)
            if dep in drifted:
                affected.append(dep)
            queue.append(dep)
    return affected


def build_reachability(
    results: Iterable[CompareResult], dependencies: Iterable[Dependency] | None
) -> list[ReachabilityResult]:
    """Compute exposure per service, most exposed first, then by name."""
    results = list(results)
    upstream: defaultdict[str, list[str]] = defaultdict(list)
    dependents: defaultdict[str, list[str]] = defaultdict(list)
    for dep in dependencies or []:
        upstream[dep.service].append(dep.depends_on)
        dependents[dep.depends_on].append(dep.service)

    drifted = {r.service for r in results if r.diffs}
    output = []
    for result in results:
        affected = sorted(_drifted_ancestors(result.service, drifted, upstream))
        output.append(
            ReachabilityResult(
                service=result.service,
                affected_by=affected,
                reachable_from=sorted(dependents.get(result.service, [])),
                total_exposure=len(affected),
            )
        )
    output.sort(key=lambda r: (-r.total_exposure, r.service))
    return output


def format_reachability(results: Iterable[ReachabilityResult]) -> str:
    """Return a human-readable summary of reachability results."""
    results = list(results)
    if not results:
        return "no reachability data\n"
    lines = ["=== Drift Reachability ===\n"]
    for r in results:
        lines.append(f"service: {r.service} (exposure: {r.total_exposure})\n")
        if r.affected_by:
            lines.append(f"  affected by drifted: {', '.join(r.affected_by)}\n")
        if r.reachable_from:
            lines.append(f"  downstream dependents: {', '.join(r.reachable_from)}\n")
    return "".join(lines)