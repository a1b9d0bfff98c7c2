"""Rate at which services accumulate drift over time."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

_ZERO_TIME = datetime.min.replace(tzinfo=timezone.utc)


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    text = moment.replace(microsecond=0).isoformat()
    return text[:-6] + "Z" if text.endswith("+00:00") else text


def _round2(value: float) -> float:
    if not math.isfinite(value):
        return value
    scaled = value * 100
    rounded = math.floor(abs(scaled) + 0.5)
    return math.copysign(rounded, scaled) / 100


@dataclass
class TrendEntry:
    """A drift count recorded for a service at one time."""

    service: str
    drift_count: int
    recorded_at: datetime


@dataclass
class VelocityEntry:
    """Drift rate of one service over its observed window."""

    service: str
    drifts_per_day: float
    total_drifts: int
    span_days: float
    accelerating: bool


@dataclass
class VelocityReport:
    """Velocity entries of all services, fastest first."""

    generated_at: datetime = _ZERO_TIME
    entries: list[VelocityEntry] = field(default_factory=list)


def compute_velocity(history: Iterable[TrendEntry], min_span_hours: float) -> VelocityReport:
    """Compute drifts per day per service and flag services whose rate increases.

    Services with fewer than two records, or observed over less than
    min_span_hours, are left out.
    """
    times: dict[str, list[datetime]] = {}
    counts: dict[str, list[int]] = {}
    for entry in history:
        times.setdefault(entry.service, []).append(entry.recorded_at)
        counts.setdefault(entry.service, []).append(entry.drift_count)

    entries = []
    for service, stamps in times.items():
        if len(stamps) < 2:
            continue
        ordered = sorted(stamps)
        span_hours = (ordered[-1] - ordered[0]).total_seconds() / 3600
        if span_hours < min_span_hours:
            continue
        service_counts = counts[service]
        total = sum(service_counts)
        span_days = span_hours / 24.0
        if span_days:
            rate = total / span_days
        else:
            rate = math.inf if total > 0 else (-math.inf if total < 0 else math.nan)

        mid = len(service_counts) // 2
        accelerating = sum(service_counts[mid:]) > sum(service_counts[:mid])

        entries.append(
            VelocityEntry(
                service=service,
                drifts_per_day=_round2(rate),
                total_drifts=total,
                span_days=_round2(span_days),
                accelerating=accelerating,
            )
        )

    entries.sort(key=lambda e: e.drifts_per_day, reverse=True)
    return VelocityReport(generated_at=datetime.now(timezone.utc), entries=entries)


def format_velocity(report: VelocityReport) -> str:
    """Return a human-readable velocity table."""
    if not report.entries:
        return "no velocity data available\n"
    lines = [
        f"drift velocity report ({_rfc3339(report.generated_at)})\n",
        f"{'service':<30} {'drifts/day':>12} {'total':>10} {'span(days)':>10} {'accelerating':>12}\n",
    ]
    lines.extend(
        f"{e.service:<30} {e.drifts_per_day:12.2f} {e.total_drifts:10d} "
        f"{e.span_days:10.2f} {'yes' if e.accelerating else '':>12}\n"
        for e in report.entries
    )
    return "".join(lines)