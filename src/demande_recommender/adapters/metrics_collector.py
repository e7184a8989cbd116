"""
In-Memory Metrics Collector.

Stores timings and counters in memory, keyed by metric name and tag set.
"""

from __future__ import annotations

from threading import Lock
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

_SeriesKey = Tuple[str, FrozenSet[Tuple[str, str]]]


def _key(name: str, tags: Optional[Dict[str, str]]) -> _SeriesKey:
    return name, frozenset((tags or {}).items())


class InMemoryMetricsCollector:
    """Simple in-memory metrics collector."""

    def __init__(self) -> None:
        self._timings: Dict[_SeriesKey, List[float]] = {}
        self._counts: Dict[_SeriesKey, int] = {}
        self._lock = Lock()

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a duration."""
        with self._lock:
            self._timings.setdefault(_key(name, tags), []).append(duration_seconds)

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Increment a counter."""
        with self._lock:
            key = _key(name, tags)
            self._counts[key] = self._counts.get(key, 0) + value

    def count(self, name: str, **tags: str) -> int:
        """Counter value for an exact tag set."""
        with self._lock:
            return self._counts.get(_key(name, tags), 0)

    def timings(self, name: str, **tags: str) -> List[float]:
        """Recorded durations for an exact tag set."""
        with self._lock:
            return list(self._timings.get(_key(name, tags), []))

    def get_metrics(self) -> Dict[str, Any]:
        """
        Summarize everything recorded.

        Counters are summed across tag sets; timings report count, total
        and max. Per-tag breakdowns are listed under "by_tags".
        """
        with self._lock:
            summary: Dict[str, Any] = {}
            for (name, tags), value in self._counts.items():
                entry = summary.setdefault(name, {"type": "count", "total": 0, "by_tags": {}})
                entry["total"] += value
                entry["by_tags"][_label(tags)] = value
            for (name, tags), values in self._timings.items():
                entry = summary.setdefault(
                    name, {"type": "timing", "count": 0, "total": 0.0, "max": 0.0, "by_tags": {}}
                )
                entry["count"] += len(values)
                entry["total"] += sum(values)
                entry["max"] = max(entry["max"], max(values))
                entry["by_tags"][_label(tags)] = len(values)
            return summary

    def clear(self) -> None:
        with self._lock:
            self._timings.clear()
            self._counts.clear()


def _label(tags: FrozenSet[Tuple[str, str]]) -> str:
    return ",".join(f"{k}={v}" for k, v in sorted(tags)) or "-"
