"""
Run Registry - Superseding Concurrent Runs.

Every recommendation run receives a RunToken carrying a process-wide
monotonic sequence. While runs for a demande are in flight the registry
remembers the highest sequence that has completed; a run holding an older
token has been superseded and must not persist its result.

Design Notes:
    - Sequence numbers never repeat, so a repository can compare them to
      refuse late writes from superseded runs
    - A run that fails never supersedes anything
    - A demande is forgotten once none of its runs is in flight
    - Thread-safe: runs for the same demande may overlap on a worker pool
"""

from __future__ import annotations

import itertools
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional


@dataclass(frozen=True)
class RunToken:
    """Identity of one recommendation run."""
    token: str
    demande_id: str
    sequence: int
    issued_at: datetime

    def to_dict(self) -> Dict[str, object]:
        return {
            "token": self.token,
            "demande_id": self.demande_id,
            "sequence": self.sequence,
            "issued_at": self.issued_at.isoformat(),
        }


@dataclass
class _DemandeRuns:
    in_flight: Dict[str, RunToken] = field(default_factory=dict)
    completed_sequence: int = 0


class RunRegistry:
    """Issues run tokens and tracks in-flight runs per demande."""

    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            clock: Returns the current UTC time (injectable for tests)
        """
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._sequence = itertools.count(1)
        self._runs: Dict[str, _DemandeRuns] = {}
        self._lock = threading.Lock()

    def issue(self, demande_id: str) -> RunToken:
        """
        Issue a token for a new in-flight run.

        Args:
            demande_id: Demande being recommended

        Returns:
            New RunToken, newer than any earlier one
        """
        with self._lock:
            token = RunToken(
                token=str(uuid.uuid4()),
                demande_id=demande_id,
                sequence=next(self._sequence),
                issued_at=self._clock(),
            )
            runs = self._runs.setdefault(demande_id, _DemandeRuns())
            runs.in_flight[token.token] = token
            return token

    def is_superseded(self, token: RunToken) -> bool:
        """True if a newer run for the token's demande has completed."""
        with self._lock:
            runs = self._runs.get(token.demande_id)
            return runs is not None and runs.completed_sequence > token.sequence

    def complete(self, token: RunToken) -> None:
        """Record that a run persisted its result."""
        with self._lock:
            runs = self._runs.get(token.demande_id)
            if runs is not None:
                runs.completed_sequence = max(runs.completed_sequence, token.sequence)

    def release(self, token: RunToken) -> None:
        """
        End a run, successful or not.

        The demande's entry is dropped when no other run is in flight.
        """
        with self._lock:
            runs = self._runs.get(token.demande_id)
            if runs is None:
                return
            runs.in_flight.pop(token.token, None)
            if not runs.in_flight:
                del self._runs[token.demande_id]

    def active(self, demande_id: str) -> List[RunToken]:
        """In-flight tokens for a demande, oldest first."""
        with self._lock:
            runs = self._runs.get(demande_id)
            if runs is None:
                return []
            return sorted(runs.in_flight.values(), key=lambda t: t.sequence)

    def __len__(self) -> int:
        """Number of demandes with a run in flight."""
        with self._lock:
            return len(self._runs)

    def clear(self) -> None:
        """Forget every tracked run."""
        with self._lock:
            self._runs.clear()
