"""Lattice convergence tracking during training.

The lattice has converged when new text stops needing new vertices. This
is measured as the vertex creation rate: new vertices per token ingested,
taken over fixed-size windows of tokens. Convergence is declared when the
rate in the last three windows is at or below a threshold.
"""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Any

DEFAULT_THRESHOLD = Fraction(1, 1_000_000)
"""One new vertex per million tokens."""

DEFAULT_WINDOW_SIZE = 100_000
"""Tokens per measurement window."""

_CONVERGENCE_WINDOWS = 3
_RECENT_WINDOWS = 10


def _rate_text(rate: Fraction) -> str:
    return f"{rate.numerator}/{rate.denominator}"


@dataclass(frozen=True)
class WindowStats:
    """Counts for one completed measurement window."""

    tokens_processed: int
    new_vertices: int
    vertex_rate: Fraction = Fraction(0)

    def _to_dict(self) -> dict[str, Any]:
        return {
            "tokens_processed": self.tokens_processed,
            "new_vertices": self.new_vertices,
            "vertex_rate": _rate_text(self.vertex_rate),
        }


@dataclass(frozen=True)
class Report:
    """A summary of the convergence state."""

    total_tokens: int
    total_new_vertices: int
    current_rate: Fraction
    converged: bool
    window_count: int
    recent_windows: list[WindowStats] = field(default_factory=list)


class Tracker:
    """Monitors the vertex creation rate over consecutive windows."""

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        threshold: Fraction | None = None,
    ) -> None:
        self._window_size = window_size if window_size > 0 else DEFAULT_WINDOW_SIZE
        self._threshold = Fraction(threshold) if threshold else DEFAULT_THRESHOLD
        self._lock = threading.Lock()
        self._window_tokens = 0
        self._window_vertices = 0
        self._windows: list[WindowStats] = []
        self._total_tokens = 0
        self._total_vertices = 0

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def threshold(self) -> Fraction:
        return self._threshold

    def record_token(self) -> None:
        """Count one token, closing the window when it is full."""
        self.record_tokens(1)

    def record_tokens(self, n: int) -> None:
        """Count n tokens, closing the current window if it is full.

        A batch that overfills the window is recorded in that window whole.
        """
        with self._lock:
            self._total_tokens += n
            self._window_tokens += n
            while self._window_tokens >= self._window_size:
                self._finalize_window()

    def record_new_vertex(self) -> None:
        """Count one newly created vertex."""
        with self._lock:
            self._total_vertices += 1
            self._window_vertices += 1

    def _finalize_window(self) -> None:
        rate = (
            Fraction(self._window_vertices, self._window_tokens)
            if self._window_tokens > 0
            else Fraction(0)
        )
        self._windows.append(
            WindowStats(self._window_tokens, self._window_vertices, rate)
        )
        self._window_tokens = 0
        self._window_vertices = 0

    def _converged(self) -> bool:
        if len(self._windows) < _CONVERGENCE_WINDOWS:
            return False
        return all(
            w.vertex_rate <= self._threshold
            for w in self._windows[-_CONVERGENCE_WINDOWS:]
        )

    def is_converged(self) -> bool:
        """Report whether the last three windows are all at or below the threshold."""
        with self._lock:
            return self._converged()

    def report(self) -> Report:
        """Return a summary including the last ten windows."""
        with self._lock:
            rate = (
                Fraction(self._total_vertices, self._total_tokens)
                if self._total_tokens > 0
                else Fraction(0)
            )
            return Report(
                total_tokens=self._total_tokens,
                total_new_vertices=self._total_vertices,
                current_rate=rate,
                converged=self._converged(),
                window_count=len(self._windows),
                recent_windows=list(self._windows[-_RECENT_WINDOWS:]),
            )

    def marshal(self) -> bytes:
        """Serialise the tracker state as JSON."""
        with self._lock:
            state = {
                "window_size": self._window_size,
                "windows": [w._to_dict() for w in self._windows],
                "total_tokens": self._total_tokens,
                "total_vertices": self._total_vertices,
            }
        return json.dumps(state, separators=(",", ":")).encode("utf-8")