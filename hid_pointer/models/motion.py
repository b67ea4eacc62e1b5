"""Value types flowing through the pointer-motion pipeline.

A ``Sample`` is one absolute pointer observation entering the pipeline;
a ``MovementDelta`` is one quantized relative-motion report leaving it.
"""

from __future__ import annotations

from dataclasses import dataclass

Vector2 = tuple[float, float]
"""A 2D point or offset as ``(x, y)`` floats."""

MAX_DELTA: int = 127
"""Largest magnitude a single relative-motion report may carry per axis."""


@dataclass(frozen=True)
class Sample:
    """One absolute pointer observation.

    Attributes:
        position: Pointer position ``(x, y)`` in the source's
            coordinate space.
        timestamp: Observation time in seconds.
    """

    position: Vector2
    timestamp: float


@dataclass(frozen=True)
class MovementDelta:
    """A quantized relative-motion report.

    Attributes:
        dx: Horizontal movement in device counts.
        dy: Vertical movement in device counts.
    """

    dx: int
    dy: int

    @property
    def is_zero(self) -> bool:
        """True when the delta carries no movement."""
        return self.dx == 0 and self.dy == 0

    def clamped(self, limit: int = MAX_DELTA) -> MovementDelta:
        """Return a copy with each axis limited to ``[-limit, limit]``."""
        return MovementDelta(
            dx=max(-limit, min(limit, self.dx)),
            dy=max(-limit, min(limit, self.dy)),
        )
