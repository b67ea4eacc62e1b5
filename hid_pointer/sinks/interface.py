"""Abstract base class for consumers of quantized pointer motion.

A movement sink turns one ``(dx, dy)`` pair into one relative-motion
report for the emulated pointer device -- a BLE HID report, a virtual
input device event, a log line.  The transport behind it is outside
this package.  The sink, not the processor, is responsible for keeping
each axis within ``[-MAX_DELTA, MAX_DELTA]`` and for reporting its own
failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hid_pointer.models.motion import MAX_DELTA, MovementDelta


class MovementSink(ABC):
    """Receives quantized relative-motion reports.

    ``accept`` is called synchronously on the caller's thread once per
    processed sample that produced movement, so implementations must
    return quickly.
    """

    @abstractmethod
    def accept(self, dx: int, dy: int) -> bool:
        """Deliver one relative-motion report.

        Args:
            dx: Horizontal movement in device counts.
            dy: Vertical movement in device counts.

        Returns:
            ``True`` if the downstream transport accepted the report.
        """


def clamp_delta(dx: int, dy: int, limit: int = MAX_DELTA) -> MovementDelta:
    """Build a ``MovementDelta`` with each axis limited to ``[-limit, limit]``."""
    return MovementDelta(int(dx), int(dy)).clamped(limit)
