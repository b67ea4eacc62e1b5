"""In-process movement sinks.

``RecordingSink`` keeps every report in memory and is what the tests
and the trace replayer use.  ``LoggingSink`` only logs each report,
which is useful when exercising the pipeline without a connected
device.
"""

from __future__ import annotations

import logging

from hid_pointer.models.motion import MovementDelta
from hid_pointer.sinks.interface import MovementSink, clamp_delta

logger = logging.getLogger(__name__)


class RecordingSink(MovementSink):
    """Collects clamped reports in a list.

    Args:
        accepting: Return value of ``accept``.  Set to ``False`` to
            simulate a transport that drops reports; rejected reports
            are counted but not recorded.
    """

    def __init__(self, accepting: bool = True) -> None:
        self.accepting = accepting
        self.deltas: list[MovementDelta] = []
        self.rejected_count: int = 0

    def accept(self, dx: int, dy: int) -> bool:
        if not self.accepting:
            self.rejected_count += 1
            return False
        self.deltas.append(clamp_delta(dx, dy))
        return True

    @property
    def total(self) -> tuple[int, int]:
        """Sum of all recorded deltas as ``(dx, dy)``."""
        return (
            sum(d.dx for d in self.deltas),
            sum(d.dy for d in self.deltas),
        )

    def clear(self) -> None:
        """Forget all recorded reports."""
        self.deltas.clear()
        self.rejected_count = 0


class LoggingSink(MovementSink):
    """Logs each clamped report and accepts it.

    Args:
        source: Label included in each log line.
    """

    def __init__(self, source: str = "pointer") -> None:
        self._source = source

    def accept(self, dx: int, dy: int) -> bool:
        delta = clamp_delta(dx, dy)
        logger.info("%s delta: (%d, %d)", self._source, delta.dx, delta.dy)
        return True
