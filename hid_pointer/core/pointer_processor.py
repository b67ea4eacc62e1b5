"""Pointer input processor: absolute positions in, quantized deltas out.

The ``PointerInputProcessor`` is the pipeline's single entry point.
Each call to ``update_position`` runs one sample through the active
smoothing filter, differences it against the previous filtered
position, applies the sensitivity configuration, rounds to whole device
counts and forwards any non-zero result to the injected movement sink.

Typical usage::

    from hid_pointer.core.filters import KalmanFilter
    from hid_pointer.core.pointer_processor import PointerInputProcessor
    from hid_pointer.sinks.recording import RecordingSink

    sink = RecordingSink()
    processor = PointerInputProcessor(sink, KalmanFilter())
    processor.update_position((120.0, 48.5), timestamp=0.016)
    ...
    processor.reset()  # drag ended

Rounding uses Python's ``round``, i.e. halves go to the nearest even
integer: a scaled delta of 2.5 becomes 2 and 3.5 becomes 4.  An axis
whose scaled delta overflows to infinity (or is NaN) contributes zero.

The processor is synchronous and keeps per-instance state only.  It is
not safe to call from several threads at once; callers that ingest from
multiple threads must serialise access themselves.
"""

from __future__ import annotations

import logging
import math
import time
from collections.abc import Sequence

from hid_pointer.config.settings import Settings
from hid_pointer.core.filters import IdentityFilter, PointerMotionFilter
from hid_pointer.models.motion import Vector2
from hid_pointer.sinks.interface import MovementSink

logger = logging.getLogger(__name__)


class PointerInputProcessor:
    """Turns a stream of absolute positions into relative-motion reports.

    Args:
        sink: Receiver of the quantized deltas.
        smoothing: Initial filter.  Defaults to ``IdentityFilter``.
        settings: Initial sensitivity, scale and orientation.  Defaults
            to ``Settings()``.
    """

    def __init__(
        self,
        sink: MovementSink,
        smoothing: PointerMotionFilter | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or Settings()
        self._sink = sink
        self._filter: PointerMotionFilter = smoothing or IdentityFilter()
        self._last_filtered_position: Vector2 | None = None
        self.horizontal_sensitivity: float = settings.horizontal_sensitivity
        self.vertical_sensitivity: float = settings.vertical_sensitivity
        self.global_scale: float = settings.global_scale
        self.flip_y: bool = settings.flip_y

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def filter(self) -> PointerMotionFilter:
        """The active smoothing filter."""
        return self._filter

    def set_filter(self, smoothing: PointerMotionFilter) -> None:
        """Install a different filter.

        The new filter is used as-is; neither its state nor the
        processor's baseline is reset.  Call ``reset`` as well when the
        swap should start a fresh motion.
        """
        self._filter = smoothing
        logger.debug("Input filter set to %s", smoothing.name or type(smoothing).__name__)

    def set_sensitivity(
        self,
        global_scale: float,
        horizontal_sensitivity: float,
        vertical_sensitivity: float,
    ) -> None:
        """Update all three scale factors without touching filter state."""
        self.global_scale = global_scale
        self.horizontal_sensitivity = horizontal_sensitivity
        self.vertical_sensitivity = vertical_sensitivity

    @property
    def sink(self) -> MovementSink:
        """Receiver of the quantized deltas."""
        return self._sink

    @sink.setter
    def sink(self, sink: MovementSink) -> None:
        self._sink = sink

    @property
    def last_filtered_position(self) -> Vector2 | None:
        """Previous filtered position, or ``None`` before the first sample."""
        return self._last_filtered_position

    # ------------------------------------------------------------------
    # Processing
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Forget the baseline and the filter's history.

        Call when a drag ends or the input source changes so stale
        velocity or trend does not leak into the next motion.
        """
        self._last_filtered_position = None
        self._filter.reset()
        logger.debug("Pointer processor reset")

    def update_position(
        self,
        position: Sequence[float],
        timestamp: float | None = None,
    ) -> bool:
        """Process one absolute pointer sample.

        Args:
            position: Raw pointer position ``(x, y)``.
            timestamp: Sample time in seconds.  ``None`` or ``0`` means
                now.

        Returns:
            ``True`` if a report was sent and the sink accepted it,
            ``False`` if the movement quantized to zero or the sink
            rejected it.
        """
        if not timestamp:
            timestamp = time.time()

        if self._last_filtered_position is None:
            self._last_filtered_position = (float(position[0]), float(position[1]))

        filtered = self._filter.filter(position, timestamp)
        last_x, last_y = self._last_filtered_position
        delta_x = filtered[0] - last_x
        delta_y = filtered[1] - last_y
        self._last_filtered_position = filtered

        delta_x *= self.horizontal_sensitivity
        delta_y *= self.vertical_sensitivity
        delta_x *= self.global_scale
        delta_y *= self.global_scale
        if self.flip_y:
            delta_y = -delta_y

        if not (math.isfinite(delta_x) and math.isfinite(delta_y)):
            logger.debug("Dropping non-finite axis of delta (%s, %s)", delta_x, delta_y)
            delta_x = delta_x if math.isfinite(delta_x) else 0.0
            delta_y = delta_y if math.isfinite(delta_y) else 0.0

        dx = round(delta_x)
        dy = round(delta_y)
        if dx == 0 and dy == 0:
            return False

        accepted = self._sink.accept(dx, dy)
        if not accepted:
            logger.debug("Movement report (%d, %d) rejected by sink", dx, dy)
        return bool(accepted)
