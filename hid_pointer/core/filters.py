"""Pointer-motion smoothing filters.

Every filter maps an absolute pointer position to a filtered position in
the same coordinate space and keeps whatever history it needs between
calls.  The family is closed: the processor is handed one of the six
implementations below and swaps it only through
``PointerInputProcessor.set_filter``.

* **IdentityFilter** -- passes positions through unchanged.
* **MuteFilter** -- always returns the origin.
* **ExponentialMovingAverageFilter** -- single exponential smoothing
  with a dead-band against micro-jitter.
* **DoubleExponentialFilter** -- Holt's level/trend smoothing.
* **KalmanFilter** -- constant-velocity Kalman filter run independently
  on each axis.
* **PredictiveFilter** -- extrapolates ahead along a smoothed velocity
  to hide transport latency.

Filters never raise on finite input.  Constructor parameters are
clamped into their valid range rather than rejected, since they are
interactive tuning knobs.

This module depends only on ``numpy`` and ``hid_pointer.models``.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from collections import deque
from collections.abc import Sequence
from typing import Any, ClassVar

import numpy as np
from numpy.typing import NDArray

from hid_pointer.models.motion import Vector2

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_KALMAN_NOMINAL_DT: float = 0.01
"""Fixed prediction step for the Kalman filter, in seconds."""

_KALMAN_MIN_NOISE: float = 1e-5
"""Lower bound for both Kalman noise parameters."""

_SINGULAR_DET_EPSILON: float = 1e-6
"""Determinant magnitude below which a matrix is treated as singular."""

_PREDICTIVE_HISTORY_SIZE: int = 5
"""Number of samples kept by the predictive filter."""

_PREDICTIVE_MIN_SPAN: float = 0.001
"""Shortest history time span (seconds) used for a velocity estimate."""


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _as_array(point: Sequence[float]) -> NDArray[np.float64]:
    return np.array((float(point[0]), float(point[1])), dtype=np.float64)


def _as_vector(array: NDArray[np.float64]) -> Vector2:
    return (float(array[0]), float(array[1]))


class PointerMotionFilter(ABC):
    """Contract shared by all pointer-motion filters.

    ``filter`` is deterministic given the current state and the inputs.
    ``reset`` discards all history so the next call behaves like the
    first call after construction.
    """

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    filter_type: ClassVar[str] = ""

    @abstractmethod
    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        """Filter one absolute position.

        Args:
            point: Raw position ``(x, y)``.
            timestamp: Sample time in seconds.

        Returns:
            The filtered position ``(x, y)``.
        """

    @abstractmethod
    def reset(self) -> None:
        """Discard all accumulated state."""

    def params(self) -> dict[str, Any]:
        """Return the constructor parameters currently in effect."""
        return {}

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.params().items())
        return f"{type(self).__name__}({args})"


# ---------------------------------------------------------------------------
# Stateless filters
# ---------------------------------------------------------------------------


class IdentityFilter(PointerMotionFilter):
    """Pass-through filter."""

    name = "No Filter"
    filter_type = "identity"
    description = "Passes pointer positions through unchanged"

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        return (float(point[0]), float(point[1]))

    def reset(self) -> None:
        pass


class MuteFilter(PointerMotionFilter):
    """Filter that always reports the origin, disabling motion."""

    name = "Mute"
    filter_type = "mute"
    description = "Mutes all input (returns zero)"

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        return (0.0, 0.0)

    def reset(self) -> None:
        pass


# ---------------------------------------------------------------------------
# Exponential smoothing
# ---------------------------------------------------------------------------


class ExponentialMovingAverageFilter(PointerMotionFilter):
    """Single exponential smoothing with a dead-band.

    ``filtered = alpha * point + (1 - alpha) * last``.  The new value is
    only committed when it moves at least ``min_change`` away from the
    last committed value; otherwise the last committed value is
    returned again.  Higher ``alpha`` means less smoothing.

    Args:
        alpha: Weight of the newest sample, clamped to ``[0, 1]``.
        min_change: Dead-band radius, clamped to ``>= 0``.
    """

    name = "EMA Filter"
    filter_type = "exponential_ma"
    description = "Simple exponential moving average filter"

    def __init__(self, alpha: float = 0.5, min_change: float = 0.0001) -> None:
        self._alpha = _clamp01(alpha)
        self._min_change = max(0.0, float(min_change))
        self._last_value: NDArray[np.float64] | None = None

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def min_change(self) -> float:
        return self._min_change

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        current = _as_array(point)
        if self._last_value is None:
            self._last_value = current
            return _as_vector(current)

        filtered = self._alpha * current + (1.0 - self._alpha) * self._last_value
        change = filtered - self._last_value
        if float(change @ change) >= self._min_change * self._min_change:
            self._last_value = filtered
        return _as_vector(self._last_value)

    def reset(self) -> None:
        self._last_value = None

    def params(self) -> dict[str, Any]:
        return {"alpha": self._alpha, "min_change": self._min_change}


class DoubleExponentialFilter(PointerMotionFilter):
    """Holt's double exponential smoothing.

    Tracks a smoothed level and a smoothed trend.  The trend pulls the
    level towards fast-moving input but is not added to the output, so
    the filter never overshoots by a forecast step.

    Args:
        alpha: Level smoothing factor, clamped to ``[0, 1]``.
        beta: Trend smoothing factor, clamped to ``[0, 1]``.
    """

    name = "Double Exp"
    filter_type = "double_exponential"
    description = "Double exponential smoothing filter (Holt's method)"

    def __init__(self, alpha: float = 0.5, beta: float = 0.1) -> None:
        self._alpha = _clamp01(alpha)
        self._beta = _clamp01(beta)
        self._level: NDArray[np.float64] | None = None
        self._trend: NDArray[np.float64] = np.zeros(2)

    @property
    def alpha(self) -> float:
        return self._alpha

    @property
    def beta(self) -> float:
        return self._beta

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        current = _as_array(point)
        if self._level is None:
            self._level = current
            self._trend = np.zeros(2)
            return _as_vector(current)

        prev_level = self._level
        self._level = self._alpha * current + (1.0 - self._alpha) * (prev_level + self._trend)
        self._trend = self._beta * (self._level - prev_level) + (1.0 - self._beta) * self._trend
        return _as_vector(self._level)

    def reset(self) -> None:
        self._level = None
        self._trend = np.zeros(2)

    def params(self) -> dict[str, Any]:
        return {"alpha": self._alpha, "beta": self._beta}


# ---------------------------------------------------------------------------
# Kalman
# ---------------------------------------------------------------------------


def _inverse_or_identity(matrix: NDArray[np.float64]) -> NDArray[np.float64]:
    """Invert a square matrix, falling back to identity when near-singular."""
    if abs(float(np.linalg.det(matrix))) < _SINGULAR_DET_EPSILON:
        return np.eye(matrix.shape[0])
    return np.linalg.inv(matrix)


class _AxisKalman:
    """Position/velocity Kalman filter for a single axis."""

    _F = np.array([[1.0, _KALMAN_NOMINAL_DT], [0.0, 1.0]])
    _H = np.array([[1.0, 0.0]])

    def __init__(self, measurement: float) -> None:
        self.state = np.array([measurement, 0.0])
        self.covariance = np.eye(2)

    def step(self, measurement: float, q: float, r: float) -> float:
        # Predict.
        state = self._F @ self.state
        covariance = self._F @ self.covariance @ self._F.T + q * np.eye(2)

        # Correct.
        innovation = measurement - float((self._H @ state)[0])
        s = self._H @ covariance @ self._H.T + r
        gain = covariance @ self._H.T @ _inverse_or_identity(s)
        state = state + gain[:, 0] * innovation
        covariance = (np.eye(2) - gain @ self._H) @ covariance

        if not (np.all(np.isfinite(state)) and np.all(np.isfinite(covariance))):
            # Reseed from the measurement rather than emit NaN/inf.
            state = np.array([measurement, 0.0])
            covariance = np.eye(2)

        self.state = state
        self.covariance = covariance
        return float(state[0])


class KalmanFilter(PointerMotionFilter):
    """Constant-velocity Kalman filter applied symmetrically per axis.

    Each axis runs its own two-state (position, velocity) filter with
    the shared noise parameters.  Prediction uses a fixed nominal time
    step, so the filter's behaviour depends on the sample sequence and
    not on the wall-clock spacing of samples.

    Raising ``measurement_noise`` relative to ``process_noise`` trusts
    the model more than the measurements, which increases smoothing and
    lag.

    Args:
        process_noise: Process noise ``q``, clamped to ``>= 1e-5``.
        measurement_noise: Measurement noise ``r``, clamped to
            ``>= 1e-5``.
    """

    name = "Kalman Filter"
    filter_type = "kalman"
    description = "Statistical filter that models position and velocity with adaptive certainty"

    def __init__(self, process_noise: float = 0.001, measurement_noise: float = 0.1) -> None:
        self._process_noise = max(_KALMAN_MIN_NOISE, float(process_noise))
        self._measurement_noise = max(_KALMAN_MIN_NOISE, float(measurement_noise))
        self._axes: tuple[_AxisKalman, _AxisKalman] | None = None

    @property
    def process_noise(self) -> float:
        return self._process_noise

    @property
    def measurement_noise(self) -> float:
        return self._measurement_noise

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        x, y = float(point[0]), float(point[1])
        if self._axes is None:
            self._axes = (_AxisKalman(x), _AxisKalman(y))
            return (x, y)

        q, r = self._process_noise, self._measurement_noise
        return (self._axes[0].step(x, q, r), self._axes[1].step(y, q, r))

    def reset(self) -> None:
        self._axes = None

    def params(self) -> dict[str, Any]:
        return {
            "process_noise": self._process_noise,
            "measurement_noise": self._measurement_noise,
        }


# ---------------------------------------------------------------------------
# Predictive
# ---------------------------------------------------------------------------


class PredictiveFilter(PointerMotionFilter):
    """Latency-compensating extrapolation.

    Keeps the last five samples, estimates velocity across the whole
    window, smooths that estimate with ``smoothing_factor`` and returns
    ``current + velocity * prediction_time``.  When the window is too
    short in time to divide by, the velocity for that call is zero.

    Args:
        prediction_time: How far ahead to extrapolate, in seconds.
            Clamped to ``>= 0``.
        smoothing_factor: Interpolation weight of the newest velocity
            estimate, clamped to ``[0, 1]``.
    """

    name = "Predictive Filter"
    filter_type = "predictive"
    description = "Reduces perceived lag by predicting future position"

    def __init__(self, prediction_time: float = 0.05, smoothing_factor: float = 0.5) -> None:
        self._prediction_time = max(0.0, float(prediction_time))
        self._smoothing_factor = _clamp01(smoothing_factor)
        self._history: deque[tuple[NDArray[np.float64], float]] = deque(
            maxlen=_PREDICTIVE_HISTORY_SIZE,
        )
        self._velocity: NDArray[np.float64] = np.zeros(2)

    @property
    def prediction_time(self) -> float:
        return self._prediction_time

    @property
    def smoothing_factor(self) -> float:
        return self._smoothing_factor

    def filter(self, point: Sequence[float], timestamp: float) -> Vector2:
        current = _as_array(point)
        first = not self._history
        self._history.append((current, float(timestamp)))
        if first:
            return _as_vector(current)

        predicted = current + self._estimate_velocity() * self._prediction_time
        if not np.all(np.isfinite(predicted)):
            return _as_vector(current)
        return _as_vector(predicted)

    def reset(self) -> None:
        self._history.clear()
        self._velocity = np.zeros(2)

    def params(self) -> dict[str, Any]:
        return {
            "prediction_time": self._prediction_time,
            "smoothing_factor": self._smoothing_factor,
        }

    def _estimate_velocity(self) -> NDArray[np.float64]:
        """Update and return the smoothed velocity estimate."""
        if len(self._history) < 2:
            return np.zeros(2)

        oldest_pos, oldest_t = self._history[0]
        newest_pos, newest_t = self._history[-1]
        span = newest_t - oldest_t
        if not math.isfinite(span) or span <= _PREDICTIVE_MIN_SPAN:
            return np.zeros(2)

        instant = (newest_pos - oldest_pos) / span
        velocity = self._velocity + (instant - self._velocity) * self._smoothing_factor
        if not np.all(np.isfinite(velocity)):
            velocity = np.zeros(2)
        self._velocity = velocity
        return velocity
