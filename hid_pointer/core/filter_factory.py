"""Filter construction, parameter metadata and serialisation.

Maps the stable ``FilterType`` names used in configuration files to the
concrete filter classes, describes each filter's tunable parameters, and
converts filters to and from plain dictionaries::

    {"type": "kalman", "params": {"process_noise": 0.001, "measurement_noise": 0.1}}

Typical usage::

    from hid_pointer.core.filter_factory import FilterType, create_filter

    smoothing = create_filter(FilterType.EXPONENTIAL_MA, alpha=0.3)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from hid_pointer.config.settings import Settings
from hid_pointer.core.filters import (
    DoubleExponentialFilter,
    ExponentialMovingAverageFilter,
    IdentityFilter,
    KalmanFilter,
    MuteFilter,
    PointerMotionFilter,
    PredictiveFilter,
)


class FilterType(Enum):
    """The available smoothing filters.

    Attributes:
        IDENTITY: No filtering.
        MUTE: Suppresses all motion.
        EXPONENTIAL_MA: Exponential moving average with dead-band.
        DOUBLE_EXPONENTIAL: Holt's double exponential smoothing.
        KALMAN: Per-axis constant-velocity Kalman filter.
        PREDICTIVE: Latency-compensating extrapolation.
    """

    IDENTITY = "identity"
    MUTE = "mute"
    EXPONENTIAL_MA = "exponential_ma"
    DOUBLE_EXPONENTIAL = "double_exponential"
    KALMAN = "kalman"
    PREDICTIVE = "predictive"


@dataclass(frozen=True)
class ParameterInfo:
    """Description of one tunable filter parameter.

    ``minimum`` and ``maximum`` are the recommended interactive range;
    the filters themselves accept anything and clamp only to the
    mathematically valid range.

    Attributes:
        name: Constructor keyword.
        label: Human-readable name.
        minimum: Lower end of the recommended range.
        maximum: Upper end of the recommended range.
        default: Constructor default.
    """

    name: str
    label: str
    minimum: float
    maximum: float
    default: float


_FILTER_CLASSES: dict[FilterType, type[PointerMotionFilter]] = {
    FilterType.IDENTITY: IdentityFilter,
    FilterType.MUTE: MuteFilter,
    FilterType.EXPONENTIAL_MA: ExponentialMovingAverageFilter,
    FilterType.DOUBLE_EXPONENTIAL: DoubleExponentialFilter,
    FilterType.KALMAN: KalmanFilter,
    FilterType.PREDICTIVE: PredictiveFilter,
}

_PARAMETER_INFO: dict[FilterType, tuple[ParameterInfo, ...]] = {
    FilterType.IDENTITY: (),
    FilterType.MUTE: (),
    FilterType.EXPONENTIAL_MA: (
        ParameterInfo("alpha", "Smoothing", 0.05, 1.0, 0.5),
        ParameterInfo("min_change", "Min Change", 0.0001, 0.01, 0.0001),
    ),
    FilterType.DOUBLE_EXPONENTIAL: (
        ParameterInfo("alpha", "Level Smoothing", 0.1, 0.9, 0.5),
        ParameterInfo("beta", "Trend Smoothing", 0.01, 0.5, 0.1),
    ),
    FilterType.KALMAN: (
        ParameterInfo("process_noise", "Process Noise", 0.0001, 0.01, 0.001),
        ParameterInfo("measurement_noise", "Measurement Noise", 0.01, 1.0, 0.1),
    ),
    FilterType.PREDICTIVE: (
        ParameterInfo("prediction_time", "Prediction Time", 0.01, 0.2, 0.05),
        ParameterInfo("smoothing_factor", "Smoothing", 0.1, 0.9, 0.5),
    ),
}


def _coerce_type(filter_type: FilterType | str) -> FilterType:
    if isinstance(filter_type, FilterType):
        return filter_type
    try:
        return FilterType(filter_type)
    except ValueError:
        known = ", ".join(t.value for t in FilterType)
        raise ValueError(
            f"Unknown filter type {filter_type!r} (expected one of: {known})"
        ) from None


def get_parameter_info(filter_type: FilterType | str) -> tuple[ParameterInfo, ...]:
    """Return the tunable parameters of a filter type.

    Raises:
        ValueError: If *filter_type* is not a known filter name.
    """
    return _PARAMETER_INFO[_coerce_type(filter_type)]


def get_filter_type(smoothing: PointerMotionFilter) -> FilterType:
    """Return the ``FilterType`` of a filter instance.

    Raises:
        ValueError: If *smoothing* is not one of the built-in filters.
    """
    try:
        filter_type = FilterType(smoothing.filter_type)
    except ValueError:
        filter_type = None
    if filter_type is None or _FILTER_CLASSES[filter_type] is not type(smoothing):
        raise ValueError(f"Unsupported filter class {type(smoothing).__name__}")
    return filter_type


def create_filter(filter_type: FilterType | str, **params: float) -> PointerMotionFilter:
    """Build a filter of the given type.

    Args:
        filter_type: A ``FilterType`` or its string value.
        **params: Constructor parameters.  Omitted parameters take the
            filter's defaults; out-of-range values are clamped by the
            filter.

    Returns:
        A freshly constructed filter in its initial state.

    Raises:
        ValueError: If the type is unknown or a parameter name is not
            accepted by that filter.
    """
    resolved = _coerce_type(filter_type)
    accepted = {info.name for info in _PARAMETER_INFO[resolved]}
    unknown = sorted(set(params) - accepted)
    if unknown:
        raise ValueError(
            f"Unknown parameter(s) for {resolved.value} filter: {', '.join(unknown)}"
        )
    return _FILTER_CLASSES[resolved](**{k: float(v) for k, v in params.items()})


def create_filter_from_settings(settings: Settings) -> PointerMotionFilter:
    """Build the filter named by ``settings.filter_type``."""
    return create_filter(settings.filter_type, **settings.filter_params)


def filter_to_dict(smoothing: PointerMotionFilter) -> dict[str, Any]:
    """Serialise a filter's type and parameters (not its runtime state)."""
    return {
        "type": get_filter_type(smoothing).value,
        "params": smoothing.params(),
    }


def filter_from_dict(data: dict[str, Any]) -> PointerMotionFilter:
    """Rebuild a filter from the output of ``filter_to_dict``.

    Raises:
        ValueError: If ``type`` is missing or unknown, or ``params``
            holds a name the filter does not accept.
    """
    if "type" not in data:
        raise ValueError("Filter definition is missing 'type'")
    return create_filter(data["type"], **(data.get("params") or {}))
