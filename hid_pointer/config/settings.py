"""Configuration defaults for the pointer-motion pipeline.

Provides the ``Settings`` dataclass that holds the tunable parameters
for the pointer input processor: per-axis sensitivity, global scale,
vertical axis orientation, and the smoothing filter to install.

Typical usage::

    from hid_pointer.config.settings import get_default_settings

    settings = get_default_settings()
    print(settings.horizontal_sensitivity)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any


@dataclass(frozen=True)
class Settings:
    """Immutable configuration for the pointer-motion pipeline.

    These values only seed a processor.  Sensitivities and scale remain
    adjustable at runtime on the processor itself without touching the
    filter state.

    Attributes:
        horizontal_sensitivity: Multiplier applied to the filtered
            horizontal delta before quantization.
        vertical_sensitivity: Multiplier applied to the filtered
            vertical delta before quantization.
        global_scale: Multiplier applied to both axes after the
            per-axis sensitivities.
        flip_y: When True the vertical delta is negated before it is
            sent, for sources whose Y axis grows downwards while the
            emulated pointer expects it to grow upwards.
        filter_type: Value of a ``FilterType`` naming the smoothing
            filter to build (``identity``, ``mute``,
            ``exponential_ma``, ``double_exponential``, ``kalman``,
            ``predictive``).
        filter_params: Keyword arguments for the filter constructor.
            Missing keys take the filter's defaults.  Compared for
            equality but left out of the hash.
    """

    # -- Sensitivity ----------------------------------------------------------
    horizontal_sensitivity: float = 3.0
    vertical_sensitivity: float = 3.0
    global_scale: float = 1.0

    # -- Orientation ----------------------------------------------------------
    flip_y: bool = False

    # -- Smoothing ------------------------------------------------------------
    filter_type: str = "identity"
    filter_params: dict[str, float] = field(default_factory=dict, hash=False)

    # -- Factory & serialisation ----------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create a ``Settings`` instance from a plain dictionary.

        Unknown keys are silently ignored so that forward-compatible
        config files do not break older versions.

        Args:
            data: Dictionary whose keys correspond to ``Settings``
                field names.

        Returns:
            A new ``Settings`` instance populated from *data*, with
            defaults filling any missing keys.
        """
        known_names = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in known_names}
        if "filter_params" in filtered:
            filtered["filter_params"] = dict(filtered["filter_params"] or {})
        return cls(**filtered)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the settings to a plain dictionary.

        Returns:
            A dictionary mapping every field name to its current value.
        """
        return asdict(self)


def get_default_settings() -> Settings:
    """Return a ``Settings`` instance with all default values."""
    return Settings()
