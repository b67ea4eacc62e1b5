"""Discrete button and direction events.

A ``DiscreteInputEvent`` is the classified outcome of a raw press or
swipe -- a tap on the primary button, a long press on the secondary
button, a swipe up.  The classifier that produces these events and the
mapping layer that consumes them live outside this package; this module
only fixes the event's shape, its equality and its text rendering.

An event is either a button event (``id`` and ``phase`` meaningful,
``direction`` is ``Direction.NONE``) or a direction event (``direction``
meaningful, ``phase`` is ``Phase.NONE`` and ``id`` is
``ButtonId.PRIMARY``).  Use the ``for_button`` and ``for_direction``
factories to build them.  A default-constructed event is the canonical
"no event".
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ButtonId(Enum):
    """Logical pointer button.

    Attributes:
        PRIMARY: Left mouse button.
        SECONDARY: Right mouse button.
        TERTIARY: Middle mouse button.
    """

    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    TERTIARY = "Tertiary"


class Phase(Enum):
    """What happened to a button.

    Attributes:
        NONE: No button activity.
        PRESS: Button went down.
        RELEASE: Button went up.
        HOLD_BEGIN: A hold gesture started.
        HOLD_END: A hold gesture ended.
        TAP: A short press and release.
        DOUBLE_TAP: Two taps in quick succession.
        LONG_PRESS: A press held past the long-press threshold.
    """

    NONE = "None"
    PRESS = "Press"
    RELEASE = "Release"
    HOLD_BEGIN = "HoldBegin"
    HOLD_END = "HoldEnd"
    TAP = "Tap"
    DOUBLE_TAP = "DoubleTap"
    LONG_PRESS = "LongPress"


class Direction(Enum):
    """Swipe or d-pad direction."""

    NONE = "None"
    UP = "Up"
    RIGHT = "Right"
    DOWN = "Down"
    LEFT = "Left"


@dataclass(frozen=True)
class DiscreteInputEvent:
    """A single classified button or direction event.

    Equality and hashing are structural over ``(id, phase, direction)``
    so events can be used as dictionary keys in input mappings.

    Attributes:
        id: Button the event refers to.  Always ``PRIMARY`` for
            direction events.
        phase: Button phase.  Always ``NONE`` for direction events.
        direction: Direction of a direction event, ``NONE`` otherwise.

    Raises:
        ValueError: If a direction is combined with a non-default
            button or phase.
    """

    id: ButtonId = ButtonId.PRIMARY
    phase: Phase = Phase.NONE
    direction: Direction = Direction.NONE

    def __post_init__(self) -> None:
        if self.direction is not Direction.NONE and (
            self.phase is not Phase.NONE or self.id is not ButtonId.PRIMARY
        ):
            raise ValueError(
                f"Direction event {self.direction.value} cannot carry "
                f"button {self.id.value} or phase {self.phase.value}"
            )

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def for_button(cls, button: ButtonId, phase: Phase) -> DiscreteInputEvent:
        """Build a button event."""
        return cls(id=button, phase=phase, direction=Direction.NONE)

    @classmethod
    def for_direction(cls, direction: Direction) -> DiscreteInputEvent:
        """Build a direction event (phase and button are forced to defaults)."""
        return cls(id=ButtonId.PRIMARY, phase=Phase.NONE, direction=direction)

    # ------------------------------------------------------------------
    # Predicates
    # ------------------------------------------------------------------

    @property
    def is_none(self) -> bool:
        return self == NONE_EVENT

    @property
    def is_press(self) -> bool:
        return self.phase is Phase.PRESS

    @property
    def is_release(self) -> bool:
        return self.phase is Phase.RELEASE

    @property
    def is_hold_begin(self) -> bool:
        return self.phase is Phase.HOLD_BEGIN

    @property
    def is_hold_end(self) -> bool:
        return self.phase is Phase.HOLD_END

    @property
    def is_tap(self) -> bool:
        return self.phase is Phase.TAP

    @property
    def is_double_tap(self) -> bool:
        return self.phase is Phase.DOUBLE_TAP

    @property
    def is_long_press(self) -> bool:
        return self.phase is Phase.LONG_PRESS

    @property
    def is_primary(self) -> bool:
        return self._is_button(ButtonId.PRIMARY)

    @property
    def is_secondary(self) -> bool:
        return self._is_button(ButtonId.SECONDARY)

    @property
    def is_tertiary(self) -> bool:
        return self._is_button(ButtonId.TERTIARY)

    def _is_button(self, button: ButtonId) -> bool:
        return self.direction is Direction.NONE and self.id is button

    @property
    def is_up(self) -> bool:
        return self.direction is Direction.UP

    @property
    def is_right(self) -> bool:
        return self.direction is Direction.RIGHT

    @property
    def is_down(self) -> bool:
        return self.direction is Direction.DOWN

    @property
    def is_left(self) -> bool:
        return self.direction is Direction.LEFT

    # ------------------------------------------------------------------
    # Rendering & serialisation
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        if self.direction is not Direction.NONE:
            return f"Direction.{self.direction.value}"
        if self.phase is Phase.NONE:
            return "None"
        return f"{self.id.value}.{self.phase.value}"

    def to_dict(self) -> dict[str, str]:
        """Serialise to a dictionary, omitting fields left at their default.

        The none event serialises to an empty dictionary.
        """
        data: dict[str, str] = {}
        if self.id is not ButtonId.PRIMARY:
            data["id"] = self.id.value
        if self.phase is not Phase.NONE:
            data["phase"] = self.phase.value
        if self.direction is not Direction.NONE:
            data["direction"] = self.direction.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DiscreteInputEvent:
        """Rebuild an event from the output of ``to_dict``.

        Raises:
            ValueError: If a field holds an unknown enum value.
        """
        direction = Direction(data.get("direction", Direction.NONE.value))
        if direction is not Direction.NONE:
            return cls.for_direction(direction)
        return cls.for_button(
            ButtonId(data.get("id", ButtonId.PRIMARY.value)),
            Phase(data.get("phase", Phase.NONE.value)),
        )


# ----------------------------------------------------------------------
# Predefined events
# ----------------------------------------------------------------------

NONE_EVENT = DiscreteInputEvent()

PRIMARY_PRESS = DiscreteInputEvent.for_button(ButtonId.PRIMARY, Phase.PRESS)
PRIMARY_RELEASE = DiscreteInputEvent.for_button(ButtonId.PRIMARY, Phase.RELEASE)
PRIMARY_TAP = DiscreteInputEvent.for_button(ButtonId.PRIMARY, Phase.TAP)
PRIMARY_DOUBLE_TAP = DiscreteInputEvent.for_button(ButtonId.PRIMARY, Phase.DOUBLE_TAP)
PRIMARY_LONG_PRESS = DiscreteInputEvent.for_button(ButtonId.PRIMARY, Phase.LONG_PRESS)

SECONDARY_PRESS = DiscreteInputEvent.for_button(ButtonId.SECONDARY, Phase.PRESS)
SECONDARY_RELEASE = DiscreteInputEvent.for_button(ButtonId.SECONDARY, Phase.RELEASE)
SECONDARY_TAP = DiscreteInputEvent.for_button(ButtonId.SECONDARY, Phase.TAP)
SECONDARY_DOUBLE_TAP = DiscreteInputEvent.for_button(ButtonId.SECONDARY, Phase.DOUBLE_TAP)
SECONDARY_LONG_PRESS = DiscreteInputEvent.for_button(ButtonId.SECONDARY, Phase.LONG_PRESS)

TERTIARY_PRESS = DiscreteInputEvent.for_button(ButtonId.TERTIARY, Phase.PRESS)
TERTIARY_RELEASE = DiscreteInputEvent.for_button(ButtonId.TERTIARY, Phase.RELEASE)
TERTIARY_TAP = DiscreteInputEvent.for_button(ButtonId.TERTIARY, Phase.TAP)
TERTIARY_DOUBLE_TAP = DiscreteInputEvent.for_button(ButtonId.TERTIARY, Phase.DOUBLE_TAP)
TERTIARY_LONG_PRESS = DiscreteInputEvent.for_button(ButtonId.TERTIARY, Phase.LONG_PRESS)

UP = DiscreteInputEvent.for_direction(Direction.UP)
RIGHT = DiscreteInputEvent.for_direction(Direction.RIGHT)
DOWN = DiscreteInputEvent.for_direction(Direction.DOWN)
LEFT = DiscreteInputEvent.for_direction(Direction.LEFT)

_BUTTON_PHASES: tuple[Phase, ...] = (
    Phase.PRESS,
    Phase.RELEASE,
    Phase.TAP,
    Phase.DOUBLE_TAP,
    Phase.LONG_PRESS,
)


def all_events() -> Iterator[DiscreteInputEvent]:
    """Yield every predefined event.

    Order: the none event, then each button's press, release, tap,
    double tap and long press, then the four directions.
    """
    yield NONE_EVENT
    for button in ButtonId:
        for phase in _BUTTON_PHASES:
            yield DiscreteInputEvent.for_button(button, phase)
    for direction in (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT):
        yield DiscreteInputEvent.for_direction(direction)
