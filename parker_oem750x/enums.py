# parker_oem750x/enums.py
"""
Enumerations for OEM750X command arguments and status codes.

Integer-valued families render as their digit on the wire (e.g. ``LD3``),
string-valued families render as their value (e.g. ``H+``).
"""
from enum import Enum, IntEnum


class MovementMode(IntEnum):
    """Indexer positioning mode in steps mode (FSA)."""
    INCREMENTAL = 0
    ABSOLUTE = 1


class SwitchState(IntEnum):
    """Active state of the end-of-travel limit switches (OSA)."""
    NORMALLY_CLOSED = 0
    NORMALLY_OPEN = 1


class IndexerMode(IntEnum):
    """Whether moves are counted in motor steps or encoder steps (FSB)."""
    MOTOR_STEPS = 0
    ENCODER_STEPS = 1


class Polarity(IntEnum):
    """Command direction polarity (CMDDIR)."""
    NORMAL = 0
    INVERTED = 1


class DisableSwitch(IntEnum):
    """Which end-of-travel limit inputs are ignored (LD)."""
    ENABLE_BOTH = 0
    DISABLE_CW = 1
    DISABLE_CCW = 2
    DISABLE_BOTH = 3


class Direction(str, Enum):
    """Motion direction (H). TOGGLE reverses the current heading."""
    FORWARD = "+"
    BACKWARD = "-"
    TOGGLE = ""

    def __str__(self):
        return self.value


class Edge(str, Enum):
    """End-of-travel limit switch."""
    CW = "CW"
    CCW = "CCW"

    @classmethod
    def for_direction(cls, direction: Direction) -> "Edge":
        """Limit switch met when travelling in ``direction`` (Forward is CW)."""
        if direction == Direction.FORWARD:
            return cls.CW
        if direction == Direction.BACKWARD:
            return cls.CCW
        raise ValueError(f"Direction {direction!r} has no associated limit switch.")


class IndexerStatus(str, Enum):
    """General indexer status returned by the R query."""
    READY = "R"
    READY_ATTENTION = "S"
    BUSY = "B"
    BUSY_ATTENTION = "C"

    @property
    def is_busy(self) -> bool:
        return self in (IndexerStatus.BUSY, IndexerStatus.BUSY_ATTENTION)

    @property
    def needs_attention(self) -> bool:
        return self in (IndexerStatus.READY_ATTENTION, IndexerStatus.BUSY_ATTENTION)
