"""
Parker OEM750X Serial Driver Library
====================================

This library drives Parker OEM750X stepper indexer/drives over their
half-duplex RS-232 ASCII protocol. It includes the command encoder and
registry, the echo-verified request/response session, reply decoders,
a hard homing procedure and a high-level per-channel Axis object.
"""

from . import constants as const

from .axis import Axis
from .commands import COMMAND_REGISTRY, CommandSpec, encode_command
from .drive import OEM750x, create_drive
from .homing import HardHoming, HomingPhase
from .session import DriveSession
from .transport import SerialOptions, SerialTransport, Transport

from .enums import (
    Direction,
    DisableSwitch,
    Edge,
    IndexerMode,
    IndexerStatus,
    MovementMode,
    Polarity,
    SwitchState,
)

from .parsing import (
    ClosedLoopStatus,
    LimitsStatus,
    decode_closed_loop_status,
    decode_limits_status,
    decode_relative_position,
    parse_value_response,
)

from .exceptions import (
    OEM750xError,
    NotConnectedError,
    TransportError,
    ValidationError,
    EchoMismatchError,
    ParseError,
    UnknownStatusCodeError,
    HomingError,
    HomingCancelledError,
    HomingTimeoutError,
)

__version__ = "0.1.0"

__all__ = [
    "const",

    # Key classes
    "Transport",
    "SerialTransport",
    "SerialOptions",
    "DriveSession",
    "OEM750x",
    "create_drive",
    "Axis",
    "HardHoming",
    "HomingPhase",

    # Command registry
    "CommandSpec",
    "COMMAND_REGISTRY",
    "encode_command",

    # Enums
    "Direction",
    "DisableSwitch",
    "Edge",
    "IndexerMode",
    "IndexerStatus",
    "MovementMode",
    "Polarity",
    "SwitchState",

    # Reply decoding
    "ClosedLoopStatus",
    "LimitsStatus",
    "decode_closed_loop_status",
    "decode_limits_status",
    "decode_relative_position",
    "parse_value_response",

    # Exceptions
    "OEM750xError",
    "NotConnectedError",
    "TransportError",
    "ValidationError",
    "EchoMismatchError",
    "ParseError",
    "UnknownStatusCodeError",
    "HomingError",
    "HomingCancelledError",
    "HomingTimeoutError",
]
