# parker_oem750x/commands.py
"""
Command encoding and validation for the OEM750X ASCII protocol.

Commands follow the grammar ``[<channel>]<mnemonic>[<argument>]``. Each
operation is described once in ``COMMAND_REGISTRY`` by its mnemonic, the
validator and encoder for its argument and, for queries, the decoder for
its reply. Encoding is pure string construction: an argument that fails
validation raises ``ValidationError`` and never reaches the wire.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Type, TypeVar

import enum
import logging
import math

from . import constants as const
from . import parsing
from .enums import Direction
from .enums import DisableSwitch
from .enums import IndexerMode
from .enums import MovementMode
from .enums import Polarity
from .enums import SwitchState
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=enum.Enum)


# --- Validators ---

def validate_channel(channel: Any) -> int:
    """Checks that ``channel`` is an integer drive address."""
    if isinstance(channel, bool) or not isinstance(channel, int):
        raise ValidationError(
            f"Invalid channel: {channel!r}. Must be an integer.", value=channel
        )
    if not (const.MIN_CHANNEL <= channel <= const.MAX_CHANNEL):
        raise ValidationError(
            f"Invalid channel: {channel}. Must be {const.MIN_CHANNEL}-{const.MAX_CHANNEL}.",
            value=channel,
        )
    return channel


def _validate_number(name: str, value: Any, low: float, high: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(
            f"Invalid {name}: {value!r}. Must be a number.", value=value
        )
    if not math.isfinite(value) or not (low <= value <= high):
        raise ValidationError(
            f"Invalid {name}: {value}. Must be between {low} and {high}.",
            value=value,
        )
    return value


def _validate_integer(name: str, value: Any, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"Invalid {name}: {value!r}. Must be an integer.", value=value
        )
    if not (low <= value <= high):
        raise ValidationError(
            f"Invalid {name}: {value}. Must be between {low} and {high}.",
            value=value,
        )
    return value


def validate_velocity(value: Any) -> float:
    """Target velocity in rps, 0.001-50.0."""
    return _validate_number(
        "motor velocity", value, const.VELOCITY_MIN, const.VELOCITY_MAX
    )


def validate_acceleration(value: Any) -> float:
    """Target acceleration in rps^2, 0.01-999.0."""
    return _validate_number(
        "motor acceleration", value, const.ACCELERATION_MIN, const.ACCELERATION_MAX
    )


def validate_distance(value: Any) -> int:
    """Target distance in steps, within +/-2147483648."""
    return _validate_integer(
        "distance", value, const.DISTANCE_MIN, const.DISTANCE_MAX
    )


def validate_resolution(value: Any) -> int:
    """Motor resolution in steps per revolution, 200-50800."""
    return _validate_integer(
        "motor resolution", value, const.RESOLUTION_MIN, const.RESOLUTION_MAX
    )


def validate_homing_speed(value: Any) -> float:
    """Homing speed in rps, 0.01-50.00."""
    return _validate_number(
        "homing speed", value, const.HOMING_SPEED_MIN, const.HOMING_SPEED_MAX
    )


def coerce_enum(enum_cls: Type[E], value: Any) -> E:
    """
    Converts ``value`` to a member of ``enum_cls``.

    Members pass through unchanged; raw values (``3``, ``"+"``) are looked up.

    Raises:
        ValidationError: If ``value`` is not in the enum's value set.
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        raise ValidationError(
            f"Invalid {enum_cls.__name__}: {value!r}", value=value
        )
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"Invalid {enum_cls.__name__}: {value!r}", value=value
        ) from None


def validate_homing_direction(direction: Any) -> Direction:
    """Explicit homing accepts only Forward or Backward."""
    direction = coerce_enum(Direction, direction)
    if direction == Direction.TOGGLE:
        raise ValidationError(
            "Homing direction must be '+' (forward) or '-' (backward), got toggle.",
            value=direction,
        )
    return direction


def validate_bool(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(
            f"Invalid flag: {value!r}. Must be True or False.", value=value
        )
    return value


def _enum_validator(enum_cls: Type[E]) -> Callable[[Any], E]:
    return lambda value: coerce_enum(enum_cls, value)


def _validate_home_args(args: Any) -> Tuple[Direction, float]:
    try:
        direction, speed = args
    except (TypeError, ValueError):
        raise ValidationError(
            f"Go home expects (direction, speed), got {args!r}", value=args
        ) from None
    return validate_homing_direction(direction), validate_homing_speed(speed)


# --- Argument encoders ---

def _two_decimals(value: float) -> str:
    return f"{value:.2f}"


def _integer(value: int) -> str:
    return f"{int(value)}"


def _flag(value: bool) -> str:
    return "1" if value else "0"


def _direction(value: Direction) -> str:
    return value.value


def _home(args: Tuple[Direction, float]) -> str:
    direction, speed = args
    return f"{direction.value}{speed:.2f}"


@dataclass(frozen=True)
class CommandSpec:
    """
    One entry of the command registry.

    Attributes:
        name: Symbolic operation name.
        mnemonic: Wire mnemonic written after the channel prefix.
        validator: Normalizes and range-checks the argument, if the command takes one.
        encoder: Renders the validated argument as wire text.
        decoder: Converts the cleaned reply of a query into a typed value.
        broadcast: Whether the command may be sent without a channel prefix.
    """
    name: str
    mnemonic: str
    validator: Optional[Callable[[Any], Any]] = None
    encoder: Optional[Callable[[Any], str]] = None
    decoder: Optional[Callable[[str], Any]] = None
    broadcast: bool = False

    @property
    def is_query(self) -> bool:
        return self.decoder is not None

    @property
    def takes_argument(self) -> bool:
        return self.encoder is not None

    def encode(self, channel: Optional[int] = None, value: Any = None) -> str:
        """
        Builds the command string (without the CR delimiter).

        Args:
            channel: Target channel, or None for the broadcast form.
            value: The command argument, if the command takes one.

        Raises:
            ValidationError: On an invalid channel, a missing/unexpected argument
                             or an argument outside its domain.
        """
        if channel is None:
            if not self.broadcast:
                raise ValidationError(
                    f"Command '{self.name}' requires a channel.", value=channel
                )
            prefix = ""
        else:
            prefix = str(validate_channel(channel))

        if not self.takes_argument:
            if value is not None:
                raise ValidationError(
                    f"Command '{self.name}' takes no argument, got {value!r}.",
                    value=value,
                    channel=channel,
                )
            return f"{prefix}{self.mnemonic}"

        if value is None:
            raise ValidationError(
                f"Command '{self.name}' requires an argument.", channel=channel
            )
        if self.validator is not None:
            try:
                value = self.validator(value)
            except ValidationError as e:
                e.channel = channel
                raise
        return f"{prefix}{self.mnemonic}{self.encoder(value)}"  # type: ignore[misc]


def _register(*specs: CommandSpec) -> Dict[str, CommandSpec]:
    return {spec.name: spec for spec in specs}


COMMAND_REGISTRY: Dict[str, CommandSpec] = _register(
    # Motion modes
    CommandSpec("set_normal_mode", const.CMD_NORMAL_MODE),
    CommandSpec("set_continuous_mode", const.CMD_CONTINUOUS_MODE),
    CommandSpec("set_absolute_mode", const.CMD_ABSOLUTE_MODE),
    CommandSpec("set_incremental_mode", const.CMD_INCREMENTAL_MODE),
    CommandSpec("set_zero_position", const.CMD_ZERO_POSITION),
    # Motion
    CommandSpec("go", const.CMD_GO, broadcast=True),
    CommandSpec("stop", const.CMD_STOP, broadcast=True),
    CommandSpec("kill", const.CMD_KILL),
    CommandSpec("reset", const.CMD_RESET),
    CommandSpec(
        "reset_communication", const.CMD_RESET_COMMUNICATION, decoder=parsing.raw_string
    ),
    CommandSpec(
        "go_home", const.CMD_GO_HOME,
        validator=_validate_home_args, encoder=_home, broadcast=True,
    ),
    # Setpoints
    CommandSpec(
        "set_target_velocity", const.CMD_VELOCITY,
        validator=validate_velocity, encoder=_two_decimals,
    ),
    CommandSpec("get_target_velocity", const.CMD_VELOCITY, decoder=parsing.parse_float),
    CommandSpec(
        "set_target_acceleration", const.CMD_ACCELERATION,
        validator=validate_acceleration, encoder=_two_decimals,
    ),
    CommandSpec(
        "get_target_acceleration", const.CMD_ACCELERATION, decoder=parsing.parse_float
    ),
    CommandSpec(
        "set_target_distance", const.CMD_DISTANCE,
        validator=validate_distance, encoder=_integer,
    ),
    CommandSpec("get_target_distance", const.CMD_DISTANCE, decoder=parsing.parse_int),
    # Settings
    CommandSpec(
        "set_resolution", const.CMD_RESOLUTION,
        validator=validate_resolution, encoder=_integer,
    ),
    CommandSpec("get_resolution", const.CMD_RESOLUTION, decoder=parsing.parse_int),
    CommandSpec(
        "set_indexer_movement_mode", const.CMD_MOVEMENT_MODE,
        validator=_enum_validator(MovementMode), encoder=_integer,
    ),
    CommandSpec(
        "set_end_limits_state", const.CMD_END_LIMITS_STATE,
        validator=_enum_validator(SwitchState), encoder=_integer,
    ),
    CommandSpec(
        "set_indexer_mode", const.CMD_INDEXER_MODE,
        validator=_enum_validator(IndexerMode), encoder=_integer,
    ),
    CommandSpec(
        "set_polarity", const.CMD_POLARITY,
        validator=_enum_validator(Polarity), encoder=_integer,
    ),
    CommandSpec(
        "set_error_checking", const.CMD_ERROR_CHECKING,
        validator=validate_bool, encoder=_flag,
    ),
    CommandSpec(
        "set_shutdown", const.CMD_SHUTDOWN, validator=validate_bool, encoder=_flag
    ),
    CommandSpec(
        "set_disable_switch", const.CMD_DISABLE_SWITCH,
        validator=_enum_validator(DisableSwitch), encoder=_integer,
    ),
    CommandSpec(
        "set_direction", const.CMD_DIRECTION,
        validator=_enum_validator(Direction), encoder=_direction,
    ),
    # Readings
    CommandSpec("get_part_number", const.CMD_PART_NUMBER, decoder=parsing.raw_string),
    CommandSpec(
        "get_indexer_status", const.CMD_INDEXER_STATUS,
        decoder=parsing.parse_indexer_status,
    ),
    CommandSpec(
        "get_closed_loop_status", const.CMD_LIMITS_STATUS,
        decoder=parsing.parse_closed_loop_status,
    ),
    CommandSpec(
        "get_limits_status", const.CMD_LIMITS_STATUS,
        decoder=parsing.parse_limits_status,
    ),
    CommandSpec(
        "get_absolute_position", const.CMD_ABSOLUTE_POSITION, decoder=parsing.parse_int
    ),
    CommandSpec(
        "get_relative_position", const.CMD_RELATIVE_POSITION,
        decoder=parsing.decode_relative_position,
    ),
)


def get_command(name: str) -> CommandSpec:
    try:
        return COMMAND_REGISTRY[name]
    except KeyError:
        raise ValidationError(f"Unknown command: {name!r}", value=name) from None


def encode_command(name: str, channel: Optional[int] = None, value: Any = None) -> str:
    """Validates and encodes the registered operation ``name``."""
    command = get_command(name).encode(channel, value)
    logger.debug(f"Encoded {name}({channel}, {value!r}) -> {command!r}")
    return command
