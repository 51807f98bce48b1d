# parker_oem750x/drive.py
"""
Command-level API for the Parker OEM750X indexer/drive.

Each method is a direct composition of the command registry and the drive
session: encode (and validate) the command, then either send it and
verify the echo, or send it and decode the reply.
"""
from typing import Any, Optional

import asyncio
import logging

from .commands import get_command
from .enums import Direction
from .enums import DisableSwitch
from .enums import Edge
from .enums import IndexerMode
from .enums import IndexerStatus
from .enums import MovementMode
from .enums import Polarity
from .enums import SwitchState
from .homing import HardHoming
from .parsing import ClosedLoopStatus
from .parsing import LimitsStatus
from .session import DriveSession
from .transport import SerialOptions
from .transport import SerialTransport

logger = logging.getLogger(__name__)


class OEM750x:
    """
    Provides the OEM750X operations for every channel behind one session.
    """

    def __init__(self, session: DriveSession):
        """
        Args:
            session: The `DriveSession` owning the link to the drive.
        """
        self.session = session

    async def execute(
        self, name: str, channel: Optional[int] = None, value: Any = None
    ) -> Any:
        """
        Runs the registered operation ``name``.

        Write-only commands return None once their echo is verified; queries
        return their decoded reply.

        Raises:
            ValidationError: Before anything is sent, if the arguments are invalid.
            NotConnectedError, EchoMismatchError, TransportError: From the session.
            ParseError, UnknownStatusCodeError: If a query reply cannot be decoded.
        """
        spec = get_command(name)
        command = spec.encode(channel, value)
        if not spec.is_query:
            await self.session.write(command)
            return None
        response = await self.session.request(command)
        return spec.decoder(response)  # type: ignore[misc]

    # --- Connection ---

    async def connect(self) -> None:
        """Establishes a connection with the device."""
        await self.session.connect()

    async def disconnect(self) -> None:
        """Closes the connection with the device."""
        await self.session.disconnect()

    def is_connected(self) -> bool:
        return self.session.is_connected()

    # --- Commands ---

    async def set_normal_mode(self, channel: int) -> None:
        """
        Sets the motor to move the programmed distance when a go command is sent.
        """
        await self.execute("set_normal_mode", channel)

    async def set_continuous_mode(self, channel: int) -> None:
        """
        Sets the motor to move continuously until a stop command is sent.
        """
        await self.execute("set_continuous_mode", channel)

    async def set_absolute_mode(self, channel: int) -> None:
        """Sets the positioning mode to absolute."""
        await self.execute("set_absolute_mode", channel)

    async def set_incremental_mode(self, channel: int) -> None:
        """Sets the positioning mode to incremental."""
        await self.execute("set_incremental_mode", channel)

    async def set_zero_position(self, channel: int) -> None:
        """Sets the absolute position counter to zero."""
        await self.execute("set_zero_position", channel)

    async def go(self, channel: int) -> None:
        """Moves the motor with the current distance/position settings."""
        await self.execute("go", channel)

    async def go_all(self) -> None:
        """Moves every motor on the link with its current settings."""
        await self.execute("go")

    async def go_home(self, channel: int, direction: Direction, speed: float) -> None:
        """
        Starts the drive's built-in homing procedure.

        Args:
            channel: Target channel.
            direction: `Direction.FORWARD` or `Direction.BACKWARD`. Toggle is rejected.
            speed: Homing speed in rps, 0.01-50.00.
        """
        await self.execute("go_home", channel, (direction, speed))

    async def go_home_all(self, direction: Direction, speed: float) -> None:
        """Starts the built-in homing procedure on every motor."""
        await self.execute("go_home", None, (direction, speed))

    async def stop(self, channel: int) -> None:
        """Stops the motor."""
        await self.execute("stop", channel)

    async def stop_all(self) -> None:
        """Stops every motor on the link."""
        await self.execute("stop")

    async def kill(self, channel: int) -> None:
        """Ceases all indexer activity immediately."""
        await self.execute("kill", channel)

    async def reset(self, channel: int) -> None:
        """Returns all internal settings to their power-up values."""
        await self.execute("reset", channel)

    async def reset_communication(self, channel: int) -> str:
        """
        Re-establishes communication and reports the cause of the last
        communication error.

        Returns:
            The raw reply, without envelope parsing.
        """
        return await self.execute("reset_communication", channel)

    # --- Setpoints ---

    async def set_target_velocity(self, channel: int, value: float) -> None:
        """Sets the target velocity in revolutions per second (0.001-50.0)."""
        await self.execute("set_target_velocity", channel, value)

    async def get_target_velocity(self, channel: int) -> float:
        """Gets the target velocity in rps."""
        return await self.execute("get_target_velocity", channel)

    async def set_target_acceleration(self, channel: int, value: float) -> None:
        """Sets the target acceleration in rps^2 (0.01-999.0)."""
        await self.execute("set_target_acceleration", channel, value)

    async def get_target_acceleration(self, channel: int) -> float:
        return await self.execute("get_target_acceleration", channel)

    async def set_target_distance(self, channel: int, value: int) -> None:
        """Sets the target distance in steps."""
        await self.execute("set_target_distance", channel, value)

    async def get_target_distance(self, channel: int) -> int:
        return await self.execute("get_target_distance", channel)

    # --- Settings ---

    async def set_indexer_movement_mode(self, channel: int, mode: MovementMode) -> None:
        """Selects incremental or absolute moves when in steps mode."""
        await self.execute("set_indexer_movement_mode", channel, mode)

    async def set_end_limits_state(self, channel: int, state: SwitchState) -> None:
        """Sets the active state of the CW and CCW end-of-travel limit switches."""
        await self.execute("set_end_limits_state", channel, state)

    async def set_indexer_mode(self, channel: int, mode: IndexerMode) -> None:
        """Selects whether moves are performed in motor steps or encoder steps."""
        await self.execute("set_indexer_mode", channel, mode)

    async def set_polarity(self, channel: int, polarity: Polarity) -> None:
        """Sets the direction polarity of the motor."""
        await self.execute("set_polarity", channel, polarity)

    async def set_resolution(self, channel: int, value: int) -> None:
        """Sets the motor resolution in steps per revolution (200-50800)."""
        await self.execute("set_resolution", channel, value)

    async def get_resolution(self, channel: int) -> int:
        """Gets the motor resolution in steps per revolution."""
        return await self.execute("get_resolution", channel)

    async def set_error_checking(self, channel: int, enable: bool) -> None:
        """Enables or disables communication error checking."""
        await self.execute("set_error_checking", channel, enable)

    async def set_shutdown(self, channel: int, enable: bool) -> None:
        """
        Shuts the motor down: current drops to zero and move commands are ignored.
        """
        await self.execute("set_shutdown", channel, enable)

    async def set_disable_switch(self, channel: int, mode: DisableSwitch) -> None:
        """Enables or disables the end-of-travel limit inputs."""
        await self.execute("set_disable_switch", channel, mode)

    async def set_direction(self, channel: int, direction: Direction) -> None:
        """Sets the movement direction. `Direction.TOGGLE` reverses the current one."""
        await self.execute("set_direction", channel, direction)

    # --- Readings ---

    async def get_part_number(self, channel: int) -> str:
        """Gets the software part number and its revision level (raw reply)."""
        return await self.execute("get_part_number", channel)

    async def get_indexer_status(self, channel: int) -> IndexerStatus:
        """
        Gets the general indexer status.

        Busy means the indexer is executing a command (moving, waiting on a
        trigger, pausing). Attention signals a drive fault, a failed go home,
        an end-of-travel limit, an unsuccessful sequence or a checksum error.
        """
        return await self.execute("get_indexer_status", channel)

    async def get_closed_loop_status(self, channel: int) -> ClosedLoopStatus:
        """Gets the stall-detected and homing-succeeded flags."""
        return await self.execute("get_closed_loop_status", channel)

    async def get_limits_status(self, channel: int) -> LimitsStatus:
        """Gets the end-of-travel limit flags (last move and current state)."""
        return await self.execute("get_limits_status", channel)

    async def get_absolute_position(self, channel: int) -> int:
        """Gets the absolute motor position in steps."""
        return await self.execute("get_absolute_position", channel)

    async def get_relative_position(self, channel: int) -> int:
        """Gets the position in steps relative to the start of the current move."""
        return await self.execute("get_relative_position", channel)

    # --- Homing ---

    async def go_home_hard(
        self,
        channel: int,
        direction: Direction,
        velocity: float,
        limit_switch: Optional[Edge] = None,
        **kwargs: Any,
    ) -> None:
        """
        Homes ``channel`` against its end-of-travel limit switch.

        See `parker_oem750x.homing.HardHoming` for the procedure and the
        accepted keyword arguments (poll intervals, timeout, cancel_event).
        """
        await HardHoming(
            self, channel, direction, velocity, limit_switch, **kwargs
        ).run()


def create_drive(
    port: str,
    loop: Optional[asyncio.AbstractEventLoop] = None,
    **serial_options: Any,
) -> OEM750x:
    """
    Creates an `OEM750x` talking to a drive on serial ``port``.

    The connection is not opened; call `OEM750x.connect()`.

    Args:
        port: Serial port name, e.g. ``"/dev/ttyUSB0"`` or ``"COM3"``.
        loop: Optional event loop for the transport's executor calls.
        **serial_options: Any other `SerialOptions` field (baudrate, parity, ...).
    """
    options = SerialOptions(port=port, **serial_options)
    return OEM750x(DriveSession(SerialTransport(options, loop=loop)))
