# parker_oem750x/axis.py
"""
High-level Axis class for one OEM750X channel.

`Axis` binds a channel of an `OEM750x` drive and offers move, stop and
homing operations built from the drive's individual commands, while
tracking whether the channel has been homed.
"""
from typing import Any, Dict, Optional

import asyncio
import logging

from . import constants as const
from .commands import validate_channel
from .commands import validate_homing_direction
from .drive import OEM750x
from .enums import Direction
from .enums import Edge
from .enums import IndexerStatus
from .exceptions import OEM750xError

logger = logging.getLogger(__name__)


class Axis:
    """
    Represents a single motor axis behind an OEM750X drive.
    """

    def __init__(self, drive: OEM750x, channel: int, name: str = "default_axis"):
        """
        Args:
            drive: The `OEM750x` instance owning the link. It must be connected
                   before any axis operation is performed.
            channel: The channel (device address) of this axis.
            name: A descriptive name used in log messages.

        Raises:
            ValidationError: If ``channel`` is not a valid address.
        """
        self.drive = drive
        self.channel = validate_channel(channel)
        self.name = name
        self._is_homed = False

    def is_homed(self) -> bool:
        """True once `home_hard` or `set_current_position_as_zero` succeeded."""
        return self._is_homed

    async def _prepare_move(
        self, velocity: Optional[float], acceleration: Optional[float]
    ) -> None:
        await self.drive.set_normal_mode(self.channel)
        if velocity is not None:
            await self.drive.set_target_velocity(self.channel, velocity)
        if acceleration is not None:
            await self.drive.set_target_acceleration(self.channel, acceleration)

    async def move_relative(
        self,
        distance: int,
        velocity: Optional[float] = None,
        acceleration: Optional[float] = None,
    ) -> None:
        """
        Moves ``distance`` steps from the current position.

        Velocity and acceleration are only sent when given; otherwise the
        drive's current settings are used. The call returns once Go is
        accepted; use `wait_for_move_completion` to wait for the motor.
        """
        logger.info(f"Axis '{self.name}': relative move of {distance} steps.")
        await self._prepare_move(velocity, acceleration)
        await self.drive.set_incremental_mode(self.channel)
        await self.drive.set_target_distance(self.channel, distance)
        await self.drive.go(self.channel)

    async def move_absolute(
        self,
        position: int,
        velocity: Optional[float] = None,
        acceleration: Optional[float] = None,
    ) -> None:
        """Moves to ``position`` steps on the absolute counter."""
        if not self._is_homed:
            logger.warning(
                f"Axis '{self.name}': absolute move requested before homing."
            )
        logger.info(f"Axis '{self.name}': absolute move to {position} steps.")
        await self._prepare_move(velocity, acceleration)
        await self.drive.set_absolute_mode(self.channel)
        await self.drive.set_target_distance(self.channel, position)
        await self.drive.go(self.channel)

    async def stop(self) -> None:
        logger.info(f"Axis '{self.name}': stop.")
        await self.drive.stop(self.channel)

    async def kill(self) -> None:
        """Ceases motion immediately. The homed state is lost."""
        logger.warning(f"Axis '{self.name}': kill.")
        self._is_homed = False
        await self.drive.kill(self.channel)

    async def home_hard(
        self,
        direction: Direction,
        velocity: float,
        limit_switch: Optional[Edge] = None,
        **kwargs: Any,
    ) -> None:
        """
        Homes the axis against its limit switch and zeroes the position.

        Accepts the keyword arguments of `parker_oem750x.homing.HardHoming`.
        On failure the axis is marked as not homed and the error is re-raised;
        the motor may still be moving.
        """
        self._is_homed = False
        try:
            direction = validate_homing_direction(direction)
            logger.info(
                f"Axis '{self.name}': starting hard homing ({direction.value})."
            )
            await self.drive.go_home_hard(
                self.channel, direction, velocity, limit_switch, **kwargs
            )
        except OEM750xError as e:
            logger.error(f"Axis '{self.name}': homing failed: {e}")
            raise
        self._is_homed = True
        logger.info(f"Axis '{self.name}': homing successful.")

    async def set_current_position_as_zero(self) -> None:
        """Defines the current position as the zero reference."""
        await self.drive.set_zero_position(self.channel)
        self._is_homed = True

    async def get_current_position(self) -> int:
        """Absolute position in steps."""
        return await self.drive.get_absolute_position(self.channel)

    async def get_status_dict(self) -> Dict[str, Any]:
        """
        Collects the indexer, closed-loop and limit status together with
        both position readings.
        """
        indexer = await self.drive.get_indexer_status(self.channel)
        closed_loop = await self.drive.get_closed_loop_status(self.channel)
        limits = await self.drive.get_limits_status(self.channel)
        return {
            "name": self.name,
            "channel": self.channel,
            "is_homed": self._is_homed,
            "indexer_status": indexer,
            "busy": indexer.is_busy,
            "attention": indexer.needs_attention,
            "stall_detected": closed_loop.stall_detected,
            "home_successful": closed_loop.home_successful,
            "limits": limits.bits,
            "absolute_position": await self.drive.get_absolute_position(self.channel),
            "relative_position": await self.drive.get_relative_position(self.channel),
        }

    async def wait_for_move_completion(
        self,
        timeout: Optional[float] = None,
        poll_interval: float = const.HOMING_POLL_INTERVAL_SECONDS,
    ) -> IndexerStatus:
        """
        Polls the indexer status until it is no longer busy.

        The deadline is checked between polls, so a status query is never
        abandoned half way through its exchange.

        Returns:
            The final (ready) indexer status.

        Raises:
            asyncio.TimeoutError: If the axis is still busy once ``timeout``
                                  seconds have passed.
        """
        loop = asyncio.get_running_loop()
        deadline = None if timeout is None else loop.time() + timeout
        while True:
            status = await self.drive.get_indexer_status(self.channel)
            if not status.is_busy:
                return status
            if deadline is not None and loop.time() >= deadline:
                logger.warning(
                    f"Axis '{self.name}': still busy after {timeout}s."
                )
                raise asyncio.TimeoutError(
                    f"Axis '{self.name}' did not finish its move within {timeout}s."
                )
            await asyncio.sleep(poll_interval)

    async def ping(self, timeout: Optional[float] = None) -> bool:
        """
        Checks that the drive answers a status query on this channel.

        The query always runs to completion (it is bounded by the serial read
        timeout); ``timeout`` is the longest acceptable answer time.

        Returns:
            True on a valid reply within ``timeout``, False on any driver error
            or a late reply.
        """
        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            await self.drive.get_indexer_status(self.channel)
        except OEM750xError as e:
            logger.warning(f"Axis '{self.name}': ping failed: {e}")
            return False
        elapsed = loop.time() - started
        if timeout is not None and elapsed > timeout:
            logger.warning(
                f"Axis '{self.name}': ping answered after {elapsed:.3f}s, "
                f"limit is {timeout}s."
            )
            return False
        logger.debug(f"Axis '{self.name}': ping successful.")
        return True
