# parker_oem750x/homing.py
"""
Hard homing against an end-of-travel limit switch.

The procedure runs the motor in continuous mode towards the limit, waits
for the limit input to assert, backs off at minimum speed until it
de-asserts, and then zeroes the absolute position counter:

    STOP -> ARM -> APPROACH -> RETRACT -> RELEASE -> FINALIZE -> DONE

Any failing step aborts the procedure with that step's error and no
cleanup is attempted. The motor may still be moving afterwards, so callers
must stop or re-home before using the channel again.
"""
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

import asyncio
import logging

from . import constants as const
from .commands import coerce_enum
from .commands import validate_channel
from .commands import validate_homing_direction
from .commands import validate_homing_speed
from .enums import Direction
from .enums import Edge
from .exceptions import HomingCancelledError
from .exceptions import HomingTimeoutError
from .exceptions import OEM750xError
from .exceptions import ValidationError
from .parsing import LimitsStatus

if TYPE_CHECKING:
    from .drive import OEM750x

logger = logging.getLogger(__name__)


class HomingPhase(Enum):
    IDLE = "idle"
    STOP = "stop"
    ARM = "arm"
    APPROACH = "approach"
    RETRACT = "retract"
    RELEASE = "release"
    FINALIZE = "finalize"
    DONE = "done"


class HardHoming:
    """
    One run of the hard homing procedure for a single channel.
    """

    def __init__(
        self,
        drive: "OEM750x",
        channel: int,
        direction: Any,
        velocity: float,
        limit_switch: Optional[Any] = None,
        poll_interval: float = const.HOMING_POLL_INTERVAL_SECONDS,
        release_poll_interval: float = const.HOMING_RELEASE_POLL_INTERVAL_SECONDS,
        timeout: Optional[float] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ):
        """
        Validates the homing parameters. Nothing is sent until `run()`.

        Args:
            drive: The `OEM750x` used to issue commands.
            channel: Channel to home.
            direction: `Direction.FORWARD` or `Direction.BACKWARD` (toggle is rejected).
            velocity: Approach velocity in rps, 0.01-50.00.
            limit_switch: The limit expected to stop the approach. Defaults to the
                          switch on the ``direction`` side (Forward is CW). Passing
                          the opposite switch is rejected.
            poll_interval: Seconds between limit polls while approaching.
            release_poll_interval: Seconds between limit polls while backing off.
            timeout: Optional deadline in seconds for the whole procedure.
            cancel_event: Optional event; once set, the next poll raises
                          `HomingCancelledError`.

        Raises:
            ValidationError: On any invalid or inconsistent parameter.
        """
        self.drive = drive
        self.channel = validate_channel(channel)
        self.direction: Direction = validate_homing_direction(direction)
        self.velocity = validate_homing_speed(velocity)
        expected_edge = Edge.for_direction(self.direction)
        if limit_switch is None:
            self.limit_switch = expected_edge
        else:
            self.limit_switch = coerce_enum(Edge, limit_switch)
            if self.limit_switch != expected_edge:
                raise ValidationError(
                    f"Limit switch {self.limit_switch.value} does not match homing "
                    f"direction '{self.direction.value}', which reaches {expected_edge.value}.",
                    value=limit_switch,
                    channel=channel,
                )
        if poll_interval < 0 or release_poll_interval < 0:
            raise ValidationError(
                "Poll intervals must not be negative.",
                value=(poll_interval, release_poll_interval),
                channel=channel,
            )
        if timeout is not None and timeout <= 0:
            raise ValidationError(
                f"Invalid homing timeout: {timeout}.", value=timeout, channel=channel
            )
        self.poll_interval = poll_interval
        self.release_poll_interval = release_poll_interval
        self.timeout = timeout
        self.cancel_event = cancel_event
        self.phase = HomingPhase.IDLE
        self._deadline: Optional[float] = None

    def _enter(self, phase: HomingPhase) -> None:
        self.phase = phase
        logger.info(f"Homing channel {self.channel}: {phase.value}")

    def _check_abort(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise HomingCancelledError(
                "Homing cancelled.", phase=self.phase.value, channel=self.channel
            )
        if self._deadline is not None and asyncio.get_running_loop().time() >= self._deadline:
            raise HomingTimeoutError(
                f"Homing did not finish within {self.timeout}s.",
                phase=self.phase.value,
                channel=self.channel,
            )

    async def _poll_limits(
        self, done: Callable[[LimitsStatus], bool], interval: float
    ) -> None:
        while True:
            self._check_abort()
            status = await self.drive.get_limits_status(self.channel)
            logger.debug(f"Homing channel {self.channel}: limits {status.bits}")
            if done(status):
                return
            await self._wait(interval)

    async def _wait(self, interval: float) -> None:
        """Sleeps between polls, waking early on cancel or at the deadline."""
        if self._deadline is not None:
            remaining = self._deadline - asyncio.get_running_loop().time()
            interval = min(interval, max(remaining, 0.0))
        if self.cancel_event is None:
            await asyncio.sleep(interval)
            return
        try:
            await asyncio.wait_for(self.cancel_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            pass

    async def run(self) -> None:
        """
        Executes the procedure.

        Raises:
            HomingCancelledError: If the cancel event was set during polling.
            HomingTimeoutError: If the deadline passed during polling.
            OEM750xError: The first error raised by any command, unchanged.
        """
        if self.timeout is not None:
            self._deadline = asyncio.get_running_loop().time() + self.timeout
        edge = self.limit_switch
        try:
            self._enter(HomingPhase.STOP)
            await self.drive.stop(self.channel)

            self._enter(HomingPhase.ARM)
            await self.drive.set_target_velocity(self.channel, self.velocity)
            await self.drive.set_direction(self.channel, self.direction)
            await self.drive.set_continuous_mode(self.channel)
            await self.drive.go(self.channel)

            self._enter(HomingPhase.APPROACH)
            await self._poll_limits(
                lambda status: status.is_asserted(edge), self.poll_interval
            )

            self._enter(HomingPhase.RETRACT)
            await self.drive.set_target_velocity(
                self.channel, const.HOMING_RETRACT_VELOCITY
            )
            await self.drive.set_direction(self.channel, Direction.TOGGLE)
            await self.drive.go(self.channel)

            self._enter(HomingPhase.RELEASE)
            await self._poll_limits(
                lambda status: not status.is_asserted(edge),
                self.release_poll_interval,
            )

            self._enter(HomingPhase.FINALIZE)
            await self.drive.stop(self.channel)
            await self.drive.set_absolute_mode(self.channel)
            await self.drive.set_normal_mode(self.channel)
            await self.drive.set_zero_position(self.channel)
        except OEM750xError as e:
            logger.error(
                f"Homing channel {self.channel} aborted during {self.phase.value}: {e}"
            )
            raise

        self._enter(HomingPhase.DONE)
