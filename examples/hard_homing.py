# This script homes one OEM750X axis against its CCW end-of-travel switch
# and then zeroes the position counter.

"""
Example: hard homing through the high-level Axis class.
"""

import asyncio
# Imports 'asyncio' for the event loop and the cancel event.

import logging

from parker_oem750x import Axis
# High-level per-channel interface. Tracks whether the axis has been homed.

from parker_oem750x import Direction
from parker_oem750x import DisableSwitch
from parker_oem750x import SwitchState
from parker_oem750x import create_drive
from parker_oem750x import exceptions

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERIAL_PORT = "/dev/ttyUSB0"
BAUDRATE = 9600
CHANNEL = 4

HOMING_VELOCITY = 1.0  # rps towards the switch; the back-off is always 0.01 rps
HOMING_TIMEOUT = 60.0  # seconds; the motor may still be moving if this expires


async def main():
    """Prepares the limit inputs and homes the axis backwards."""
    drive = create_drive(SERIAL_PORT, baudrate=BAUDRATE)
    try:
        await drive.connect()
    except exceptions.TransportError as e:
        logger.error("Failed to open %s: %s", SERIAL_PORT, e)
        return

    axis = Axis(drive, CHANNEL, name="HomingAxis")

    try:
        await drive.set_normal_mode(CHANNEL)
        await drive.set_disable_switch(CHANNEL, DisableSwitch.ENABLE_BOTH)
        # Both limit inputs must be live, the procedure watches them.
        await drive.set_end_limits_state(CHANNEL, SwitchState.NORMALLY_OPEN)
        await drive.set_resolution(CHANNEL, 50000)

        await axis.home_hard(
            Direction.BACKWARD, HOMING_VELOCITY, timeout=HOMING_TIMEOUT
        )
        logger.info(
            "Homing finished. Position is now %d.", await axis.get_current_position()
        )
    except exceptions.HomingError as e:
        logger.error("Homing aborted: %s", e)
        await axis.stop()
        # The procedure does no cleanup on failure; stop the motor here.
    except exceptions.OEM750xError as e:
        logger.error("Homing failed: %s", e)
    finally:
        await drive.disconnect()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Example interrupted by user.")
