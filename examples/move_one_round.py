# This script moves one motor of a Parker OEM750X drive through exactly one
# revolution over a real RS-232 link.

"""
Example: one full revolution on a single OEM750X channel.
"""

import asyncio
# The parker_oem750x library is asyncio based.

import logging

from parker_oem750x import DisableSwitch
from parker_oem750x import create_drive
from parker_oem750x import exceptions

# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Serial configuration (MODIFY THESE FOR YOUR SETUP)
SERIAL_PORT = "/dev/ttyUSB0"  # e.g., '/dev/ttyUSB0', 'COM3'
BAUDRATE = 9600  # The OEM750X ships configured for 9600 8N1

CHANNEL = 1  # Device address set on the drive
STEPS_PER_REVOLUTION = 50000
# Motor resolution programmed with MR. With D equal to MR, one Go is one turn.


async def main():
    """Configures the channel and moves it one revolution."""
    drive = create_drive(SERIAL_PORT, baudrate=BAUDRATE)

    try:
        await drive.connect()
    except exceptions.TransportError as e:
        logger.error("Failed to open %s: %s", SERIAL_PORT, e)
        logger.error("Check the cable, the port name and that the drive is powered.")
        return

    try:
        await drive.set_normal_mode(CHANNEL)
        # Normal mode: Go moves the programmed distance, then stops.
        await drive.set_disable_switch(CHANNEL, DisableSwitch.DISABLE_BOTH)
        # Limits are ignored for this bench test; re-enable them for real use.
        await drive.set_target_velocity(CHANNEL, 0.5)
        await drive.set_target_acceleration(CHANNEL, 0.5)
        await drive.set_resolution(CHANNEL, STEPS_PER_REVOLUTION)
        await drive.set_target_distance(CHANNEL, STEPS_PER_REVOLUTION)
        await drive.go(CHANNEL)
        logger.info("Move started on channel %d.", CHANNEL)
    except exceptions.OEM750xError as e:
        logger.error("Move failed: %s", e)
    finally:
        await drive.disconnect()
        logger.info("Serial port closed.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Example interrupted by user.")
