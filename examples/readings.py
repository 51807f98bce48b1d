# This script prints every reading the OEM750X exposes for one channel.

"""
Example: reading part number, status registers and positions.
"""

import asyncio
import logging

from parker_oem750x import create_drive
from parker_oem750x import exceptions

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

SERIAL_PORT = "/dev/ttyUSB0"
BAUDRATE = 9600
CHANNEL = 1


async def main():
    drive = create_drive(SERIAL_PORT, baudrate=BAUDRATE)
    try:
        await drive.connect()
    except exceptions.TransportError as e:
        logger.error("Failed to open %s: %s", SERIAL_PORT, e)
        return

    try:
        part_number = await drive.get_part_number(CHANNEL)
        logger.info("Part number: %s", part_number)

        indexer_status = await drive.get_indexer_status(CHANNEL)
        logger.info(
            "Indexer status: %s (busy=%s, attention=%s)",
            indexer_status.name,
            indexer_status.is_busy,
            indexer_status.needs_attention,
        )

        closed_loop = await drive.get_closed_loop_status(CHANNEL)
        logger.info("Closed loop status: %s %s", closed_loop.bits, closed_loop)

        limits = await drive.get_limits_status(CHANNEL)
        logger.info("Limits status: %s %s", limits.bits, limits)

        logger.info("Absolute position: %d", await drive.get_absolute_position(CHANNEL))
        logger.info("Relative position: %d", await drive.get_relative_position(CHANNEL))
    except exceptions.UnknownStatusCodeError as e:
        # The drive answered with a status character this library cannot decode.
        logger.error("Unexpected status code %r: %s", e.code, e)
    except exceptions.OEM750xError as e:
        logger.error("Reading failed: %s", e)
    finally:
        await drive.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
