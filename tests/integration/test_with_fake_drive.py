# parker-oem750x/tests/integration/test_with_fake_drive.py
# End-to-end scenarios through the whole stack (OEM750x -> DriveSession ->
# Transport) against the in-memory drive from conftest. They mirror the
# bench procedures in examples/: move one round, readings and hard homing.

import pytest
import pytest_asyncio

from conftest import FakeTransport
from parker_oem750x import Axis
from parker_oem750x import DriveSession
from parker_oem750x import OEM750x
from parker_oem750x import exceptions
from parker_oem750x.enums import Direction
from parker_oem750x.enums import DisableSwitch
from parker_oem750x.enums import IndexerStatus
from parker_oem750x.enums import SwitchState


@pytest_asyncio.fixture
async def bench():
    transport = FakeTransport(opened=False)
    drive = OEM750x(DriveSession(transport))
    await drive.connect()
    yield drive, transport
    await drive.disconnect()
    assert not transport.is_open()


@pytest.mark.asyncio
class TestBenchScenarios:
    async def test_move_one_round(self, bench):
        drive, transport = bench
        channel = 1

        await drive.set_normal_mode(channel)
        await drive.set_disable_switch(channel, DisableSwitch.DISABLE_BOTH)
        await drive.set_target_velocity(channel, 0.5)
        await drive.set_target_acceleration(channel, 0.5)
        await drive.set_resolution(channel, 50000)
        await drive.set_target_distance(channel, 50000)
        await drive.go(channel)

        assert transport.written == [
            b"1MN\r", b"1LD3\r", b"1V0.50\r", b"1A0.50\r",
            b"1MR50000\r", b"1D50000\r", b"1G\r",
        ]

    async def test_readings(self, bench):
        drive, transport = bench
        transport.replies.update({
            "1RV": "*92-016740-01",
            "1R": "*1R",
            "1RA": "*1RA@",
            "1PR": "*1PR50000",
            "1W3": "*0000C350",
        })

        assert await drive.get_part_number(1) == "*92-016740-01"
        indexer = await drive.get_indexer_status(1)
        closed_loop = await drive.get_closed_loop_status(1)
        limits = await drive.get_limits_status(1)

        assert indexer is IndexerStatus.READY
        assert not closed_loop.stall_detected
        assert closed_loop.home_successful
        assert limits.bits == "0000"
        assert await drive.get_absolute_position(1) == 50000
        assert await drive.get_relative_position(1) == 50000
        assert transport.commands == ["1RV", "1R", "1RA", "1RA", "1PR", "1W3"]

    async def test_hard_homing(self, bench):
        drive, transport = bench
        channel = 4
        transport.replies["4RA"] = ["*4RA@", "*4RA@", "*4RAH", "*4RAH", "*4RA@"]
        transport.replies["4PR"] = "*4PR0"
        axis = Axis(drive, channel, name="bench")

        await drive.set_normal_mode(channel)
        await drive.set_disable_switch(channel, DisableSwitch.ENABLE_BOTH)
        await drive.set_end_limits_state(channel, SwitchState.NORMALLY_OPEN)
        await drive.set_resolution(channel, 50000)
        await axis.home_hard(Direction.BACKWARD, 1, poll_interval=0)

        assert axis.is_homed()
        assert await axis.get_current_position() == 0
        assert transport.commands[:4] == ["4MN", "4LD0", "4OSA1", "4MR50000"]
        assert transport.commands[4:9] == ["4S", "4V1.00", "4H-", "4MC", "4G"]
        assert transport.commands[-5:] == ["4S", "4MPA", "4MN", "4PZ", "4PR"]

    async def test_commands_fail_after_disconnect(self, bench):
        drive, transport = bench
        await drive.disconnect()

        with pytest.raises(exceptions.NotConnectedError):
            await drive.go(1)

        assert transport.written == []
        await drive.connect()
