# parker-oem750x/tests/unit/test_drive.py
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from parker_oem750x.drive import OEM750x, create_drive
from parker_oem750x.enums import Direction
from parker_oem750x.enums import DisableSwitch
from parker_oem750x.enums import IndexerMode
from parker_oem750x.enums import IndexerStatus
from parker_oem750x.enums import MovementMode
from parker_oem750x.enums import Polarity
from parker_oem750x.enums import SwitchState
from parker_oem750x.exceptions import ParseError
from parker_oem750x.exceptions import UnknownStatusCodeError
from parker_oem750x.exceptions import ValidationError
from parker_oem750x.parsing import ClosedLoopStatus
from parker_oem750x.parsing import LimitsStatus
from parker_oem750x.session import DriveSession
from parker_oem750x.transport import SerialTransport


@pytest.fixture
def mock_session():
    session = AsyncMock(spec=DriveSession)
    session.is_connected = MagicMock(return_value=True)
    return session


@pytest.mark.asyncio
class TestWriteCommands:
    @pytest.mark.parametrize(
        "method, args, expected",
        [
            ("set_normal_mode", (1,), "1MN"),
            ("set_continuous_mode", (1,), "1MC"),
            ("set_absolute_mode", (1,), "1MPA"),
            ("set_incremental_mode", (1,), "1MPI"),
            ("set_zero_position", (1,), "1PZ"),
            ("go", (1,), "1G"),
            ("go_all", (), "G"),
            ("stop", (2,), "2S"),
            ("stop_all", (), "S"),
            ("kill", (1,), "1K"),
            ("reset", (1,), "1Z"),
            ("go_home", (1, Direction.FORWARD, 2), "1GH+2.00"),
            ("go_home_all", (Direction.BACKWARD, 0.5), "GH-0.50"),
            ("set_target_velocity", (1, 0.5), "1V0.50"),
            ("set_target_acceleration", (1, 10), "1A10.00"),
            ("set_target_distance", (1, -4000), "1D-4000"),
            ("set_indexer_movement_mode", (1, MovementMode.ABSOLUTE), "1FSA1"),
            ("set_end_limits_state", (1, SwitchState.NORMALLY_OPEN), "1OSA1"),
            ("set_indexer_mode", (1, IndexerMode.ENCODER_STEPS), "1FSB1"),
            ("set_polarity", (1, Polarity.INVERTED), "1CMDDIR1"),
            ("set_resolution", (1, 25000), "1MR25000"),
            ("set_error_checking", (1, True), "1SSE1"),
            ("set_shutdown", (1, False), "1ST0"),
            ("set_disable_switch", (1, DisableSwitch.DISABLE_BOTH), "1LD3"),
            ("set_direction", (1, Direction.TOGGLE), "1H"),
        ],
    )
    async def test_wire_command(self, drive, fake_transport, method, args, expected):
        result = await getattr(drive, method)(*args)
        assert result is None
        assert fake_transport.commands == [expected]

    async def test_write_only_commands_use_session_write(self, mock_session):
        drive = OEM750x(mock_session)
        await drive.set_normal_mode(3)
        mock_session.write.assert_awaited_once_with("3MN")
        mock_session.request.assert_not_awaited()

    async def test_validation_error_sends_nothing(self, drive, fake_transport):
        with pytest.raises(ValidationError):
            await drive.set_target_velocity(1, 51)
        with pytest.raises(ValidationError):
            await drive.set_direction(0, Direction.FORWARD)
        with pytest.raises(ValidationError):
            await drive.go_home(1, Direction.TOGGLE, 1)
        assert fake_transport.written == []

    async def test_move_one_round_sequence(self, drive, fake_transport):
        channel = 1
        await drive.set_normal_mode(channel)
        await drive.set_disable_switch(channel, DisableSwitch.DISABLE_BOTH)
        await drive.set_target_velocity(channel, 0.5)
        await drive.set_target_acceleration(channel, 0.5)
        await drive.set_resolution(channel, 50000)
        await drive.set_target_distance(channel, 50000)
        await drive.go(channel)

        assert fake_transport.commands == [
            "1MN", "1LD3", "1V0.50", "1A0.50", "1MR50000", "1D50000", "1G",
        ]
        # No query was issued, so every frame read back was an echo.
        reads = [frame for kind, frame in fake_transport.events if kind == "read"]
        assert reads == fake_transport.written


@pytest.mark.asyncio
class TestQueries:
    @pytest.mark.parametrize(
        "method, command, reply, expected",
        [
            ("get_target_velocity", "1V", "*1V0.50", 0.5),
            ("get_target_acceleration", "1A", "*1A10.00", 10.0),
            ("get_target_distance", "1D", "*1D-4000", -4000),
            ("get_resolution", "1MR", "*1MR25000", 25000),
            ("get_absolute_position", "1PR", "*1PR1200", 1200),
            ("get_relative_position", "1W3", "*FFFFFF38", -200),
            ("get_indexer_status", "1R", "*1RB", IndexerStatus.BUSY),
            ("get_closed_loop_status", "1RA", "*1RAA", ClosedLoopStatus(True, True)),
            (
                "get_limits_status",
                "1RA",
                "*1RAH",
                LimitsStatus(False, False, False, True),
            ),
            ("get_part_number", "1RV", "*92-016740-01", "*92-016740-01"),
            ("reset_communication", "1%", "*E", "*E"),
        ],
    )
    async def test_decoded_reply(
        self, drive, fake_transport, method, command, reply, expected
    ):
        fake_transport.replies[command] = reply
        assert await getattr(drive, method)(1) == expected
        assert fake_transport.commands == [command]

    async def test_queries_use_session_request(self, mock_session):
        mock_session.request.return_value = "*2PR-75"
        drive = OEM750x(mock_session)
        assert await drive.get_absolute_position(2) == -75
        mock_session.request.assert_awaited_once_with("2PR")
        mock_session.write.assert_not_awaited()

    async def test_malformed_reply(self, drive, fake_transport):
        fake_transport.replies["1V"] = "1V0.50"
        with pytest.raises(ParseError):
            await drive.get_target_velocity(1)

    async def test_unknown_status_code(self, drive, fake_transport):
        fake_transport.replies["1RA"] = "*1RAG"
        with pytest.raises(UnknownStatusCodeError) as exc_info:
            await drive.get_closed_loop_status(1)
        assert exc_info.value.code == "G"

    async def test_unknown_limits_code(self, drive, fake_transport):
        fake_transport.replies["1RA"] = "*1RAC"
        with pytest.raises(UnknownStatusCodeError):
            await drive.get_limits_status(1)


@pytest.mark.asyncio
class TestConnection:
    async def test_delegates_to_session(self, mock_session):
        drive = OEM750x(mock_session)
        await drive.connect()
        await drive.disconnect()
        mock_session.connect.assert_awaited_once()
        mock_session.disconnect.assert_awaited_once()
        assert drive.is_connected() is True

    async def test_go_home_hard_runs_procedure(self, drive):
        with patch("parker_oem750x.drive.HardHoming") as homing_cls:
            homing_cls.return_value.run = AsyncMock()
            await drive.go_home_hard(1, Direction.FORWARD, 1.0, timeout=5)
        homing_cls.assert_called_once_with(
            drive, 1, Direction.FORWARD, 1.0, None, timeout=5
        )
        homing_cls.return_value.run.assert_awaited_once()


class TestCreateDrive:
    def test_builds_serial_stack(self):
        drive = create_drive("/dev/ttyUSB0", baudrate=19200)
        transport = drive.session.transport
        assert isinstance(transport, SerialTransport)
        assert transport.options.port == "/dev/ttyUSB0"
        assert transport.options.baudrate == 19200
        assert transport.options.parity == "N"
        assert not drive.is_connected()

    def test_unknown_option_rejected(self):
        with pytest.raises(TypeError):
            create_drive("/dev/ttyUSB0", flow_control=True)
