# parker-oem750x/tests/unit/test_transport.py
import pytest
import serial

from parker_oem750x import constants as const
from parker_oem750x.exceptions import TransportError
from parker_oem750x.transport import SerialOptions
from parker_oem750x.transport import SerialTransport


@pytest.fixture
def mock_serial_cls(mocker):
    mock_cls = mocker.patch("parker_oem750x.transport.serial.Serial")
    mock_cls.return_value.is_open = True
    return mock_cls


@pytest.fixture
def transport():
    return SerialTransport(SerialOptions(port="/dev/ttyUSB0"))


def test_default_options():
    options = SerialOptions(port="COM3")
    assert options.baudrate == 9600
    assert options.bytesize == 8
    assert options.parity == "N"
    assert options.stopbits == 1
    assert options.timeout == const.SERIAL_TIMEOUT_SECONDS


@pytest.mark.asyncio
class TestSerialTransport:
    async def test_open_configures_port(self, transport, mock_serial_cls):
        assert not transport.is_open()

        await transport.open()

        mock_serial_cls.assert_called_once_with(
            port="/dev/ttyUSB0",
            baudrate=9600,
            bytesize=8,
            parity="N",
            stopbits=1,
            timeout=const.SERIAL_TIMEOUT_SECONDS,
            write_timeout=const.SERIAL_TIMEOUT_SECONDS,
        )
        assert transport.is_open()

    async def test_open_twice_is_noop(self, transport, mock_serial_cls):
        await transport.open()
        await transport.open()
        assert mock_serial_cls.call_count == 1

    async def test_open_failure_wrapped(self, transport, mock_serial_cls):
        mock_serial_cls.side_effect = serial.SerialException("could not open port")

        with pytest.raises(TransportError, match="could not open port") as exc_info:
            await transport.open()

        assert isinstance(exc_info.value.__cause__, serial.SerialException)
        assert not transport.is_open()

    async def test_close(self, transport, mock_serial_cls):
        await transport.open()
        port = mock_serial_cls.return_value

        await transport.close()

        port.close.assert_called_once()
        assert transport.ser is None
        assert not transport.is_open()

    async def test_write_and_read(self, transport, mock_serial_cls):
        await transport.open()
        port = mock_serial_cls.return_value
        port.read_until.return_value = b"1G\r"

        await transport.write_bytes(b"1G\r")
        frame = await transport.read_until(const.CR)

        port.write.assert_called_once_with(b"1G\r")
        port.read_until.assert_called_once_with(b"\r")
        assert frame == b"1G\r"

    async def test_read_timeout(self, transport, mock_serial_cls):
        await transport.open()
        # pyserial returns what it has when the timeout elapses.
        mock_serial_cls.return_value.read_until.return_value = b"*1P"

        with pytest.raises(TransportError, match="Timeout"):
            await transport.read_until()

    async def test_write_failure_wrapped(self, transport, mock_serial_cls):
        await transport.open()
        mock_serial_cls.return_value.write.side_effect = serial.SerialTimeoutException(
            "Write timeout"
        )

        with pytest.raises(TransportError, match="Write timeout"):
            await transport.write_bytes(b"1G\r")

    async def test_io_before_open(self, transport):
        with pytest.raises(TransportError, match="not open"):
            await transport.write_bytes(b"1G\r")
        with pytest.raises(TransportError, match="not open"):
            await transport.read_until()

    async def test_reset_input_buffer(self, transport, mock_serial_cls):
        await transport.open()

        await transport.reset_input_buffer()

        mock_serial_cls.return_value.reset_input_buffer.assert_called_once_with()

    async def test_reset_input_buffer_failure_wrapped(self, transport, mock_serial_cls):
        await transport.open()
        mock_serial_cls.return_value.reset_input_buffer.side_effect = OSError("gone")

        with pytest.raises(TransportError, match="flush failed"):
            await transport.reset_input_buffer()
