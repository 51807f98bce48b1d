# parker_oem750x/transport.py
"""
Transport layer for the OEM750X driver.

The drive session only needs a few primitives from its transport: open,
close, is_open, write_bytes, read_until and reset_input_buffer.
``SerialTransport`` implements them on top of pyserial, running the blocking
port calls in the event loop's executor so that other tasks keep running
while a frame is in flight.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import asyncio
import logging

import serial

from . import constants as const
from .exceptions import TransportError

logger = logging.getLogger(__name__)


class Transport(ABC):
    """Byte-level channel to the drive."""

    @abstractmethod
    async def open(self) -> None:
        """Opens the underlying channel."""

    @abstractmethod
    async def close(self) -> None:
        """Closes the underlying channel."""

    @abstractmethod
    def is_open(self) -> bool:
        """True while the channel is usable."""

    @abstractmethod
    async def write_bytes(self, data: bytes) -> None:
        """Writes ``data``; raises TransportError on failure."""

    @abstractmethod
    async def read_until(self, delimiter: bytes = const.CR) -> bytes:
        """Reads up to and including ``delimiter``; raises TransportError on failure."""

    @abstractmethod
    async def reset_input_buffer(self) -> None:
        """Discards any received bytes not read yet."""


@dataclass
class SerialOptions:
    """Serial port parameters supplied by the surrounding program."""
    port: str
    baudrate: int = const.SERIAL_DEFAULT_BAUDRATE
    bytesize: int = const.SERIAL_DEFAULT_BYTESIZE
    parity: str = const.SERIAL_DEFAULT_PARITY
    stopbits: float = const.SERIAL_DEFAULT_STOPBITS
    timeout: float = const.SERIAL_TIMEOUT_SECONDS
    write_timeout: float = const.SERIAL_TIMEOUT_SECONDS


class SerialTransport(Transport):
    """
    RS-232 transport for the OEM750X built on pyserial.
    """

    def __init__(
        self,
        options: SerialOptions,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initializes the serial transport. The port is not opened until `open()`.

        Args:
            options: Port name and line settings.
            loop: asyncio event loop used to run blocking port calls. If None,
                  the running loop is looked up on each call.
        """
        self.options = options
        self.ser: Optional[serial.Serial] = None
        self._loop = loop
        logger.info(
            f"SerialTransport configured for {options.port} @ {options.baudrate} bps "
            f"({options.bytesize}{options.parity}{options.stopbits})"
        )

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        return self._loop if self._loop else asyncio.get_running_loop()

    async def open(self) -> None:
        """Opens the serial port."""
        if self.is_open():
            logger.info(f"Serial port {self.options.port} already open.")
            return
        logger.info(f"Opening serial port {self.options.port}...")
        try:
            self.ser = await self._get_loop().run_in_executor(None, self._create_port)
        except (serial.SerialException, ValueError, OSError) as e:
            logger.error(f"Failed to open serial port {self.options.port}: {e}")
            raise TransportError(
                f"Failed to open serial port {self.options.port}: {e}"
            ) from e
        logger.info(f"Serial port {self.options.port} opened.")

    def _create_port(self) -> serial.Serial:
        return serial.Serial(
            port=self.options.port,
            baudrate=self.options.baudrate,
            bytesize=self.options.bytesize,
            parity=self.options.parity,
            stopbits=self.options.stopbits,
            timeout=self.options.timeout,
            write_timeout=self.options.write_timeout,
        )

    async def close(self) -> None:
        """Closes the serial port if it is open."""
        if self.ser is None:
            return
        try:
            if self.ser.is_open:
                self.ser.close()
            logger.info(f"Serial port {self.options.port} closed.")
        except (serial.SerialException, OSError) as e:
            raise TransportError(
                f"Error closing serial port {self.options.port}: {e}"
            ) from e
        finally:
            self.ser = None

    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    async def write_bytes(self, data: bytes) -> None:
        if not self.ser:
            raise TransportError("Serial port not open.")
        try:
            await self._get_loop().run_in_executor(None, self.ser.write, data)
        except (serial.SerialException, OSError) as e:
            logger.error(f"Serial write failed on {self.options.port}: {e}")
            raise TransportError(f"Serial write failed: {e}") from e

    async def read_until(self, delimiter: bytes = const.CR) -> bytes:
        """
        Reads one frame terminated by ``delimiter``.

        Raises:
            TransportError: On port errors, or when the read timeout elapses
                            before the delimiter arrives.
        """
        if not self.ser:
            raise TransportError("Serial port not open.")
        try:
            data = await self._get_loop().run_in_executor(
                None, self.ser.read_until, delimiter
            )
        except (serial.SerialException, OSError) as e:
            logger.error(f"Serial read failed on {self.options.port}: {e}")
            raise TransportError(f"Serial read failed: {e}") from e
        if not data.endswith(delimiter):
            raise TransportError(
                f"Timeout waiting for {delimiter!r} on {self.options.port}. "
                f"Received: {data!r}"
            )
        return data

    async def reset_input_buffer(self) -> None:
        if not self.ser:
            raise TransportError("Serial port not open.")
        try:
            await self._get_loop().run_in_executor(None, self.ser.reset_input_buffer)
        except (serial.SerialException, OSError) as e:
            logger.error(f"Serial input flush failed on {self.options.port}: {e}")
            raise TransportError(f"Serial input flush failed: {e}") from e
