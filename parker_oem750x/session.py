# parker_oem750x/session.py
"""
Request/response coordination for the OEM750X half-duplex link.

Every command the drive receives is echoed back verbatim before anything
else is sent. ``DriveSession`` owns the transport and a lock that covers
the whole exchange (write, echo and, for queries, the reply), so at most
one command is in flight per session.
"""
from typing import Optional

import asyncio
import logging

from . import constants as const
from .exceptions import EchoMismatchError
from .exceptions import NotConnectedError
from .exceptions import OEM750xError
from .parsing import clean_response
from .parsing import decode_text
from .transport import Transport

logger = logging.getLogger(__name__)


class DriveSession:
    """
    Owns the transport handle and serializes all wire access to it.
    """

    def __init__(self, transport: Transport):
        """
        Args:
            transport: The byte-level collaborator. It is not opened here;
                       call `connect()`.
        """
        self.transport = transport
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        """Opens the transport."""
        await self.transport.open()
        logger.info("Drive session connected.")

    async def disconnect(self) -> None:
        """Closes the transport."""
        await self.transport.close()
        logger.info("Drive session disconnected.")

    def is_connected(self) -> bool:
        return self.transport.is_open()

    def _ensure_connected(self, command: str) -> None:
        if not self.is_connected():
            raise NotConnectedError(
                f"Device not connected, cannot send {command!r}."
            )

    async def _write_and_verify_echo(self, command: str) -> None:
        """Sends ``command`` + CR and checks the echo. Caller must hold the lock."""
        frame = (command + const.CR_STR).encode("ascii")
        logger.debug(f"Sending {frame!r}")
        await self.transport.write_bytes(frame)
        echo = await self.transport.read_until(const.CR)
        logger.debug(f"Echo {echo!r}")
        if echo != frame:
            logger.warning(
                f"Echo mismatch for {command!r}: sent {frame!r}, received {echo!r}"
            )
            raise EchoMismatchError(
                f"Unexpected response: {echo.decode('ascii', errors='replace')!r} "
                f"(sent {command!r})",
                sent=frame,
                received=echo,
            )

    async def _exchange(self, command: str, expect_reply: bool) -> Optional[bytes]:
        await self._write_and_verify_echo(command)
        if not expect_reply:
            return None
        return await self.transport.read_until(const.CR)

    async def _locked_exchange(
        self, command: str, expect_reply: bool
    ) -> Optional[bytes]:
        """
        Runs one exchange while holding the lock.

        The exchange itself is shielded: if the caller is cancelled, the lock
        is kept until the frame in flight (echo and reply) has been read, so
        the next command starts on an idle line. If that frame then fails, the
        receive buffer is discarded before the lock is released.
        """
        async with self._lock:
            exchange = asyncio.ensure_future(self._exchange(command, expect_reply))
            try:
                return await asyncio.shield(exchange)
            except asyncio.CancelledError:
                logger.warning(
                    f"Exchange {command!r} cancelled, finishing it before releasing the line."
                )
                while not exchange.done():
                    try:
                        await asyncio.shield(exchange)
                    except asyncio.CancelledError:
                        continue
                    except OEM750xError:
                        break
                if not exchange.cancelled() and exchange.exception() is not None:
                    logger.warning(
                        f"Cancelled exchange {command!r} failed: {exchange.exception()}. "
                        f"Discarding receive buffer."
                    )
                    await self.transport.reset_input_buffer()
                raise

    async def write(self, command: str) -> None:
        """
        Sends a write-only command and verifies its echo.

        Args:
            command: The encoded command without delimiter, e.g. ``"1MN"``.

        Raises:
            NotConnectedError: If the transport is not open. Checked before any I/O.
            EchoMismatchError: If the echo differs from the sent bytes.
            TransportError: Propagated unchanged from the transport.
        """
        self._ensure_connected(command)
        await self._locked_exchange(command, expect_reply=False)

    async def request_bytes(self, command: str) -> bytes:
        """
        Sends a query, verifies its echo and reads the reply frame.

        Returns:
            The reply with every CR and NUL byte removed.
        """
        self._ensure_connected(command)
        response = await self._locked_exchange(command, expect_reply=True)
        logger.debug(f"Reply to {command!r}: {response!r}")
        return clean_response(response)  # type: ignore[arg-type]

    async def request(self, command: str) -> str:
        """
        Sends a query and returns the cleaned reply as text.

        Raises:
            NotConnectedError, EchoMismatchError, TransportError: As for `write`.
            ParseError: If the reply is not ASCII.
        """
        return decode_text(await self.request_bytes(command))

