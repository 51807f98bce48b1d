"""
Shared test fixtures for the Parker OEM750X driver.

`FakeTransport` stands in for the serial port: every written frame is
echoed back, and frames listed in ``replies`` additionally queue a reply
frame. A reply may be a string, raw bytes, or a list of strings consumed one
per query (the last one repeats), which is how the homing tests script
the limit switch register over time.

## Usage

```python
@pytest.mark.asyncio
async def test_feature(drive, fake_transport):
    fake_transport.replies["1PR"] = "*1PR1200"
    assert await drive.get_absolute_position(1) == 1200
    assert fake_transport.commands == ["1PR"]
```
"""
import asyncio
from typing import Dict, List, Optional, Tuple, Union

import pytest

from parker_oem750x import DriveSession, OEM750x
from parker_oem750x.exceptions import TransportError
from parker_oem750x.transport import Transport


Reply = Union[str, bytes, List[str]]


class FakeTransport(Transport):
    """In-memory OEM750X that echoes commands and answers scripted queries."""

    def __init__(self, replies: Optional[Dict[str, Reply]] = None, opened: bool = True):
        self.replies: Dict[str, Reply] = dict(replies or {})
        self.echo_overrides: Dict[str, bytes] = {}
        self.written: List[bytes] = []
        self.events: List[Tuple[str, bytes]] = []
        self.fail_on_write: Optional[Exception] = None
        self.fail_on_read: Optional[Exception] = None
        self._rx: List[bytes] = []
        self._opened = opened
        self.open_calls = 0
        self.close_calls = 0
        self.reset_calls = 0
        self.read_delay = 0.0

    @property
    def commands(self) -> List[str]:
        """Written frames decoded, without the CR delimiter."""
        return [frame.decode("ascii").rstrip("\r") for frame in self.written]

    async def open(self) -> None:
        self.open_calls += 1
        self._opened = True

    async def close(self) -> None:
        self.close_calls += 1
        self._opened = False

    def is_open(self) -> bool:
        return self._opened

    def _next_reply(self, command: str) -> Optional[Union[str, bytes]]:
        reply = self.replies.get(command)
        if isinstance(reply, list):
            if len(reply) > 1:
                return reply.pop(0)
            return reply[0] if reply else None
        return reply

    async def write_bytes(self, data: bytes) -> None:
        await asyncio.sleep(0)
        if self.fail_on_write is not None:
            raise self.fail_on_write
        self.written.append(data)
        self.events.append(("write", data))
        command = data.decode("ascii").rstrip("\r")
        self._rx.append(self.echo_overrides.get(command, data))
        reply = self._next_reply(command)
        if isinstance(reply, str):
            reply = reply.encode("ascii")
        if reply is not None:
            self._rx.append(reply + b"\r")

    async def read_until(self, delimiter: bytes = b"\r") -> bytes:
        await asyncio.sleep(self.read_delay)
        if self.fail_on_read is not None:
            raise self.fail_on_read
        if not self._rx:
            raise TransportError(f"Timeout waiting for {delimiter!r}")
        frame = self._rx.pop(0)
        self.events.append(("read", frame))
        return frame

    async def reset_input_buffer(self) -> None:
        self.reset_calls += 1
        self._rx.clear()


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def session(fake_transport: FakeTransport) -> DriveSession:
    return DriveSession(fake_transport)


@pytest.fixture
def drive(session: DriveSession) -> OEM750x:
    return OEM750x(session)
