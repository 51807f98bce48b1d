# parker_oem750x/parsing.py
"""
Reply parsing for the OEM750X ASCII protocol.

Query replies arrive as ``*<channel digits><optional letters><payload>``.
This module strips framing bytes, extracts the payload from that envelope
and decodes the single-character status registers and the hexadecimal
relative position word.
"""
from dataclasses import dataclass
from typing import Dict

import logging
import re

from . import constants as const
from .enums import Edge
from .enums import IndexerStatus
from .exceptions import ParseError
from .exceptions import UnknownStatusCodeError

logger = logging.getLogger(__name__)

ENVELOPE_PATTERN = re.compile(r"\*\d+[A-Z]*(.+)", re.ASCII)
_INT_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_HEX_PATTERN = re.compile(r"[0-9A-Fa-f]+", re.ASCII)


def clean_response(response: bytes) -> bytes:
    """Removes every CR and NUL byte from a raw reply."""
    return response.replace(const.CR, b"").replace(const.NUL, b"")


def decode_text(response: bytes) -> str:
    """Decodes a cleaned reply as ASCII text."""
    try:
        return response.decode("ascii")
    except UnicodeDecodeError as e:
        raise ParseError(
            f"Reply is not ASCII text: {response!r}", raw=response
        ) from e


def parse_value_response(response: str) -> str:
    """
    Extracts the value from a query reply envelope.

    Args:
        response: The cleaned reply text, e.g. ``"*1V0.50"``.

    Returns:
        The payload following the channel echo and mnemonic letters, e.g. ``"0.50"``.

    Raises:
        ParseError: If the reply does not have the ``*<digits><LETTERS><value>`` shape.
    """
    match = ENVELOPE_PATTERN.fullmatch(response)
    if not match:
        logger.warning(f"Invalid response format: {response!r}")
        raise ParseError(f"Invalid response format: {response}", raw=response)
    return match.group(1)


def parse_int(response: str) -> int:
    """Envelope-parses a reply and reads its payload as a decimal integer."""
    value = parse_value_response(response)
    if not _INT_PATTERN.fullmatch(value):
        raise ParseError(
            f"Invalid integer value {value!r} in response: {response}", raw=response
        )
    return int(value)


def parse_float(response: str) -> float:
    """Envelope-parses a reply and reads its payload as a floating-point number."""
    value = parse_value_response(response)
    if not _FLOAT_PATTERN.fullmatch(value):
        raise ParseError(
            f"Invalid float value {value!r} in response: {response}", raw=response
        )
    return float(value)


def raw_string(response: str) -> str:
    """Returns the cleaned reply untouched (replies that carry no envelope)."""
    return response


@dataclass(frozen=True)
class ClosedLoopStatus:
    """2-bit view of the RA status register."""
    stall_detected: bool
    home_successful: bool

    @property
    def bits(self) -> str:
        return f"{int(self.stall_detected)}{int(self.home_successful)}"


@dataclass(frozen=True)
class LimitsStatus:
    """
    4-bit view of the RA status register.

    The first two flags report whether the last move was terminated by the
    CW or CCW limit, the last two report the current state of those inputs.
    """
    last_move_cw: bool
    last_move_ccw: bool
    current_cw: bool
    current_ccw: bool

    @classmethod
    def from_bits(cls, bits: str) -> "LimitsStatus":
        return cls(*(b == "1" for b in bits))

    @property
    def bits(self) -> str:
        return "".join(
            str(int(flag))
            for flag in (
                self.last_move_cw,
                self.last_move_ccw,
                self.current_cw,
                self.current_ccw,
            )
        )

    def is_asserted(self, edge: Edge) -> bool:
        """Current state of the CW or CCW limit input."""
        if edge == Edge.CW:
            return self.current_cw
        return self.current_ccw


# Both tables decode the same register, so shared characters must agree:
# stall_detected == last_move_cw and home_successful == not last_move_ccw.
CLOSED_LOOP_TABLE: Dict[str, ClosedLoopStatus] = {
    "@": ClosedLoopStatus(stall_detected=False, home_successful=True),
    "A": ClosedLoopStatus(stall_detected=True, home_successful=True),
    "B": ClosedLoopStatus(stall_detected=False, home_successful=False),
    "C": ClosedLoopStatus(stall_detected=True, home_successful=False),
}

LIMITS_TABLE: Dict[str, LimitsStatus] = {
    "@": LimitsStatus.from_bits("0000"),
    "A": LimitsStatus.from_bits("1000"),
    "B": LimitsStatus.from_bits("0100"),
    "D": LimitsStatus.from_bits("0010"),
    "E": LimitsStatus.from_bits("1010"),
    "F": LimitsStatus.from_bits("0110"),
    "H": LimitsStatus.from_bits("0001"),
    "I": LimitsStatus.from_bits("1001"),
    "J": LimitsStatus.from_bits("0101"),
    "L": LimitsStatus.from_bits("0011"),
    "M": LimitsStatus.from_bits("1011"),
    "N": LimitsStatus.from_bits("0111"),
}


def decode_closed_loop_status(code: str) -> ClosedLoopStatus:
    """
    Decodes the closed-loop view of the RA status character.

    Raises:
        UnknownStatusCodeError: If ``code`` is not one of ``@ A B C``.
    """
    try:
        return CLOSED_LOOP_TABLE[code]
    except KeyError:
        raise UnknownStatusCodeError(
            f"Invalid closed loop status response: {code!r}", code=code
        ) from None


def decode_limits_status(code: str) -> LimitsStatus:
    """
    Decodes the limits view of the RA status character.

    Raises:
        UnknownStatusCodeError: If ``code`` is not in the limits table.
    """
    try:
        return LIMITS_TABLE[code]
    except KeyError:
        raise UnknownStatusCodeError(
            f"Invalid limits status response: {code!r}", code=code
        ) from None


def decode_indexer_status(code: str) -> IndexerStatus:
    try:
        return IndexerStatus(code)
    except ValueError:
        raise UnknownStatusCodeError(
            f"Invalid indexer status response: {code!r}", code=code
        ) from None


def decode_relative_position(response: str) -> int:
    """
    Decodes the W3 reply: a hexadecimal word, optionally prefixed by ``*``,
    holding a 32-bit two's-complement step count.

    Raises:
        ParseError: If the payload is not hexadecimal.
    """
    value = response[1:] if response.startswith(const.REPLY_MARKER) else response
    if not _HEX_PATTERN.fullmatch(value):
        raise ParseError(
            f"Invalid relative position response: {response}", raw=response
        )
    word = int(value, 16) & const.POSITION_WORD_MASK
    if word & const.POSITION_SIGN_BIT:
        word -= const.POSITION_WORD_MASK + 1
    return word


def parse_indexer_status(response: str) -> IndexerStatus:
    return decode_indexer_status(parse_value_response(response))


def parse_closed_loop_status(response: str) -> ClosedLoopStatus:
    return decode_closed_loop_status(parse_value_response(response))


def parse_limits_status(response: str) -> LimitsStatus:
    return decode_limits_status(parse_value_response(response))
