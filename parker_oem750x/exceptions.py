# parker_oem750x/exceptions.py
"""
Custom exceptions for the Parker OEM750X driver library.
"""


class OEM750xError(Exception):
    """Base exception class for all OEM750X library errors."""
    def __init__(self, message, *args, error_code=None, channel=None):
        super().__init__(message, *args)
        self.message = message
        self.error_code = error_code
        self.channel = channel

    def __str__(self):
        base_message = super().__str__()

        details = []
        if self.channel is not None:
            details.append(f"Channel: {self.channel}")
        if self.error_code is not None:
            details.append(f"Error Code: {self.error_code}")

        if details:
            return f"{base_message} ({', '.join(details)})"
        return base_message


class NotConnectedError(OEM750xError):
    """Operation attempted while the drive session is not connected."""


class TransportError(OEM750xError):
    """Failure reported by the transport collaborator (serial port I/O, timeouts)."""


class ValidationError(OEM750xError):
    """Argument outside its declared range or enum domain. Never reaches the wire."""

    def __init__(self, message, value=None, channel=None):
        super().__init__(message, channel=channel)
        self.value = value


class EchoMismatchError(OEM750xError):
    """The drive echoed something other than the exact command it was sent."""

    def __init__(self, message, sent=None, received=None, channel=None):
        super().__init__(message, channel=channel)
        self.sent = sent
        self.received = received


class ParseError(OEM750xError):
    """A reply did not match the expected envelope or numeric grammar."""

    def __init__(self, message, raw=None, channel=None):
        super().__init__(message, channel=channel)
        self.raw = raw


class UnknownStatusCodeError(OEM750xError):
    """A status character is outside the domain of its decode table."""

    def __init__(self, message, code=None, channel=None):
        super().__init__(message, channel=channel)
        self.code = code


class HomingError(OEM750xError):
    """Errors specific to the hard homing procedure."""

    def __init__(self, message, phase=None, channel=None):
        super().__init__(message, channel=channel)
        self.phase = phase

    def __str__(self):
        parts = [super().__str__()]
        if self.phase is not None:
            parts.append(f"Phase: {self.phase}")
        return " - ".join(parts)


class HomingCancelledError(HomingError):
    """The homing procedure observed its cancel signal and stopped polling."""


class HomingTimeoutError(HomingError):
    """The homing procedure did not finish before its deadline."""
