"""
Harness Error Taxonomy

Every failure the harness can report is a HarnessError subclass tagged with
an ErrorCategory, so a test (or the command line) can tell a dead serial
port apart from a firmware assertion without string matching.
"""

from enum import Enum
from typing import Optional


class ErrorCategory(Enum):
    """Error categories for filtering and reporting."""
    TRANSPORT = "transport"     # Serial channel, timeouts
    UPLOAD = "upload"           # Flashing tool
    PROTOCOL = "protocol"       # Response framing and parsing
    FIRMWARE = "firmware"       # Device-side assertions
    PARAMETER = "parameter"     # Request encoding
    CONFIG = "config"           # Link definitions
    UNKNOWN = "unknown"


class HarnessError(Exception):
    """Base exception for all harness errors."""
    category = ErrorCategory.UNKNOWN


class TransportError(HarnessError):
    """Base exception for transport errors."""
    category = ErrorCategory.TRANSPORT


class TransportTimeout(TransportError):
    """No complete response arrived within the link timeout."""

    def __init__(self, port: str, expected: int = 0, received: int = 0):
        self.port = port
        self.expected = expected
        self.received = received
        super().__init__(f"no response on {port}")


class TransportIO(TransportError):
    """The underlying channel failed."""

    def __init__(self, port: str, reason: str):
        self.port = port
        self.reason = reason
        super().__init__(f"{port}: {reason}")


class UploadFailure(HarnessError):
    """The flashing tool failed; ``output`` holds what it printed."""
    category = ErrorCategory.UPLOAD

    def __init__(self, program: str, output: str, returncode: Optional[int] = None):
        self.program = program
        self.output = output
        self.returncode = returncode
        super().__init__(f"upload failed: \n\n{output}")


class ProtocolParseFailure(HarnessError):
    """Response text matched neither the structured nor the assertion format."""
    category = ErrorCategory.PROTOCOL

    def __init__(self, text: str, reason: str = "unrecognised response"):
        self.text = text
        self.reason = reason
        super().__init__(f"{reason}: {text!r}")


class AssertionFailure(HarnessError):
    """
    An assertion failed on the device during a test.

    Raised by the driver in place of a normal response, so tests can check
    for it with ``pytest.raises(AssertionFailure, match=...)``.
    """
    category = ErrorCategory.FIRMWARE

    def __init__(self, message: str, file: str, line: int):
        self.message = message
        self.file = file
        self.line = line
        super().__init__(message)

    def __str__(self):
        return f"{self.message} [{self.file}:{self.line}]"


class ParameterError(HarnessError):
    """Base exception for request encoding errors."""
    category = ErrorCategory.PARAMETER


class MissingParameter(ParameterError):
    """A declared field had no value at encode time."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"missing parameter '{name}'")


class InvalidParameter(ParameterError):
    """A value cannot be encoded into its field."""

    def __init__(self, name: str, value, reason: str):
        self.name = name
        self.value = value
        self.reason = reason
        super().__init__(f"parameter '{name}' = {value!r}: {reason}")


class LinkConfigError(HarnessError):
    """A link definition is missing, unknown or malformed."""
    category = ErrorCategory.CONFIG
