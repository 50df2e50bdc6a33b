"""
hil_harness - Hardware-in-the-loop firmware test harness

Uploads firmware images to a device, sends test parameters as a packed
binary struct over a serial link and decodes what the firmware answers.

Example usage:
    from hil_harness import UploadCache, load_links
    from hil_harness.boards import LPC1100MMIO

    links = load_links("tests/hardware/board_links.yml")
    board = LPC1100MMIO(
        {"operation": "write", "initial_value": 0, "argument": 7},
        links, UploadCache(),
    )
    board.upload("bin/lpc1100-mmio-firmware.bin")
    assert board.response.value == 7
"""

from .errors import (
    AssertionFailure,
    ErrorCategory,
    HarnessError,
    InvalidParameter,
    LinkConfigError,
    MissingParameter,
    ParameterError,
    ProtocolParseFailure,
    TransportError,
    TransportIO,
    TransportTimeout,
    UploadFailure,
)
from .communication import Link, LinkSet, load_links, make_link, register_link_type
from .controllers import BoardDriver, EventListBoard, TextBoard, UploadCache
from .protocol import EventList, Field, ParameterSchema, Response

__version__ = "0.1.0"
__all__ = [
    # Errors
    "AssertionFailure",
    "ErrorCategory",
    "HarnessError",
    "InvalidParameter",
    "LinkConfigError",
    "MissingParameter",
    "ParameterError",
    "ProtocolParseFailure",
    "TransportError",
    "TransportIO",
    "TransportTimeout",
    "UploadFailure",
    # Links
    "Link",
    "LinkSet",
    "load_links",
    "make_link",
    "register_link_type",
    # Drivers
    "BoardDriver",
    "EventListBoard",
    "TextBoard",
    "UploadCache",
    # Protocol
    "EventList",
    "Field",
    "ParameterSchema",
    "Response",
]
