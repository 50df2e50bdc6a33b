"""
Shared fixtures for harness tests.
"""

import json
import logging
import struct

import pytest

from hil_harness.boards.breadboard import TERMINATIONS
from hil_harness.boards.lpc1100_mmio import BIT, MASK, OPERATIONS
from hil_harness.communication.links import register_link_type
from hil_harness.communication.transport_base import MockLink
from hil_harness.controllers.upload_cache import UploadCache

pytest_plugins = ["hil_harness.pytest_plugin"]

# Link files written by the tests use `type: mock`
register_link_type(MockLink)


class FakeSerial:
    """
    Stand-in for serial.Serial.

    Reads are served from ``rx``; a read returns whatever is buffered, up to
    the requested size, like pyserial does when its timeout expires.
    ``reply``, when set, maps each write to bytes appended to ``rx``.
    """

    instances = []

    def __init__(self, port=None, baudrate=9600, timeout=None, write_timeout=None, **kwargs):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.write_timeout = write_timeout
        self.kwargs = kwargs
        self.is_open = True
        self.rx = bytearray()
        self.tx = bytearray()
        self.read_calls = 0
        self.fail_with = None
        self.reply = None
        FakeSerial.instances.append(self)

    def write(self, data):
        if self.fail_with:
            raise self.fail_with
        self.tx += data
        if self.reply:
            self.rx += self.reply(bytes(data))
        return len(data)

    def flush(self):
        pass

    def read(self, size=1):
        self.read_calls += 1
        if self.fail_with:
            raise self.fail_with
        data = bytes(self.rx[:size])
        del self.rx[:size]
        return data

    def reset_input_buffer(self):
        self.rx.clear()

    def close(self):
        self.is_open = False


@pytest.fixture
def fake_serial(monkeypatch):
    """Replace serial.Serial with FakeSerial; yields the FakeSerial class."""
    import serial

    FakeSerial.instances = []
    monkeypatch.setattr(serial, "Serial", FakeSerial)
    return FakeSerial


@pytest.fixture
def mock_link():
    """Byte link with scripted responses."""
    return MockLink("MOCK_MAIN")


@pytest.fixture
def device_link():
    """Upload link that records uploads."""
    return MockLink("MOCK_DEVICE")


@pytest.fixture
def board_links(mock_link, device_link):
    """Links mapping in the shape board drivers expect."""
    return {"main": mock_link, "device": device_link}


@pytest.fixture
def cache():
    """Fresh upload cache."""
    return UploadCache()


@pytest.fixture
def restore_logging():
    """Put the root logger back the way it was after a test reconfigures it."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def simulate_mmio(request: bytes) -> bytes:
    """
    Answer an LPC1100 MMIO request the way the test firmware does.

    Mask and bit index match the ones compiled into the firmware.
    """
    names = {code: name for name, code in OPERATIONS.items()}
    operation, value, argument = struct.unpack("<III", request)
    op = names[operation]
    full = 0xFFFFFFFF
    bit = 1 << BIT

    if op == "masked_write" and argument & ~MASK & full:
        return b"src/rtl/mmio.hpp:87: attempted to write bits outside mask\x00"

    results = {
        "masked_clear": ("value", value & ~MASK & full),
        "clear": ("value", 0),
        "masked_set": ("value", value | MASK),
        "set": ("value", full),
        "toggle": ("value", value ^ MASK),
        "masked_write": ("value", (value & ~MASK & full) | argument),
        "safe_write": ("value", (value & ~MASK & full) | (argument & MASK)),
        "write": ("value", argument),
        "read": ("read", value & MASK),
        "any": ("bit", value & MASK != 0),
        "all": ("bit", value & MASK == MASK),
        "none": ("bit", value & MASK == 0),
        "clear_bit": ("value", value & ~bit & full),
        "set_bit": ("value", value | bit),
        "toggle_bit": ("value", value ^ bit),
        "read_bit": ("bit", value & bit != 0),
    }
    key, result = results[op]
    return json.dumps({key: result}).encode("utf-8") + b"\x00"


def simulate_digital_io(request: bytes) -> bytes:
    """Answer a breadboard digital I/O request with its event list."""
    names = {code: name for name, code in TERMINATIONS.items()}
    (termination,) = struct.unpack("<I", request)
    released = "read low" if names[termination] == "pulldown" else "read high"
    events = ["driven low", "read low", "driven high", "read high", "not driven", released, "done"]
    return "\n".join(events).encode("utf-8") + b"\x00"


@pytest.fixture
def mmio_link(mock_link):
    mock_link.set_auto_response(simulate_mmio)
    return mock_link


@pytest.fixture
def digital_io_link(mock_link):
    mock_link.set_auto_response(simulate_digital_io)
    return mock_link
