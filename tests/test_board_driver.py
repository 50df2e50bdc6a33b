"""
Board Driver Tests
Drive the reference boards against simulated firmware on mock links
"""

import struct

import pytest

from hil_harness.boards import Breadboard, LPC1100MMIO
from hil_harness.communication.serial_transport import SerialLink
from hil_harness.controllers.board_driver import EventListBoard, TextBoard
from hil_harness.errors import (
    AssertionFailure,
    InvalidParameter,
    MissingParameter,
    TransportTimeout,
    UploadFailure,
)
from hil_harness.protocol.parameters import ParameterSchema

INITIAL = 0b01010010101111001100101011101101


class TestUpload:

    def test_upload_goes_through_device_link(self, board_links, device_link, cache):
        board = Breadboard({"termination": "pullup"}, board_links, cache)

        assert board.upload("bin/test-firmware.bin") is True

        assert device_link.get_uploads() == ["bin/test-firmware.bin"]

    def test_second_board_skips_upload(self, board_links, device_link, cache):
        Breadboard({"termination": "pullup"}, board_links, cache).upload("bin/test-firmware.bin")
        again = Breadboard({"termination": "pulldown"}, board_links, cache)

        assert again.upload("bin/test-firmware.bin") is False
        assert device_link.get_uploads() == ["bin/test-firmware.bin"]

    def test_failed_upload_retried(self, board_links, device_link, cache, monkeypatch):
        attempts = []

        def flaky_upload(program):
            attempts.append(program)
            if len(attempts) == 1:
                raise UploadFailure(program, "Synchronizing... failed", 1)

        monkeypatch.setattr(device_link, "upload", flaky_upload)
        board = LPC1100MMIO({"operation": "read", "initial_value": 0}, board_links, cache)

        with pytest.raises(UploadFailure):
            board.upload("bin/lpc1100-mmio-firmware.bin")
        assert board.upload("bin/lpc1100-mmio-firmware.bin") is True
        assert len(attempts) == 2


class TestBreadboard:

    @pytest.mark.parametrize("termination,released", [
        ("pulldown", "read low"),
        ("pullup", "read high"),
        ("repeater", "read high"),
    ])
    def test_digital_io(self, board_links, digital_io_link, cache, termination, released):
        board = Breadboard({"termination": termination}, board_links, cache)

        assert board.events == [
            "driven low", "read low",
            "driven high", "read high",
            "not driven", released,
        ]
        assert board.status == "done"

    def test_payload(self, board_links, cache):
        board = Breadboard({"termination": "repeater"}, board_links, cache)
        assert board.payload == struct.pack("<I", 3 << 3)

    def test_one_cycle_for_events_and_status(self, board_links, digital_io_link, cache):
        board = Breadboard({"termination": "pullup"}, board_links, cache)

        board.events
        board.status
        board.events

        assert len(digital_io_link.get_tx_log()) == 1

    def test_missing_termination(self, board_links, cache):
        board = Breadboard({}, board_links, cache)
        with pytest.raises(MissingParameter, match="termination"):
            board.events

    def test_unknown_termination(self, board_links, cache):
        board = Breadboard({"termination": "open_drain"}, board_links, cache)
        with pytest.raises(InvalidParameter):
            board.payload


class TestLPC1100MMIO:

    @pytest.mark.parametrize("operation,argument,expected", [
        ("masked_clear", None, 0b00000010000001001100000011100100),
        ("clear", None, 0),
        ("masked_set", None, 0b11010111111111011111101111111111),
        ("set", None, 0xFFFFFFFF),
        ("toggle", None, 0b10000111010001011111000111110110),
        ("masked_write", 0b10000100111010010000100000010000, 0b10000110111011011100100011110100),
        ("safe_write", 0b10000101100101010010101000001001, 0b10000111100101011110101011101101),
        ("write", 0b11010101011010101010100100101101, 0b11010101011010101010100100101101),
        ("clear_bit", None, 0b01010010101101001100101011101101),
    ])
    def test_value(self, board_links, mmio_link, cache, operation, argument, expected):
        board = LPC1100MMIO(
            {"operation": operation, "initial_value": INITIAL, "argument": argument},
            board_links, cache,
        )
        assert board.response.value == expected

    def test_masked_read(self, board_links, mmio_link, cache):
        board = LPC1100MMIO({"operation": "read", "initial_value": INITIAL}, board_links, cache)
        assert board.response.read == 0b01010000101110000000101000001001

    @pytest.mark.parametrize("operation,initial_value,expected", [
        ("any", INITIAL, True),
        ("any", 0b00100010000001101100010000000100, False),
        ("all", 0b11110111111110111111101101011111, True),
        ("all", INITIAL, False),
        ("none", 0b00100010000001101100010000000100, True),
        ("read_bit", INITIAL, True),
        ("read_bit", 0b01010010101101001100101011101101, False),
    ])
    def test_bit(self, board_links, mmio_link, cache, operation, initial_value, expected):
        board = LPC1100MMIO(
            {"operation": operation, "initial_value": initial_value}, board_links, cache,
        )
        assert board.response.bit is expected

    def test_masked_write_out_of_bounds_asserts(self, board_links, mmio_link, cache):
        board = LPC1100MMIO({
            "operation": "masked_write",
            "initial_value": INITIAL,
            "argument": 0b10000101100101010010101000001001,
        }, board_links, cache)

        with pytest.raises(AssertionFailure, match="attempted to write bits outside mask") as excinfo:
            board.response
        assert excinfo.value.file == "src/rtl/mmio.hpp"

    def test_argument_defaults_to_zero(self, board_links, cache):
        board = LPC1100MMIO({"operation": "set", "initial_value": 1}, board_links, cache)
        assert board.payload == struct.pack("<III", 3, 1, 0)

    def test_missing_initial_value(self, board_links, cache):
        board = LPC1100MMIO({"operation": "set"}, board_links, cache)
        with pytest.raises(MissingParameter, match="initial_value"):
            board.response

    def test_response_cached_per_board(self, board_links, mmio_link, cache):
        board = LPC1100MMIO({"operation": "set", "initial_value": 0}, board_links, cache)
        assert board.response.value == 0xFFFFFFFF
        assert board.response.value == 0xFFFFFFFF
        assert len(mmio_link.get_tx_log()) == 1

    def test_timeout_not_cached(self, board_links, mock_link, cache):
        """A timed-out query leaves nothing behind; asking again is a new cycle."""
        board = LPC1100MMIO({"operation": "set", "initial_value": 0}, board_links, cache)

        with pytest.raises(TransportTimeout):
            board.response

        mock_link.inject_data(b'{"value": 4294967295}\x00')
        assert board.response.value == 0xFFFFFFFF
        assert len(mock_link.get_tx_log()) == 2


class TestLateResponse:
    """A response that arrives after its query timed out."""

    def test_late_tail_does_not_prefix_next_response(self, fake_serial, device_link, cache):
        main = SerialLink("/dev/ttyUSB0", timeout=0.05)
        links = {"main": main, "device": device_link}
        main.write(b"")
        port = fake_serial.instances[0]

        port.reply = lambda request: b'{"value":'
        with pytest.raises(TransportTimeout):
            LPC1100MMIO({"operation": "set", "initial_value": 0}, links, cache).response

        port.rx += b"1}\x00"
        port.reply = lambda request: b'{"value":4294967295}\x00'
        board = LPC1100MMIO({"operation": "set", "initial_value": 0}, links, cache)

        assert board.response.value == 0xFFFFFFFF

    def test_mock_link_keeps_injected_data(self, board_links, mock_link, cache):
        mock_link.inject_data(b'{"value": 7}\x00')
        board = LPC1100MMIO({"operation": "read", "initial_value": 7}, board_links, cache)
        assert board.response.value == 7


class TestCustomBoards:
    """Boards defined directly on the base classes."""

    def test_text_board_passes_options_through(self, board_links, mock_link, cache):
        class Adder(TextBoard):
            SCHEMA = ParameterSchema.of("a", "b")

        mock_link.set_auto_response(
            lambda request: b'{"sum": %d}\x00' % sum(struct.unpack("<II", request))
        )
        assert Adder({"a": 2, "b": 3}, board_links, cache).response.sum == 5

    def test_custom_link_names(self, mock_link, cache):
        class Logger(EventListBoard):
            MAIN_LINK = "uart1"

        mock_link.inject_data(b"boot\nok\x00")
        board = Logger({}, {"uart1": mock_link}, cache)

        assert board.events == ["boot"]
        assert board.status == "ok"
        assert mock_link.get_tx_log() == [b""]
