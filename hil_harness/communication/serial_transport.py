"""
Serial Link Implementation

Byte-oriented link over a serial port (8N1), using pyserial. The port is
opened on first use and every read is bounded by the link timeout.
"""

import logging
import time
from typing import Optional

import serial

from .transport_base import Link, LinkInfo
from ..errors import TransportIO, TransportTimeout


logger = logging.getLogger(__name__)


# Default serial settings
DEFAULT_BAUDRATE = 115200
DEFAULT_TIMEOUT = 3.0


class SerialLink(Link):
    """Implements a byte-oriented link over a serial port."""

    NAME = "serial"

    def __init__(self, port: str, baud_rate: int = DEFAULT_BAUDRATE,
                 timeout: float = DEFAULT_TIMEOUT):
        self._port = port
        self.baud_rate = baud_rate
        self.timeout = timeout
        self._serial: Optional[serial.Serial] = None

    @property
    def port(self) -> str:
        return self._port

    @property
    def info(self) -> LinkInfo:
        return LinkInfo(
            name=self.NAME,
            port=self._port,
            baud_rate=self.baud_rate,
            timeout=self.timeout,
        )

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def _open(self) -> serial.Serial:
        if self._serial is None:
            try:
                self._serial = serial.Serial(
                    port=self._port,
                    baudrate=self.baud_rate,
                    bytesize=serial.EIGHTBITS,
                    parity=serial.PARITY_NONE,
                    stopbits=serial.STOPBITS_ONE,
                    timeout=self.timeout,
                    write_timeout=self.timeout,
                )
            except (serial.SerialException, ValueError) as e:
                logger.error(f"Serial connection failed: {e}")
                raise TransportIO(self._port, f"cannot open port: {e}") from e
            logger.info(f"Serial connected: {self._port} @ {self.baud_rate}")
        return self._serial

    def write(self, data: bytes) -> None:
        port = self._open()
        try:
            port.write(bytes(data))
            port.flush()
        except serial.SerialTimeoutException as e:
            raise TransportTimeout(self._port, len(data), 0) from e
        except serial.SerialException as e:
            logger.error(f"Serial send error: {e}")
            raise TransportIO(self._port, f"write failed: {e}") from e
        logger.debug(f"Sent {len(data)} bytes on {self._port}")

    def read(self, count: int) -> bytes:
        port = self._open()
        deadline = time.monotonic() + self.timeout
        data = bytearray()

        while len(data) < count:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                # Whatever arrived is dropped, the interaction never happened
                logger.warning(
                    f"Read timeout on {self._port}: {len(data)}/{count} bytes"
                )
                raise TransportTimeout(self._port, count, len(data))
            try:
                port.timeout = remaining
                data += port.read(count - len(data))
            except serial.SerialException as e:
                logger.error(f"Serial receive error: {e}")
                raise TransportIO(self._port, f"read failed: {e}") from e

        return bytes(data)

    def discard_input(self) -> None:
        if not self.is_open:
            return
        try:
            self._serial.reset_input_buffer()
        except serial.SerialException as e:
            raise TransportIO(self._port, f"cannot discard input: {e}") from e

    def close(self) -> None:
        if self._serial is None:
            return
        try:
            self._serial.close()
        except serial.SerialException as e:
            logger.error(f"Serial close error: {e}")
        finally:
            self._serial = None
        logger.info(f"Serial disconnected: {self._port}")
