"""
Link Base Interface

This module defines the abstract base class for all link implementations.
Link classes handle the low-level byte exchange with a device under test,
or the delivery of a firmware image to it.
"""

from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass
from typing import Callable, Optional
import logging

from ..errors import TransportTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinkInfo:
    """Identity of a link endpoint."""
    name: str
    port: str
    baud_rate: int = 0
    timeout: float = 0.0


class Link(ABC):
    """
    Abstract base class for link implementations.

    A link moves raw bytes: ``write`` sends exactly what it is given and
    ``read`` returns exactly the number of bytes asked for, or raises.
    Links that can only flash a device implement ``upload`` and leave the
    byte operations unsupported, and vice versa.
    """

    NAME = ""

    @property
    @abstractmethod
    def port(self) -> str:
        """Port identifier, also used as the device identity for uploads."""
        pass

    @property
    def info(self) -> LinkInfo:
        """Get information about this link."""
        return LinkInfo(name=self.NAME, port=self.port)

    def write(self, data: bytes) -> None:
        """
        Send raw bytes to the device.

        Raises:
            TransportIO: If the channel fails
        """
        raise NotImplementedError(f"{self.NAME} link cannot write")

    def read(self, count: int) -> bytes:
        """
        Read exactly ``count`` bytes from the device.

        Raises:
            TransportTimeout: If fewer bytes arrive within the timeout
            TransportIO: If the channel fails
        """
        raise NotImplementedError(f"{self.NAME} link cannot read")

    def upload(self, program: str) -> None:
        """
        Write a firmware image into the device.

        Raises:
            UploadFailure: If the flashing action fails
        """
        raise NotImplementedError(f"{self.NAME} link cannot upload")

    def discard_input(self) -> None:
        """Drop bytes received but not read yet. Links without a receive buffer ignore this."""
        pass

    def close(self) -> None:
        """Release the link. Safe to call more than once."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.port}>"


class MockLink(Link):
    """
    Mock link for testing purposes.

    Bytes written are logged, bytes read come from an injected buffer or
    from an auto-response handler that sees each write. An exhausted
    buffer behaves like a device that stopped talking.
    """

    NAME = "mock"

    def __init__(self, port: str = "MOCK1"):
        self._port = port
        self._rx_buffer: deque = deque()
        self._tx_log: list[bytes] = []
        self._uploads: list[str] = []
        self._auto_response: Optional[Callable[[bytes], Optional[bytes]]] = None
        self.closed = False

    @property
    def port(self) -> str:
        return self._port

    def set_auto_response(self, handler: Optional[Callable[[bytes], Optional[bytes]]]) -> None:
        """
        Set auto-response handler for testing.

        Args:
            handler: Function that receives sent data and returns response, or None
        """
        self._auto_response = handler

    def inject_data(self, data: bytes) -> None:
        """Inject data into the receive buffer."""
        self._rx_buffer.extend(data)

    def get_tx_log(self) -> list[bytes]:
        """Get log of all transmitted data."""
        return self._tx_log.copy()

    def get_uploads(self) -> list[str]:
        """Get the programs uploaded through this link, in order."""
        return self._uploads.copy()

    @property
    def pending(self) -> int:
        """Number of injected bytes not read yet."""
        return len(self._rx_buffer)

    def write(self, data: bytes) -> None:
        self._tx_log.append(bytes(data))
        if self._auto_response:
            response = self._auto_response(bytes(data))
            if response:
                self._rx_buffer.extend(response)

    def read(self, count: int) -> bytes:
        if len(self._rx_buffer) < count:
            raise TransportTimeout(self._port, count, len(self._rx_buffer))
        return bytes(self._rx_buffer.popleft() for _ in range(count))

    def upload(self, program: str) -> None:
        logger.debug(f"Mock upload of {program} to {self._port}")
        self._uploads.append(program)

    def close(self) -> None:
        self.closed = True
