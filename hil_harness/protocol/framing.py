"""
Zero-Terminated Response Framing

Both response protocols end a response with a single 0x00 byte. Decoders
are driven one byte at a time through ``step``, which returns CONTINUE while
more bytes are needed and ``Done(result)`` once the terminator arrives, so
the caller never reads past the end of a response.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Generic, TypeVar
import logging

from ..communication.transport_base import Link
from ..errors import ProtocolParseFailure

logger = logging.getLogger(__name__)

TERMINATOR = 0x00

T = TypeVar("T")


class DecoderState(Enum):
    """Decoder state."""
    ACCUMULATING = auto()
    DONE = auto()


class _Continue:
    def __repr__(self):
        return "CONTINUE"


CONTINUE = _Continue()


@dataclass(frozen=True)
class Done(Generic[T]):
    """Final decoder step carrying the decoded result."""
    result: T


class TerminatedDecoder(Generic[T]):
    """
    Accumulates bytes until the terminator, then finalizes.

    Subclasses implement ``finalize`` to turn the payload into a result.
    """

    def __init__(self):
        self._buffer = bytearray()
        self._state = DecoderState.ACCUMULATING
        self._result: Any = None

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def done(self) -> bool:
        return self._state is DecoderState.DONE

    @property
    def result(self) -> T:
        if not self.done:
            raise RuntimeError("decoder has not finished")
        return self._result

    def step(self, byte: int):
        """
        Feed one byte.

        Returns:
            CONTINUE while accumulating, Done(result) on the terminator

        Raises:
            RuntimeError: If the decoder already finished
        """
        if self.done:
            raise RuntimeError("decoder already finished")
        if byte == TERMINATOR:
            self._state = DecoderState.DONE
            self._result = self.finalize(bytes(self._buffer))
            return Done(self._result)
        self._buffer.append(byte)
        return CONTINUE

    def feed(self, data: bytes):
        """Feed several bytes; stops at the terminator. Mostly for tests."""
        step = CONTINUE
        for byte in data:
            step = self.step(byte)
            if isinstance(step, Done):
                break
        return step

    def finalize(self, payload: bytes) -> T:
        raise NotImplementedError

    @staticmethod
    def decode_text(payload: bytes) -> str:
        try:
            return payload.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ProtocolParseFailure(
                payload.decode("utf-8", errors="replace"), f"invalid UTF-8: {e.reason}"
            ) from e


def run_decoder(link: Link, decoder: TerminatedDecoder[T]) -> T:
    """
    Drive a decoder from a link, one read per byte.

    Raises:
        TransportTimeout: If the device stops sending before the terminator
    """
    received = 0
    while True:
        byte = link.read(1)[0]
        received += 1
        step = decoder.step(byte)
        if isinstance(step, Done):
            logger.debug(f"Response complete after {received} bytes on {link.port}")
            return step.result
