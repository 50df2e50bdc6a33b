"""
Terminated-Text Protocol

The request is the raw parameter bytes. The firmware answers with UTF-8
text followed by one 0x00 byte. The text is either a JSON object holding
the test result, or an assertion report of the form

    <file>:<line>: <message>

which is raised as an AssertionFailure instead of being returned.
"""

import json
import logging
import re
from typing import Optional

from .framing import TerminatedDecoder, run_decoder
from .response import Response
from ..communication.transport_base import Link
from ..errors import AssertionFailure, ProtocolParseFailure

logger = logging.getLogger(__name__)

ASSERTION_PATTERN = re.compile(r"([^:]+):(\d+): (.*)", re.DOTALL)


def parse_structured(text: str) -> Optional[Response]:
    """Parse a JSON object response, or None if the text is not one."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return Response(data)
    except TypeError:
        return None


def parse_assertion(text: str) -> Optional[AssertionFailure]:
    """Parse an assertion report, or None if the text was not an assertion."""
    match = ASSERTION_PATTERN.match(text)
    if match is None:
        return None
    return AssertionFailure(match[3], match[1], int(match[2]))


def interpret(text: str) -> Response:
    """
    Interpret decoded response text.

    Raises:
        AssertionFailure: If the firmware reported a failed assertion
        ProtocolParseFailure: If the text is neither a result nor an assertion
    """
    response = parse_structured(text)
    if response is not None:
        return response

    assertion = parse_assertion(text)
    if assertion is not None:
        logger.info(f"Device assertion: {assertion}")
        raise assertion

    raise ProtocolParseFailure(text)


class TextDecoder(TerminatedDecoder[str]):
    """Collects the zero-terminated UTF-8 response text."""

    def finalize(self, payload: bytes) -> str:
        return self.decode_text(payload)


class TerminatedTextProtocol:
    """Implements the terminated-text protocol over a link."""

    NAME = "terminated-text"

    def encode(self, payload: bytes) -> bytes:
        return bytes(payload)

    def decoder(self) -> TextDecoder:
        return TextDecoder()

    def exchange(self, link: Link, payload: bytes) -> Response:
        """
        Perform one request/response cycle.

        Raises:
            TransportTimeout, TransportIO: On link failure
            AssertionFailure: If the firmware asserted
            ProtocolParseFailure: If the response is unrecognised
        """
        link.write(self.encode(payload))
        text = run_decoder(link, self.decoder())
        return interpret(text)
