"""
Event-List Protocol

Writing a byte array containing test parameters to the device returns a
list of newline-separated strings representing events logged by the
device, terminated by one 0x00 byte. The last string is the firmware's
terminal status, the ones before it are events in emission order:

    driven low\\nread low\\ndone\\0  ->  events ["driven low", "read low"], status "done"
"""

import logging

from .framing import TerminatedDecoder, run_decoder
from .response import EventList
from ..communication.transport_base import Link
from ..errors import ProtocolParseFailure

logger = logging.getLogger(__name__)

SEPARATOR = "\n"


def parse_events(text: str) -> EventList:
    """Split response text into events and terminal status."""
    if not text:
        raise ProtocolParseFailure(text, "empty event list, no terminal status")
    *events, status = text.split(SEPARATOR)
    return EventList(events=events, status=status)


class EventListDecoder(TerminatedDecoder[EventList]):
    """Byte-driven event list decoder."""

    def finalize(self, payload: bytes) -> EventList:
        return parse_events(self.decode_text(payload))


class EventListProtocol:
    """Implements the event list protocol over a link."""

    NAME = "event-list"

    def encode(self, payload: bytes) -> bytes:
        return bytes(payload)

    def decoder(self) -> EventListDecoder:
        return EventListDecoder()

    def exchange(self, link: Link, payload: bytes) -> EventList:
        """
        Perform one request/response cycle.

        Raises:
            TransportTimeout, TransportIO: On link failure
            ProtocolParseFailure: If the response is empty or not UTF-8
        """
        link.write(self.encode(payload))
        result = run_decoder(link, self.decoder())
        logger.debug(f"{len(result.events)} event(s), status '{result.status}'")
        return result
