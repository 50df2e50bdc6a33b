"""
Board Drivers

A board driver ties one test fixture to its firmware: it knows the
parameter layout the firmware expects, which protocol the firmware answers
with, and which links reach the device. Subclasses fix all three at class
level and translate test options into raw parameter values.

Links expected:
    device => program upload link to device
    main   => byte link to the firmware's test UART
"""

import logging
from typing import Any, Dict, Mapping, Union
import os

from .upload_cache import UploadCache
from ..communication.transport_base import Link
from ..errors import InvalidParameter
from ..protocol.event_list import EventListProtocol
from ..protocol.parameters import ParameterSchema
from ..protocol.response import EventList, Response
from ..protocol.terminated_text import TerminatedTextProtocol

logger = logging.getLogger(__name__)


class BoardDriver:
    """Base class for board drivers."""

    PROTOCOL = None
    SCHEMA = ParameterSchema()

    DEVICE_LINK = "device"
    MAIN_LINK = "main"

    def __init__(self, options: Mapping[str, Any], links: Mapping[str, Link],
                 cache: UploadCache):
        self.options = dict(options)
        self.links = links
        self.cache = cache
        self._protocol = self.PROTOCOL()
        self._result = None

    @property
    def device(self) -> Link:
        return self.links[self.DEVICE_LINK]

    @property
    def main(self) -> Link:
        return self.links[self.MAIN_LINK]

    def upload(self, program: Union[str, os.PathLike]) -> bool:
        """
        Flash ``program`` through the device link, once per run.

        Returns:
            True if the program was flashed, False if it was already there

        Raises:
            UploadFailure: If the flasher fails
        """
        link = self.device
        return self.cache.upload_program(link.port, program,
                                         lambda: link.upload(os.fspath(program)))

    def params(self) -> Dict[str, int]:
        """Raw parameter values for the firmware. Override to map options."""
        return dict(self.options)

    @property
    def payload(self) -> bytes:
        """Encoded request parameters."""
        return self.SCHEMA.encode(self.params())

    def _query(self):
        # One write/read cycle per driver; failures are not cached
        if self._result is None:
            payload = self.payload
            # Leftovers from an aborted cycle must not prefix this response
            self.main.discard_input()
            logger.debug(f"{self.__class__.__name__}: {len(payload)} byte request on {self.main.port}")
            self._result = self._protocol.exchange(self.main, payload)
        return self._result

    @staticmethod
    def lookup(table: Mapping[str, int], name: str, value: Any) -> int:
        """Translate a symbolic option into its firmware value."""
        try:
            return table[value]
        except KeyError:
            raise InvalidParameter(
                name, value, f"expected one of {', '.join(map(str, table))}"
            ) from None


class TextBoard(BoardDriver):
    """Board whose firmware answers with the terminated-text protocol."""

    PROTOCOL = TerminatedTextProtocol

    @property
    def response(self) -> Response:
        """
        Structured firmware response.

        Raises:
            AssertionFailure: If the firmware asserted instead of answering
        """
        return self._query()


class EventListBoard(BoardDriver):
    """Board whose firmware answers with the event list protocol."""

    PROTOCOL = EventListProtocol

    @property
    def event_list(self) -> EventList:
        return self._query()

    @property
    def events(self) -> list:
        """Events logged by the firmware, in order."""
        return self.event_list.events

    @property
    def status(self) -> str:
        """Terminal status reported after the events."""
        return self.event_list.status
