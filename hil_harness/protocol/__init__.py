"""
Request encoding and response decoding for firmware under test.
"""

from .parameters import Field, ParameterSchema, UINT
from .response import EventList, Response, Value, parse_bool
from .framing import CONTINUE, DecoderState, Done, TERMINATOR, TerminatedDecoder, run_decoder
from .terminated_text import (
    TerminatedTextProtocol,
    TextDecoder,
    interpret,
    parse_assertion,
    parse_structured,
)
from .event_list import EventListDecoder, EventListProtocol, parse_events

__all__ = [
    # Parameters
    "Field",
    "ParameterSchema",
    "UINT",
    # Responses
    "EventList",
    "Response",
    "Value",
    "parse_bool",
    # Framing
    "CONTINUE",
    "DecoderState",
    "Done",
    "TERMINATOR",
    "TerminatedDecoder",
    "run_decoder",
    # Protocols
    "TerminatedTextProtocol",
    "TextDecoder",
    "interpret",
    "parse_assertion",
    "parse_structured",
    "EventListDecoder",
    "EventListProtocol",
    "parse_events",
]
