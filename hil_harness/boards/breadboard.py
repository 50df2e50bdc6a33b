"""
Breadboard digital I/O fixture.

The firmware drives an output pin low, high and then releases it, reading
back a looped-back input pin after each step. The input pin termination is
selected per test.
"""

from typing import Dict

from ..controllers.board_driver import EventListBoard
from ..protocol.parameters import ParameterSchema

TERMINATIONS = {
    "floating": 0 << 3,
    "pulldown": 1 << 3,
    "pullup": 2 << 3,
    "repeater": 3 << 3,
}


class Breadboard(EventListBoard):
    """Digital I/O loopback on a breadboard."""

    SCHEMA = ParameterSchema.of("termination")

    def params(self) -> Dict[str, int]:
        if "termination" not in self.options:
            return {}
        return {
            "termination": self.lookup(TERMINATIONS, "termination",
                                       self.options["termination"]),
        }
