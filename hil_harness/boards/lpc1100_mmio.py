"""
LPC1100 memory-mapped register fixture.

The firmware runs one operation of ``rtl::mmio<u32>`` on a scratch register
seeded with ``initial_value`` and reports the outcome as JSON: ``value`` for
the register contents, ``read`` for masked reads and ``bit`` for tests.

The mask and bit index used by the masked and bit operations are template
arguments compiled into the firmware; they cannot be changed from here.
"""

from typing import Dict

from ..controllers.board_driver import TextBoard
from ..protocol.parameters import ParameterSchema

OPERATIONS = {
    "masked_clear": 0,
    "clear": 1,
    "masked_set": 2,
    "set": 3,
    "toggle": 4,
    "masked_write": 5,
    "safe_write": 6,
    "write": 7,
    "read": 8,
    "any": 9,
    "all": 10,
    "none": 11,
    "clear_bit": 12,
    "set_bit": 13,
    "toggle_bit": 14,
    "read_bit": 15,
}

# Compiled into the test firmware
MASK = 0b11010101111110010011101100011011
BIT = 19


class LPC1100MMIO(TextBoard):
    """MMIO register operations on an LPC1100."""

    SCHEMA = ParameterSchema.of("operation", "initial_value", "argument")

    def params(self) -> Dict[str, int]:
        params = {}
        if "operation" in self.options:
            params["operation"] = self.lookup(OPERATIONS, "operation",
                                              self.options["operation"])
        if "initial_value" in self.options:
            params["initial_value"] = self.options["initial_value"]
        params["argument"] = self.options.get("argument") or 0
        return params
