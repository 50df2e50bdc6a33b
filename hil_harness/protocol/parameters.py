"""
Test Parameter Encoding

Test inputs are sent to the firmware as a packed struct: fixed-width
unsigned integers in declared order, no padding, in the target's byte order.

Layout for ParameterSchema(Field("operation", 4), Field("argument", 2)):
┌───────────┬──────────┐
│ operation │ argument │
│ 4B        │ 2B       │
└───────────┴──────────┘
"""

from dataclasses import dataclass
from typing import Dict, Mapping, Tuple
import struct

from ..errors import InvalidParameter, MissingParameter


# struct format codes for unsigned integers by byte width
WIDTH_CODES = {1: "B", 2: "H", 4: "I", 8: "Q"}

BYTE_ORDERS = {"little": "<", "big": ">"}

# Width of a C ``unsigned int`` on the reference target
UINT = 4


@dataclass(frozen=True)
class Field:
    """A named unsigned integer field of ``width`` bytes."""

    name: str
    width: int = UINT

    def __post_init__(self):
        if self.width not in WIDTH_CODES:
            raise ValueError(
                f"field '{self.name}' width must be one of {sorted(WIDTH_CODES)}, "
                f"got {self.width}"
            )

    @property
    def max_value(self) -> int:
        return (1 << (8 * self.width)) - 1


class ParameterSchema:
    """Ordered field layout shared by the harness and the firmware."""

    def __init__(self, *fields: Field, byte_order: str = "little"):
        if byte_order not in BYTE_ORDERS:
            raise ValueError(f"unknown byte order '{byte_order}'")
        names = [f.name for f in fields]
        duplicates = {n for n in names if names.count(n) > 1}
        if duplicates:
            raise ValueError(f"duplicate fields: {', '.join(sorted(duplicates))}")

        self.fields: Tuple[Field, ...] = tuple(fields)
        self.byte_order = byte_order
        self._format = BYTE_ORDERS[byte_order] + "".join(
            WIDTH_CODES[f.width] for f in self.fields
        )

    @classmethod
    def of(cls, *names: str, width: int = UINT, byte_order: str = "little") -> "ParameterSchema":
        """Schema of equally sized fields, e.g. ``ParameterSchema.of("a", "b")``."""
        return cls(*(Field(n, width) for n in names), byte_order=byte_order)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    @property
    def size(self) -> int:
        """Encoded length in bytes."""
        return sum(f.width for f in self.fields)

    def encode(self, values: Mapping[str, int]) -> bytes:
        """
        Pack values in declared order.

        Args:
            values: Value for every declared field (extra keys are ignored)

        Returns:
            Exactly ``size`` bytes

        Raises:
            MissingParameter: If a declared field has no value
            InvalidParameter: If a value is not an integer that fits its field
        """
        ordered = []
        for f in self.fields:
            if f.name not in values:
                raise MissingParameter(f.name)
            value = values[f.name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameter(f.name, value, "not an integer")
            if not 0 <= value <= f.max_value:
                raise InvalidParameter(f.name, value, f"does not fit in {f.width} byte(s)")
            ordered.append(value)
        return struct.pack(self._format, *ordered)

    def decode(self, data: bytes) -> Dict[str, int]:
        """Unpack bytes produced by ``encode`` back into a value map."""
        if len(data) != self.size:
            raise ValueError(f"expected {self.size} bytes, got {len(data)}")
        return dict(zip(self.names, struct.unpack(self._format, data)))

    def __repr__(self):
        layout = ", ".join(f"{f.name}:{f.width}" for f in self.fields)
        return f"ParameterSchema({layout}, {self.byte_order})"
