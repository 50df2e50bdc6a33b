"""
Decoded device responses.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Union

Value = Union[str, int, float, bool]

VALUE_TYPES = (str, int, float, bool)


def parse_bool(text: str) -> bool:
    """Convert a firmware boolean token ("true"/"false") to a bool."""
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"not a boolean string: {text!r}")


class Response(Mapping):
    """
    Named-field value bag from the Terminated-Text protocol.

    Fields are readable as items or attributes: ``response["value"]`` and
    ``response.value`` are the same thing. Attribute access only reaches
    fields that do not share a name with a method (``keys``, ``get``,
    ``flag``, ...); item access always works.
    """

    def __init__(self, fields: Mapping[str, Value]):
        for key, value in fields.items():
            if not isinstance(value, VALUE_TYPES):
                raise TypeError(f"field '{key}' has unsupported type {type(value).__name__}")
        self._fields: Dict[str, Value] = dict(fields)

    def __getitem__(self, key: str) -> Value:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __getattr__(self, name: str) -> Value:
        try:
            return self.__dict__["_fields"][name]
        except KeyError:
            raise AttributeError(f"response has no field '{name}'") from None

    def flag(self, key: str) -> bool:
        """Read a field as a boolean, accepting "true"/"false" strings."""
        value = self._fields[key]
        if isinstance(value, str):
            return parse_bool(value)
        return bool(value)

    def __eq__(self, other):
        if isinstance(other, Response):
            return self._fields == other._fields
        if isinstance(other, Mapping):
            return self._fields == dict(other)
        return NotImplemented

    def __repr__(self):
        return f"Response({self._fields!r})"


@dataclass
class EventList:
    """Ordered events from the Event-List protocol plus the terminal status."""

    events: List[str] = field(default_factory=list)
    status: str = ""
