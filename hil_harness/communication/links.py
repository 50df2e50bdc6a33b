"""
Link Configuration

Named link definitions are read from a YAML file (``board_links.yml`` next
to the hardware tests by default):

    device:
      type: lpc21isp
      args: {port: /dev/ttyUSB0, oscillator_frequency: 12000}
    main:
      type: serial
      args: {port: /dev/ttyUSB0, baud_rate: 115200, timeout: 3}

Each ``type`` is looked up in a registry of link classes, and links are only
constructed when a test first asks for them by name.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, Optional, Type, Union

import yaml

from .transport_base import Link
from .serial_transport import SerialLink
from .flasher_transport import LPC21ISPLink
from ..errors import LinkConfigError

logger = logging.getLogger(__name__)

LINK_FILE = "board_links.yml"

_LINK_TYPES: Dict[str, Type[Link]] = {}


def register_link_type(cls: Type[Link]) -> Type[Link]:
    """Register a link class under its NAME. Usable as a class decorator."""
    if not cls.NAME:
        raise ValueError(f"{cls.__name__} has no NAME")
    _LINK_TYPES[cls.NAME] = cls
    return cls


def link_types() -> Dict[str, Type[Link]]:
    """Get a copy of the link type registry."""
    return dict(_LINK_TYPES)


BUILTIN_LINK_TYPES = (SerialLink, LPC21ISPLink)

for _cls in BUILTIN_LINK_TYPES:
    register_link_type(_cls)


def make_link(link_type: str, args: Optional[Mapping[str, Any]] = None) -> Link:
    """
    Construct a link from its type tag and constructor arguments.

    Raises:
        LinkConfigError: If the type is unknown or the arguments are rejected
    """
    cls = _LINK_TYPES.get(link_type)
    if cls is None:
        raise LinkConfigError(f"unknown link type '{link_type}'")
    if args is not None and not isinstance(args, Mapping):
        raise LinkConfigError(f"arguments for {link_type} link must be a mapping, not {args!r}")
    try:
        return cls(**dict(args or {}))
    except TypeError as e:
        raise LinkConfigError(f"bad arguments for {link_type} link: {e}") from e


class LinkSet(Mapping):
    """
    Lazily constructed set of named links.

    Links are built on first access and kept for the rest of the run;
    ``close`` releases every link that was built.
    """

    def __init__(self, configs: Mapping[str, Mapping[str, Any]], source: str = "<memory>"):
        self._configs = dict(configs)
        self._links: Dict[str, Link] = {}
        self.source = source

    def __getitem__(self, name: str) -> Link:
        if name not in self._links:
            config = self._configs.get(name)
            if config is None:
                raise LinkConfigError(f"link '{name}' not configured in {self.source}")
            if not isinstance(config, Mapping) or "type" not in config:
                raise LinkConfigError(f"link '{name}' in {self.source} has no type")
            self._links[name] = make_link(config["type"], config.get("args"))
            logger.debug(f"Created {config['type']} link '{name}'")
        return self._links[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._configs)

    def __len__(self) -> int:
        return len(self._configs)

    def type_of(self, name: str) -> str:
        """Type tag of a configured link, without constructing it."""
        try:
            return self._configs[name]["type"]
        except (KeyError, TypeError) as e:
            raise LinkConfigError(f"link '{name}' not configured in {self.source}") from e

    @property
    def opened(self) -> Dict[str, Link]:
        """Links constructed so far."""
        return dict(self._links)

    def close(self) -> None:
        """Close every constructed link."""
        for name, link in self._links.items():
            logger.debug(f"Closing link '{name}'")
            link.close()
        self._links.clear()


def load_links(path: Union[str, Path]) -> Optional[LinkSet]:
    """
    Load link definitions from a YAML file.

    Returns:
        LinkSet, or None if the file does not exist

    Raises:
        LinkConfigError: If the file is not a mapping of link definitions
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None

    try:
        configs = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise LinkConfigError(f"cannot parse {path}: {e}") from e

    if not isinstance(configs, Mapping):
        raise LinkConfigError(f"{path} must map link names to definitions")

    logger.info(f"Loaded {len(configs)} link(s) from {path}")
    return LinkSet({str(k): v for k, v in configs.items()}, source=str(path))
