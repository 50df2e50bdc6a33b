"""
Device Communication Package

Links to devices under test: serial byte channels and flashing tools.

Modules:
    transport_base: Abstract link interface and mock link
    serial_transport: Serial port link (pyserial)
    flasher_transport: lpc21isp upload link
    links: Link registry and YAML link definitions

Example usage:
    from hil_harness.communication import load_links

    links = load_links("tests/hardware/board_links.yml")
    links["device"].upload("bin/test-firmware.bin")
    links["main"].write(b"\\x08\\x00\\x00\\x00")
    links.close()
"""

from .transport_base import Link, LinkInfo, MockLink
from .serial_transport import SerialLink
from .flasher_transport import LPC21ISPLink
from .links import (
    BUILTIN_LINK_TYPES,
    LINK_FILE,
    LinkSet,
    link_types,
    load_links,
    make_link,
    register_link_type,
)

__all__ = [
    # Links
    "Link",
    "LinkInfo",
    "MockLink",
    "SerialLink",
    "LPC21ISPLink",
    # Configuration
    "BUILTIN_LINK_TYPES",
    "LINK_FILE",
    "LinkSet",
    "link_types",
    "load_links",
    "make_link",
    "register_link_type",
]
