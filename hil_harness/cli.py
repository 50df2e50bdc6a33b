"""
Command line entry point.

Examples:
  python -m hil_harness links -f tests/hardware/board_links.yml
  python -m hil_harness upload -f tests/hardware/board_links.yml bin/test-firmware.bin
  python -m hil_harness upload -f tests/hardware/board_links.yml -l device2 bin/test.bin
"""

import argparse
import logging
import sys
from typing import List, Optional

from .communication.links import LINK_FILE, load_links
from .errors import HarnessError
from .utils.logger import setup_logger

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="hil_harness",
        description="Hardware-in-the-loop firmware test harness",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Examples:", 1)[1] if __doc__ else None,
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--log-dir",
        metavar="DIR",
        help="Directory for log files (default: ~/.hil_harness/logs)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    links = commands.add_parser("links", help="List configured links")
    links.add_argument("-f", "--file", default=LINK_FILE, help="Link definition file")

    upload = commands.add_parser("upload", help="Flash a program through a link")
    upload.add_argument("-f", "--file", default=LINK_FILE, help="Link definition file")
    upload.add_argument("-l", "--link", default="device", help="Upload link name (default: device)")
    upload.add_argument("program", help="Firmware image to flash")

    return parser.parse_args(argv)


def cmd_links(args) -> int:
    links = load_links(args.file)
    if links is None:
        logger.error(f"No link file at {args.file}")
        return 1
    for name in links:
        print(f"{name}: {links.type_of(name)}")
    return 0


def cmd_upload(args) -> int:
    links = load_links(args.file)
    if links is None:
        logger.error(f"No link file at {args.file}")
        return 1
    try:
        link = links[args.link]
        try:
            link.upload(args.program)
        except NotImplementedError as e:
            logger.error(str(e))
            return 1
    finally:
        links.close()
    print(f"Uploaded {args.program} via {args.link}")
    return 0


COMMANDS = {
    "links": cmd_links,
    "upload": cmd_upload,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logger(
        log_level=logging.DEBUG if args.verbose else logging.INFO,
        log_dir=args.log_dir,
    )

    try:
        return COMMANDS[args.command](args)
    except HarnessError as e:
        logger.error(f"[{e.category.value}] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
