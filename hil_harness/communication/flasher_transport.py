"""
LPC21ISP Flasher Link

Calls into the lpc21isp command-line tool to flash an LPC ARM microcontroller
from a serial port. The tool must be in the user's PATH. Retries are left to
the tool itself (``-tryN``); a failed run is reported once and not repeated.
"""

import logging
import os
import subprocess
from typing import List

from .transport_base import Link, LinkInfo
from ..errors import UploadFailure


logger = logging.getLogger(__name__)


FLASHER_TOOL = "lpc21isp"
DEFAULT_BAUDRATE = 115200
DEFAULT_RETRIES = 3


class LPC21ISPLink(Link):
    """Program upload link backed by lpc21isp."""

    NAME = "lpc21isp"

    def __init__(self, port: str, oscillator_frequency: int,
                 baud_rate: int = DEFAULT_BAUDRATE, retries: int = DEFAULT_RETRIES,
                 tool: str = FLASHER_TOOL):
        self._port = port
        self.oscillator_frequency = oscillator_frequency
        self.baud_rate = baud_rate
        self.retries = retries
        self.tool = tool

    @property
    def port(self) -> str:
        return self._port

    @property
    def info(self) -> LinkInfo:
        return LinkInfo(name=self.NAME, port=self._port, baud_rate=self.baud_rate)

    def command_arguments(self, program: str) -> List[str]:
        """Build the flasher command line for ``program``."""
        return [
            self.tool, "-control", f"-try{self.retries}", "-bin",
            os.fspath(program), self._port,
            str(self.baud_rate), str(self.oscillator_frequency),
        ]

    def upload(self, program: str) -> None:
        command = self.command_arguments(program)
        logger.info(f"Flashing {program} via {self._port}")
        logger.debug(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            logger.error(f"Cannot run {self.tool}: {e}")
            raise UploadFailure(os.fspath(program), str(e)) from e

        if result.returncode != 0:
            logger.error(f"Upload of {program} failed with exit code {result.returncode}")
            raise UploadFailure(os.fspath(program), result.stdout, result.returncode)

        logger.info(f"Uploaded {program} to {self._port}")
