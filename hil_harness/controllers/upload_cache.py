"""
Upload Cache

Prevents redundant device uploads, which would otherwise quickly wear down
their flash memory. One cache is created per test run and handed to every
board driver; a (device, program) pair is flashed at most once per cache.

Usage:
    cache = UploadCache()
    cache.upload_program("/dev/ttyUSB0", "bin/test.bin",
                         lambda: link.upload("bin/test.bin"))
"""

import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, Set, Tuple, Union

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str]


def program_identity(program: Union[str, os.PathLike]) -> str:
    """Normalise a program path so equivalent spellings share one entry."""
    return str(Path(program).resolve())


class UploadCache:
    """
    Thread-safe record of delivered (device, program) pairs.

    Check-and-mark is atomic per pair: a second caller for the same pair
    waits for the first upload to finish, then either skips it (success) or
    performs it itself (the first attempt failed).
    """

    def __init__(self):
        self._delivered: Set[CacheKey] = set()
        self._key_locks: Dict[CacheKey, threading.Lock] = {}
        self._lock = threading.Lock()

    def _key_lock(self, key: CacheKey) -> threading.Lock:
        with self._lock:
            return self._key_locks.setdefault(key, threading.Lock())

    def is_delivered(self, device: str, program: Union[str, os.PathLike]) -> bool:
        """Check whether a pair has been delivered."""
        with self._lock:
            return (device, program_identity(program)) in self._delivered

    def upload_program(self, device: str, program: Union[str, os.PathLike],
                       perform: Callable[[], None]) -> bool:
        """
        Run ``perform`` unless this program was already delivered to device.

        The pair is marked delivered only after ``perform`` returns; if it
        raises, the exception propagates and the pair stays unmarked.

        Returns:
            True if ``perform`` ran, False if the upload was skipped
        """
        key = (device, program_identity(program))

        with self._key_lock(key):
            with self._lock:
                if key in self._delivered:
                    logger.info(f"Skipping upload of {program} to {device}: already delivered")
                    return False

            perform()

            with self._lock:
                self._delivered.add(key)
        logger.debug(f"Marked {program} delivered to {device}")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._delivered)

    def __contains__(self, key: CacheKey) -> bool:
        device, program = key
        return self.is_delivered(device, program)
