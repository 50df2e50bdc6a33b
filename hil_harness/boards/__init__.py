"""
Reference board fixtures.
"""

from .breadboard import Breadboard, TERMINATIONS
from .lpc1100_mmio import LPC1100MMIO, OPERATIONS

__all__ = [
    "Breadboard",
    "TERMINATIONS",
    "LPC1100MMIO",
    "OPERATIONS",
]
