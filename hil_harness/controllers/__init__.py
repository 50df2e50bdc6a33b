"""
Controllers package - test-side orchestration of boards and uploads.
"""

from .upload_cache import UploadCache, program_identity
from .board_driver import BoardDriver, EventListBoard, TextBoard

__all__ = [
    "UploadCache",
    "program_identity",
    "BoardDriver",
    "EventListBoard",
    "TextBoard",
]
