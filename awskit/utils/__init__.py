"""Utility modules for awskit.

Input file loading and shared type definitions.
"""

from awskit.utils.file_processor import FileProcessor, load_records
from awskit.utils.types import Record

__all__ = [
    "FileProcessor",
    "load_records",
    "Record",
]
