"""Temporal access statistics for web server logs."""

from .analyzer import AccessSummary, LogAnalyzer
from .reader import (
    AccessRecord,
    ExhaustedError,
    LogfileReader,
    LogReaderError,
    MalformedRecordError,
)

__version__ = "0.1.0"
