"""
Shared model definitions for Sortly
"""

from .responses import ApiResponse
from .sortly import (
    DetectTypeRequest,
    DetectTypeResponse,
    HistoryEntry,
    HistorySaveRequest,
    ParseRequest,
    ParseResponse,
    ParseResult,
    Row,
    SharedPayload,
    ShareResponse,
    SortDataset,
    SortDirection,
    SortRequest,
    SortResponse,
    SortRule,
    SortType,
    SortTypeAnalysis,
)

__all__ = [
    "ApiResponse",
    "Row",
    "SortType",
    "SortDirection",
    "SortRule",
    "ParseResult",
    "SharedPayload",
    "SortDataset",
    "HistoryEntry",
    "SortTypeAnalysis",
    "ParseRequest",
    "ParseResponse",
    "DetectTypeRequest",
    "DetectTypeResponse",
    "SortRequest",
    "SortResponse",
    "ShareResponse",
    "HistorySaveRequest",
]
