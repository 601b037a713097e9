"""
Sortly dataset models.

Rows are flat string-keyed records. Wire field names are camelCase
(`sortRules`, `createdAt`) so payloads stay compatible with share tokens
produced by the browser client; Python attributes are snake_case.
"""

from __future__ import annotations

import time
import uuid
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

Row = Dict[str, str]


def now_millis() -> int:
    """Epoch milliseconds, the timestamp unit used in payloads."""
    return int(time.time() * 1000)


def new_dataset_id() -> str:
    return uuid.uuid4().hex


class SortType(str, Enum):
    """Supported comparison strategies"""

    ALPHA = "alpha"
    NUMERIC = "numeric"
    DATE = "date"
    LENGTH = "length"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortRule(BaseModel):
    """A single active sort rule. Earlier rules in a list have higher priority."""

    column: str = Field(..., description="Column key being sorted")
    direction: SortDirection = Field(default=SortDirection.ASC)
    type: SortType = Field(default=SortType.ALPHA, description="How values are compared")

    model_config = ConfigDict(extra="ignore")


class ParseResult(BaseModel):
    """Columns (first-seen order) and rows produced by the tabular parser"""

    columns: List[str] = Field(default_factory=list)
    rows: List[Row] = Field(default_factory=list)


class SharedPayload(BaseModel):
    """What a share token carries"""

    columns: List[str]
    rows: List[Row]
    sort_rules: List[SortRule] = Field(default_factory=list, alias="sortRules")
    label: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        """JSON-compatible dict; `label` is dropped when unset."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SortDataset(BaseModel):
    """The full dataset the workspace passes around"""

    id: str = Field(default_factory=new_dataset_id)
    columns: List[str] = Field(default_factory=list)
    rows: List[Row] = Field(default_factory=list)
    sort_rules: List[SortRule] = Field(default_factory=list, alias="sortRules")
    label: Optional[str] = None
    created_at: int = Field(default_factory=now_millis, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @classmethod
    def from_parse_result(
        cls, result: ParseResult, sort_rules: Optional[List[SortRule]] = None
    ) -> "SortDataset":
        return cls(
            columns=list(result.columns),
            rows=[dict(row) for row in result.rows],
            sort_rules=list(sort_rules or []),
        )


class HistoryEntry(BaseModel):
    """Snapshot of a dataset persisted by the history store"""

    id: str
    label: str
    columns: List[str] = Field(default_factory=list)
    rows: List[Row] = Field(default_factory=list)
    sort_rules: List[SortRule] = Field(default_factory=list, alias="sortRules")
    created_at: int = Field(default_factory=now_millis, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_dataset(self) -> SortDataset:
        return SortDataset(
            id=self.id,
            columns=list(self.columns),
            rows=[dict(row) for row in self.rows],
            sort_rules=list(self.sort_rules),
            label=self.label,
            created_at=self.created_at,
        )


class SortTypeAnalysis(BaseModel):
    """Diagnostics for a single column's sort-type inference"""

    column: str
    type: SortType
    sample_count: int = 0
    date_ratio: float = Field(default=0.0, ge=0.0, le=1.0)
    numeric_ratio: float = Field(default=0.0, ge=0.0, le=1.0)


# ---------------------------------------------------------------------------
# HTTP request / response models
# ---------------------------------------------------------------------------


class ParseRequest(BaseModel):
    text: str = Field(..., description="Raw pasted text (TSV, CSV, pipe or semicolon separated)")


class ParseResponse(BaseModel):
    dataset: SortDataset
    delimiter: Optional[str] = Field(default=None, description="Detected delimiter; null for single-line input")


class DetectTypeRequest(BaseModel):
    rows: List[Row]
    column: str


class DetectTypeResponse(BaseModel):
    column: str
    type: SortType
    analysis: Optional[SortTypeAnalysis] = None


class SortRequest(BaseModel):
    rows: List[Row]
    rules: List[SortRule] = Field(default_factory=list)


class SortResponse(BaseModel):
    rows: List[Row]


class ShareResponse(BaseModel):
    token: str
    url: str


class HistorySaveRequest(BaseModel):
    dataset: SortDataset
    label: Optional[str] = None
