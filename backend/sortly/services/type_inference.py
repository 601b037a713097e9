"""
Sort Type Inference Service
Samples a column's values and guesses a comparison strategy
"""

from typing import Dict, List, Optional, Sequence

from shared.models.sortly import Row, SortType, SortTypeAnalysis
from shared.utils.app_logger import get_logger
from sortly.services.comparators import looks_date_like, looks_numeric

logger = get_logger(__name__)


class SortTypeInferenceService:
    """
    Heuristic sort-type detection.

    Order of checks:
    1. date    - more than 60% of samples parse as dates and contain - / .
    2. numeric - more than 70% of samples parse as finite numbers
    3. alpha   - fallback
    """

    SAMPLE_SIZE = 20
    DATE_THRESHOLD = 0.6
    NUMERIC_THRESHOLD = 0.7

    @classmethod
    def sample_values(cls, rows: Sequence[Row], column: str) -> List[str]:
        """Trimmed non-blank values of `column` from the first SAMPLE_SIZE rows"""
        samples = [(row.get(column) or "").strip() for row in rows[: cls.SAMPLE_SIZE]]
        return [value for value in samples if value]

    @classmethod
    def analyze_column(cls, rows: Sequence[Row], column: str) -> SortTypeAnalysis:
        samples = cls.sample_values(rows, column)
        if not samples:
            return SortTypeAnalysis(column=column, type=SortType.ALPHA)

        total = len(samples)
        date_ratio = sum(1 for value in samples if looks_date_like(value)) / total
        numeric_ratio = sum(1 for value in samples if looks_numeric(value)) / total

        if date_ratio > cls.DATE_THRESHOLD:
            inferred = SortType.DATE
        elif numeric_ratio > cls.NUMERIC_THRESHOLD:
            inferred = SortType.NUMERIC
        else:
            inferred = SortType.ALPHA

        return SortTypeAnalysis(
            column=column,
            type=inferred,
            sample_count=total,
            date_ratio=date_ratio,
            numeric_ratio=numeric_ratio,
        )

    @classmethod
    def detect_sort_type(cls, rows: Sequence[Row], column: str) -> SortType:
        """Auto-detect the best SortType for a column by sampling values"""
        return cls.analyze_column(rows, column).type

    @classmethod
    def infer_columns(
        cls, rows: Sequence[Row], columns: Optional[Sequence[str]] = None
    ) -> Dict[str, SortType]:
        """Detect a SortType for every column (defaults to keys of the first row)"""
        if columns is None:
            columns = list(rows[0].keys()) if rows else []
        result = {column: cls.detect_sort_type(rows, column) for column in columns}
        logger.debug(f"Inferred sort types: {result}")
        return result
