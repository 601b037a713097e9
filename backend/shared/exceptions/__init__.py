"""
도메인 예외 정의
도메인별로 구체적인 예외를 정의하여 명확한 에러 처리
"""

from .base import DomainException
from .sortly import (
    HistoryStoreError,
    InvalidTransitionError,
    ParseEmptyInputError,
    ShareDecodeError,
    SortlyException,
)

__all__ = [
    "DomainException",
    "SortlyException",
    "ParseEmptyInputError",
    "ShareDecodeError",
    "InvalidTransitionError",
    "HistoryStoreError",
]
