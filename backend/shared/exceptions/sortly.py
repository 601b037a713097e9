"""
Sortly 도메인 예외
파싱, 공유 토큰 디코딩, 작업 공간 상태 전이, 히스토리 저장 관련 예외
"""

from typing import Optional

from .base import DomainException


class SortlyException(DomainException):
    """Sortly 기본 예외"""
    pass


class ParseEmptyInputError(SortlyException):
    """붙여넣은 텍스트에 사용할 수 있는 내용이 없음"""

    def __init__(self, message: str = "Nothing to parse. Paste more data."):
        super().__init__(message=message, code="PARSE_EMPTY_INPUT")


class ShareDecodeError(SortlyException):
    """공유 토큰 디코딩 실패 (base64url, inflate, UTF-8, JSON, 필수 필드)"""

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(
            message=f"Share decode failed: {message}",
            code="SHARE_DECODE_FAILURE",
            details={"stage": stage} if stage else {},
        )
        self.stage = stage


class InvalidTransitionError(SortlyException):
    """작업 공간 상태 전이 오류"""

    def __init__(self, state: str, event: str):
        super().__init__(
            message=f"Event '{event}' is not allowed in state '{state}'",
            code="INVALID_TRANSITION",
            details={"state": state, "event": event},
        )


class HistoryStoreError(SortlyException):
    """히스토리 저장소 오류"""

    def __init__(self, message: str):
        super().__init__(message=f"History store error: {message}", code="HISTORY_STORE_ERROR")
