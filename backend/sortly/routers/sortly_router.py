"""
Sortly Router
Parse / type detection / sort / share-token / history endpoints
"""

import asyncio
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, status

from shared.config.settings import ApplicationSettings, get_settings
from shared.exceptions.sortly import HistoryStoreError, ParseEmptyInputError, ShareDecodeError
from shared.models.sortly import (
    DetectTypeRequest,
    DetectTypeResponse,
    HistoryEntry,
    HistorySaveRequest,
    ParseRequest,
    ParseResponse,
    SharedPayload,
    ShareResponse,
    SortDataset,
    SortRequest,
    SortResponse,
)
from shared.utils.app_logger import get_logger
from sortly.services.compression import ZlibTextCompressor
from sortly.services.history_store import HistoryStore
from sortly.services.rule_editor import SortRuleEditor
from sortly.services.share_codec import ShareCodec, build_share_url
from sortly.services.sorter import MultiKeySorter
from sortly.services.tabular_parser import TabularParser
from sortly.services.type_inference import SortTypeInferenceService

logger = get_logger(__name__)

router = APIRouter(prefix="/sortly", tags=["sortly"])

INVALID_LINK_MESSAGE = "This link is invalid or the data could not be decoded."


def get_share_codec(settings: ApplicationSettings = Depends(get_settings)) -> ShareCodec:
    """공유 코덱 의존성 (압축 해제 크기 제한 포함)"""
    return ShareCodec(ZlibTextCompressor(max_output_bytes=settings.sortly.max_share_bytes))


def get_history_store(request: Request) -> HistoryStore:
    """히스토리 저장소 의존성 (lifespan에서 생성)"""
    return request.app.state.history_store


@router.post("/parse", response_model=ParseResponse)
async def parse_text(
    request: ParseRequest, settings: ApplicationSettings = Depends(get_settings)
) -> ParseResponse:
    """
    붙여넣은 텍스트를 컬럼 + 행으로 파싱합니다.

    - 구분자 자동 감지: tab > comma > pipe > semicolon
    - 한 줄 입력은 "Value" 단일 컬럼으로 처리
    - 첫 번째 컬럼 기준 오름차순 규칙이 기본으로 추가됩니다
    """
    size = len(request.text.encode("utf-8"))
    if size > settings.sortly.max_paste_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Paste is {size} bytes; the limit is {settings.sortly.max_paste_bytes}",
        )

    result = await asyncio.to_thread(TabularParser.parse, request.text)
    if result is None:
        error = ParseEmptyInputError()
        logger.info(f"Rejected paste: {error.code}")
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=error.message)

    trimmed = request.text.strip()
    delimiter = (
        TabularParser.detect_delimiter(trimmed) if len(TabularParser.split_lines(trimmed)) > 1 else None
    )
    dataset = SortDataset.from_parse_result(result, SortRuleEditor.initial_rules(result))
    logger.info(f"Parsed dataset {dataset.id}: {len(result.rows)} rows x {len(result.columns)} columns")
    return ParseResponse(dataset=dataset, delimiter=delimiter)


@router.post("/detect-type", response_model=DetectTypeResponse)
async def detect_type(request: DetectTypeRequest) -> DetectTypeResponse:
    analysis = SortTypeInferenceService.analyze_column(request.rows, request.column)
    return DetectTypeResponse(column=request.column, type=analysis.type, analysis=analysis)


@router.post("/sort", response_model=SortResponse)
async def sort_rows(request: SortRequest) -> SortResponse:
    rows = await asyncio.to_thread(MultiKeySorter.sort_rows, request.rows, request.rules)
    return SortResponse(rows=rows)


@router.post("/share", response_model=ShareResponse)
async def create_share_link(
    payload: SharedPayload,
    codec: ShareCodec = Depends(get_share_codec),
    settings: ApplicationSettings = Depends(get_settings),
) -> ShareResponse:
    """정렬된 데이터셋을 URL-safe 토큰으로 인코딩합니다 (서버 저장 없음)"""
    try:
        token = await codec.encode_dataset(payload)
    except (TypeError, ValueError) as e:
        logger.error(f"Share encoding failed: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Share encoding failed: {str(e)}",
        )

    logger.info(f"Created share token ({len(token)} chars) for {len(payload.rows)} rows")
    return ShareResponse(token=token, url=build_share_url(token, settings.sortly.public_base_url))


@router.get("/s/{token:path}", response_model=SharedPayload)
async def open_share_link(token: str, codec: ShareCodec = Depends(get_share_codec)) -> SharedPayload:
    """공유 토큰을 디코딩하고 규칙대로 정렬된 행을 반환합니다"""
    try:
        payload = await codec.decode_shared_dataset(token)
    except ShareDecodeError as e:
        logger.warning(f"{e.code} at stage {e.stage}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_LINK_MESSAGE)

    return payload.model_copy(
        update={"rows": MultiKeySorter.sort_rows(payload.rows, payload.sort_rules)}
    )


@router.get("/history", response_model=List[HistoryEntry])
async def list_history(store: HistoryStore = Depends(get_history_store)) -> List[HistoryEntry]:
    try:
        return await store.load_all()
    except HistoryStoreError as e:
        logger.error(str(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)


@router.post("/history", response_model=HistoryEntry, status_code=status.HTTP_201_CREATED)
async def save_history(
    request: HistorySaveRequest, store: HistoryStore = Depends(get_history_store)
) -> HistoryEntry:
    entry = HistoryStore.snapshot(request.dataset, label=request.label)
    try:
        await store.save(entry)
    except HistoryStoreError as e:
        logger.error(str(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    return entry


@router.delete("/history/{entry_id}")
async def delete_history_entry(
    entry_id: str, store: HistoryStore = Depends(get_history_store)
) -> Dict[str, Any]:
    try:
        deleted = await store.delete(entry_id)
    except HistoryStoreError as e:
        logger.error(str(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"History entry '{entry_id}' not found")
    return {"deleted": entry_id}


@router.delete("/history")
async def clear_history(store: HistoryStore = Depends(get_history_store)) -> Dict[str, Any]:
    try:
        await store.clear()
    except HistoryStoreError as e:
        logger.error(str(e))
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=e.message)
    return {"cleared": True}
