"""
Sortly Service
붙여넣은 표 데이터의 파싱, 다중 컬럼 정렬, 공유 토큰 생성 서비스

Port: 8010
"""

from dotenv import load_dotenv

load_dotenv()  # Load .env file

from contextlib import asynccontextmanager
from typing import Any, Dict

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.config.settings import get_settings
from shared.models.responses import ApiResponse
from shared.utils.app_logger import configure_logging, get_logger
from sortly.routers.sortly_router import router as sortly_router
from sortly.services.history_store import HistoryStore
from sortly.services.kv_store import create_key_value_store

SERVICE_NAME = "sortly"
SERVICE_VERSION = "0.1.0"

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """애플리케이션 시작/종료 이벤트"""
    settings = get_settings()
    configure_logging(settings.services.log_level)
    logger.info("Sortly Service 시작")

    store = create_key_value_store(settings)
    app.state.kv_store = store
    app.state.history_store = HistoryStore(
        store,
        key=settings.sortly.history_key,
        max_entries=settings.sortly.history_max_entries,
    )
    logger.info(f"History store ready ({settings.sortly.store_backend.value} backend)")

    yield

    await store.close()
    logger.info("Sortly Service 종료")


app = FastAPI(
    title="Sortly Service",
    description="Paste tabular text, sort it by multiple columns, share it as a link",
    version=SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().services.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 라우터 등록
app.include_router(sortly_router, prefix="/api/v1")


@app.get("/")
async def root() -> Dict[str, Any]:
    """루트 엔드포인트"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "description": "표 데이터 파싱, 다중 정렬, 공유 링크 서비스",
        "endpoints": {
            "health": "/health",
            "parse": "/api/v1/sortly/parse",
            "detect_type": "/api/v1/sortly/detect-type",
            "sort": "/api/v1/sortly/sort",
            "share": "/api/v1/sortly/share",
            "open_share": "/api/v1/sortly/s/{token}",
            "history": "/api/v1/sortly/history",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check() -> Dict[str, Any]:
    """서비스 상태 확인"""
    return ApiResponse.health_check(
        service_name=SERVICE_NAME, version=SERVICE_VERSION, description="표 정렬 및 공유 서비스"
    ).to_dict()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "sortly.main:app",
        host=settings.services.sortly_host,
        port=settings.services.sortly_port,
    )
