"""
Setlist Studio Health Check API
헬스 체크 라우터
"""

from typing import Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    engine_version: str
    demo_mode: bool
    catalog_loaded: bool
    catalog_song_count: int
    catalog_user_count: int
    weights: Dict[str, float]


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    서버 상태 확인

    - 엔진 버전 및 스코어링 가중치
    - 카탈로그 로드 상태 (곡 수, 사용자 수)
    """
    state = request.app.state
    config = state.config

    catalog = getattr(state, "catalog", None)
    catalog_loaded = catalog is not None
    service = getattr(state, "service", None)

    weights: Dict[str, float] = {}
    if service is not None:
        w = service.scorer.weights
        weights = {"tempo": w.tempo, "genre": w.genre, "key": w.key, "difficulty": w.difficulty}

    return HealthResponse(
        status="ok" if catalog_loaded and service is not None else "degraded",
        engine_version=config.ENGINE_VERSION,
        demo_mode=config.DEMO_MODE,
        catalog_loaded=catalog_loaded,
        catalog_song_count=catalog.song_count if catalog_loaded else 0,
        catalog_user_count=catalog.user_count if catalog_loaded else 0,
        weights=weights
    )
