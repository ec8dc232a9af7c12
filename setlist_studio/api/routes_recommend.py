"""
Setlist Studio Recommendation API
다음 곡 추천 라우터
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Header, HTTPException, Query, Request

from ..core.catalog import CatalogUnavailableError
from ..core.models import RecommendationResult
from ..schemas.common import ErrorResponse
from ..schemas.recommend import RecommendItem, RecommendResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recommend"])


def _to_item(rank: int, result: RecommendationResult) -> RecommendItem:
    song = result.song
    return RecommendItem(
        rank=rank,
        song_id=result.song_id,
        title=song.title if song else None,
        artist=song.artist if song else None,
        genre=song.genre if song else None,
        bpm=song.tempo_bpm if song else None,
        musical_key=song.musical_key if song else None,
        duration_seconds=song.duration_seconds if song else None,
        difficulty_rating=song.difficulty_rating if song else None,
        compatibility_score=result.compatibility_score,
        compatibility_details=list(result.compatibility_details)
    )


@router.get(
    "/recommend",
    response_model=RecommendResponse,
    responses={
        503: {"model": ErrorResponse, "description": "Catalog unavailable"}
    }
)
async def recommend(
    request: Request,
    song_id: int = Query(..., description="현재 곡 ID"),
    exclude: List[int] = Query(default=[], description="제외할 곡 ID (반복 가능)"),
    k: Optional[int] = Query(default=None, description="추천 개수 (0 이하면 빈 결과)"),
    user_id: str = Header(..., alias="X-User-Id", min_length=1, description="인증 계층이 확인한 사용자 ID")
) -> RecommendResponse:
    """
    다음 곡 추천

    - song_id: 현재 곡 ID (다른 사용자 곡이거나 없으면 빈 결과)
    - exclude: 이미 셋리스트에 있는 곡 ID
    - k: 추천 개수 (기본값 DEFAULT_MAX_RESULTS, 상한 MAX_RESULTS_LIMIT)
    """
    state = request.app.state
    config = state.config

    if getattr(state, "service", None) is None:
        raise HTTPException(status_code=503, detail="Recommendation service not initialized")

    max_results = config.DEFAULT_MAX_RESULTS if k is None else min(k, config.MAX_RESULTS_LIMIT)

    try:
        results = state.service.get_next_song_recommendations(
            current_song_id=song_id,
            user_id=user_id,
            exclude_song_ids=set(exclude),
            max_results=max_results
        )
    except CatalogUnavailableError as e:
        logger.warning(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Recommendation error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    items = [_to_item(rank, result) for rank, result in enumerate(results, 1)]

    return RecommendResponse(
        engine_version=config.ENGINE_VERSION,
        seed_id=song_id,
        total=len(items),
        items=items
    )
