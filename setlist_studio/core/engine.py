"""
Setlist Studio Recommendation Engine
다음 곡 추천 서비스 (카탈로그 조회 -> 스코어링 -> 랭킹)
"""

import logging
from typing import AbstractSet, List, Optional

from .catalog import SongCatalogRepository
from .models import RecommendationResult, SongId
from .ranking import DEFAULT_MAX_RESULTS, rank_candidates
from .scoring import CompatibilityScorer
from ..utils.timing import Timer

logger = logging.getLogger(__name__)


class RecommendationService:
    """
    다음 곡 추천 서비스

    추천 파이프라인:
    1. 사용자 카탈로그 조회 (유일한 I/O)
    2. 기준 곡 확인 (없거나 다른 사용자 소유면 빈 리스트)
    3. 후보 제외 + 호환성 스코어링 + 정렬
    4. Top-K 반환

    상태를 갖지 않으므로 동시 호출에 안전합니다.
    """

    def __init__(
        self,
        catalog: SongCatalogRepository,
        scorer: Optional[CompatibilityScorer] = None,
        default_max_results: int = DEFAULT_MAX_RESULTS
    ):
        """
        Args:
            catalog: 사용자 소유 곡만 돌려주는 저장소
            scorer: 호환성 스코어러 (없으면 기본 가중치)
            default_max_results: max_results 미지정 시 반환 개수
        """
        self.catalog = catalog
        self.scorer = scorer or CompatibilityScorer()
        self.default_max_results = default_max_results

        logger.info(
            f"RecommendationService initialized: "
            f"weights={self.scorer.weights}, default_max_results={default_max_results}"
        )

    def get_next_song_recommendations(
        self,
        current_song_id: SongId,
        user_id: str,
        exclude_song_ids: Optional[AbstractSet[SongId]] = None,
        max_results: Optional[int] = None
    ) -> List[RecommendationResult]:
        """
        현재 곡 다음에 올 곡 추천

        Args:
            current_song_id: 현재 곡 ID
            user_id: 요청 사용자 ID
            exclude_song_ids: 제외할 곡 ID (이미 셋리스트에 있는 곡 등)
            max_results: 최대 반환 개수 (None이면 기본값)

        Returns:
            RecommendationResult 리스트 (기준 곡이 없으면 빈 리스트)

        Raises:
            CatalogUnavailableError: 카탈로그 조회 실패 (그대로 전파)
        """
        if max_results is None:
            max_results = self.default_max_results

        with Timer("get_next_song_recommendations", log=logger) as timer:
            songs = self.catalog.get_songs_for_user(user_id)

            reference = next((s for s in songs if s.song_id == current_song_id), None)
            if reference is None:
                logger.info(f"Reference song not found for user {user_id}: {current_song_id}")
                return []

            # 호출자의 집합은 수정하지 않음
            excluded = set(exclude_song_ids or ())
            excluded.add(current_song_id)

            results = rank_candidates(
                reference=reference,
                candidates=songs,
                exclude_ids=excluded,
                max_results=max_results,
                scorer=self.scorer
            )

        logger.debug(
            f"Recommendations for user={user_id} song={current_song_id}: "
            f"catalog={len(songs)}, excluded={len(excluded)}, returned={len(results)}, "
            f"elapsed={timer.elapsed:.4f}s"
        )
        return results
