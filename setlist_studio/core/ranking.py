"""
Setlist Studio Ranking
후보 제외 -> 점수 계산 -> 정렬 -> Top-K
"""

from typing import AbstractSet, Iterable, List, Optional, Tuple

from .models import RecommendationResult, SongAttributeView, SongId
from .scoring import CompatibilityScorer


DEFAULT_MAX_RESULTS = 5


def _tie_break_key(song_id: SongId) -> Tuple:
    """
    동점일 때의 보조 정렬 키
    숫자 id는 숫자 순서, 그 외 타입은 (타입 이름, 문자열) 순서로 비교해
    서로 비교할 수 없는 id가 섞여도 항상 같은 순서를 보장합니다.
    """
    if isinstance(song_id, (int, float)) and not isinstance(song_id, bool):
        return (0, song_id, "")
    return (1, type(song_id).__name__, str(song_id))


def rank_candidates(
    reference: SongAttributeView,
    candidates: Iterable[SongAttributeView],
    exclude_ids: Optional[AbstractSet[SongId]] = None,
    max_results: int = DEFAULT_MAX_RESULTS,
    scorer: Optional[CompatibilityScorer] = None
) -> List[RecommendationResult]:
    """
    후보 곡 랭킹

    Args:
        reference: 기준 곡
        candidates: 같은 사용자 소유의 후보 곡들
        exclude_ids: 제외할 곡 ID (기준 곡 ID는 항상 제외)
        max_results: 최대 반환 개수 (0 이하면 빈 리스트)
        scorer: 호환성 스코어러 (없으면 기본 가중치)

    Returns:
        점수 내림차순, 동점이면 song_id 오름차순(숫자 먼저, 그 외 타입 이름순)으로 정렬된 결과
    """
    if max_results <= 0:
        return []

    scorer = scorer or CompatibilityScorer()
    excluded = set(exclude_ids or ())
    excluded.add(reference.song_id)

    results: List[RecommendationResult] = []
    for cand in candidates:
        if cand.song_id in excluded:
            continue
        compat = scorer.score(reference, cand)
        results.append(RecommendationResult(
            song_id=cand.song_id,
            compatibility_score=compat.score,
            compatibility_details=compat.details,
            song=cand
        ))

    results.sort(key=lambda r: (-r.compatibility_score, _tie_break_key(r.song_id)))
    return results[:max_results]
