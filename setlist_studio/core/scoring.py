"""
Setlist Studio Scoring Utilities
다음 곡 호환성 점수 (템포 + 장르 + 키 + 난이도)
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from .models import CompatibilityResult, SongAttributeView


DEFAULT_TEMPO_DECAY_BPM = 60
DEFAULT_DIFFICULTY_DECAY = 4

DIFFICULTY_MIN = 1
DIFFICULTY_MAX = 5

# 점수는 소수 첫째 자리로 반올림되므로 컴포넌트 하나가 최소 0.5점은 움직여야 함
MIN_COMPONENT_WEIGHT = 0.005


@dataclass(frozen=True)
class ScoringWeights:
    """Component weights, each >= MIN_COMPONENT_WEIGHT, must sum to 1.0"""
    tempo: float = 0.35
    genre: float = 0.25
    key: float = 0.20
    difficulty: float = 0.20

    def __post_init__(self):
        values = (self.tempo, self.genre, self.key, self.difficulty)
        if any(v < MIN_COMPONENT_WEIGHT for v in values):
            raise ValueError(
                f"Scoring weights must each be at least {MIN_COMPONENT_WEIGHT}: {values}"
            )
        if abs(sum(values) - 1.0) > 1e-6:
            raise ValueError(f"Scoring weights must sum to 1.0, got {sum(values):.6f}")


DEFAULT_WEIGHTS = ScoringWeights()


# =============================================================================
# 기본 유틸리티 함수
# =============================================================================

def normalize_label(value: Optional[str]) -> Optional[str]:
    """비교용 라벨 정규화 (공백 제거 + 소문자), 비어 있으면 None"""
    if value is None:
        return None
    text = str(value).strip()
    return text.lower() if text else None


def _display(value: Optional[object]) -> str:
    if value is None:
        return "?"
    text = str(value).strip()
    return text if text else "?"


def _valid_bpm(bpm: Optional[int]) -> Optional[int]:
    # 0 이하는 미입력 취급
    if bpm is None or bpm <= 0:
        return None
    return int(bpm)


def _valid_difficulty(rating: Optional[int]) -> Optional[int]:
    # 1~5 범위 밖은 미입력 취급
    if rating is None or not DIFFICULTY_MIN <= rating <= DIFFICULTY_MAX:
        return None
    return int(rating)


def linear_proximity(a: float, b: float, decay: float) -> float:
    """
    차이가 0이면 1.0, decay 이상이면 0.0으로 선형 감소

    Args:
        a: 기준 값
        b: 비교 값
        decay: 점수가 0이 되는 차이

    Returns:
        0~1 근접도
    """
    return max(0.0, 1.0 - abs(a - b) / decay)


# =============================================================================
# 음악 이론 테이블 (설명 문구용, 점수에는 영향 없음)
# =============================================================================

RELATED_GENRE_PAIRS: List[Tuple[str, str]] = [
    ("rock", "alternative"),
    ("jazz", "blues"),
    ("pop", "funk"),
    ("electronic", "dance"),
    ("soul", "r&b"),
    ("country", "americana"),
    ("classical", "chamber"),
    ("reggae", "ska"),
]

# circle of fifths neighbours + relative minors
HARMONIC_NEIGHBOURS = {
    "c": {"g", "f", "am", "em"},
    "g": {"d", "c", "em", "bm"},
    "d": {"a", "g", "bm", "f#m"},
    "a": {"e", "d", "f#m", "c#m"},
    "e": {"b", "a", "c#m", "g#m"},
    "b": {"f#", "e", "g#m", "d#m"},
    "f#": {"c#", "b", "d#m", "a#m"},
    "f": {"c", "bb", "dm", "am"},
    "bb": {"f", "eb", "gm", "dm"},
    "eb": {"bb", "ab", "cm", "gm"},
    "ab": {"eb", "db", "fm", "cm"},
    "db": {"ab", "gb", "bbm", "fm"},
    "gb": {"db", "cb", "ebm", "bbm"},
    "cb": {"gb", "fb", "abm", "ebm"},
}

ENHARMONIC_PAIRS = [
    ("b", "cb"),
    ("e", "fb"),
    ("f#", "gb"),
    ("c#", "db"),
    ("g#", "ab"),
    ("d#", "eb"),
    ("a#", "bb"),
]


def are_related_genres(genre_a: str, genre_b: str) -> bool:
    """관련 장르 쌍 여부 (부분 문자열 매칭, 정규화된 입력)"""
    for left, right in RELATED_GENRE_PAIRS:
        if (left in genre_a and right in genre_b) or (right in genre_a and left in genre_b):
            return True
    return False


def are_harmonic_neighbours(key_a: str, key_b: str) -> bool:
    return key_b in HARMONIC_NEIGHBOURS.get(key_a, set()) or key_a in HARMONIC_NEIGHBOURS.get(key_b, set())


def are_enharmonic(key_a: str, key_b: str) -> bool:
    return (key_a, key_b) in ENHARMONIC_PAIRS or (key_b, key_a) in ENHARMONIC_PAIRS


# =============================================================================
# 컴포넌트 점수 (0~1)
# =============================================================================

def genre_component(reference_genre: Optional[str], candidate_genre: Optional[str]) -> float:
    ref = normalize_label(reference_genre)
    cand = normalize_label(candidate_genre)
    if ref is None or cand is None:
        return 0.0
    return 1.0 if ref == cand else 0.0


def tempo_component(
    reference_bpm: Optional[int],
    candidate_bpm: Optional[int],
    decay_bpm: float = DEFAULT_TEMPO_DECAY_BPM
) -> float:
    ref = _valid_bpm(reference_bpm)
    cand = _valid_bpm(candidate_bpm)
    if ref is None or cand is None:
        return 0.0
    return linear_proximity(ref, cand, decay_bpm)


def key_component(reference_key: Optional[str], candidate_key: Optional[str]) -> Optional[float]:
    """
    키 일치 점수
    한쪽이라도 키가 없으면 None (컴포넌트 자체를 합산에서 제외)
    """
    ref = normalize_label(reference_key)
    cand = normalize_label(candidate_key)
    if ref is None or cand is None:
        return None
    return 1.0 if ref == cand else 0.0


def difficulty_component(
    reference_rating: Optional[int],
    candidate_rating: Optional[int],
    decay: float = DEFAULT_DIFFICULTY_DECAY
) -> float:
    ref = _valid_difficulty(reference_rating)
    cand = _valid_difficulty(candidate_rating)
    if ref is None or cand is None:
        return 0.0
    return linear_proximity(ref, cand, decay)


# =============================================================================
# 설명 문구
# =============================================================================

def describe_tempo(reference_bpm: Optional[int], candidate_bpm: Optional[int]) -> str:
    ref = _valid_bpm(reference_bpm)
    cand = _valid_bpm(candidate_bpm)
    if ref is None or cand is None:
        return f"Tempo: {_display(ref)}→{_display(cand)} BPM, tempo unknown"

    diff = abs(ref - cand)
    if diff <= 15:
        note = "smooth flow"
    elif diff <= 30:
        note = "moderate change"
    else:
        note = "noticeable jump"
    return f"Tempo: {ref}→{cand} BPM, difference of {diff} ({note})"


def describe_genre(reference_genre: Optional[str], candidate_genre: Optional[str]) -> str:
    ref = normalize_label(reference_genre)
    cand = normalize_label(candidate_genre)
    shown = f"{_display(reference_genre)}→{_display(candidate_genre)}"
    if ref is None or cand is None:
        return f"Genre: {shown}, genre unknown"
    if ref == cand:
        return f"Genre: both {_display(candidate_genre)}, match"
    if are_related_genres(ref, cand):
        return f"Genre: {shown}, related shift"
    return f"Genre: {shown}, genre shift"


def describe_key(reference_key: str, candidate_key: str) -> str:
    ref = normalize_label(reference_key)
    cand = normalize_label(candidate_key)
    if ref == cand:
        return f"Key: both {_display(candidate_key)}, match"

    shown = f"{_display(reference_key)}→{_display(candidate_key)}"
    if are_harmonic_neighbours(ref, cand):
        return f"Key: {shown}, harmonically compatible"
    if are_enharmonic(ref, cand):
        return f"Key: {shown}, enharmonic equivalent"
    return f"Key: {shown}, distant transition"


def describe_difficulty(reference_rating: Optional[int], candidate_rating: Optional[int]) -> str:
    ref = _valid_difficulty(reference_rating)
    cand = _valid_difficulty(candidate_rating)
    if ref is None or cand is None:
        return f"Difficulty: {_display(ref)}→{_display(cand)}, difficulty unknown"

    delta = cand - ref
    if delta == 0:
        return f"Difficulty: both {cand}/5, consistent"
    if abs(delta) == 1:
        return f"Difficulty: {ref}→{cand}, close match"

    direction = "increase" if delta > 0 else "decrease"
    size = "moderate" if abs(delta) == 2 else "large"
    return f"Difficulty: {ref}→{cand}, {size} {direction}"


# =============================================================================
# 호환성 스코어러
# =============================================================================

class CompatibilityScorer:
    """
    기준 곡과 후보 곡 사이의 호환성 점수 계산기

    컴포넌트별 0~1 점수를 가중합한 뒤 100을 곱합니다.
    키는 양쪽 모두 있을 때만 포함하며, 빠진 경우 나머지 가중치로 재정규화합니다.
    """

    def __init__(
        self,
        weights: ScoringWeights = DEFAULT_WEIGHTS,
        tempo_decay_bpm: float = DEFAULT_TEMPO_DECAY_BPM,
        difficulty_decay: float = DEFAULT_DIFFICULTY_DECAY
    ):
        """
        Args:
            weights: 컴포넌트 가중치 (합 1.0)
            tempo_decay_bpm: 템포 점수가 0이 되는 BPM 차이
            difficulty_decay: 난이도 점수가 0이 되는 난이도 차이
        """
        if tempo_decay_bpm <= 0 or difficulty_decay <= 0:
            raise ValueError(
                f"Decay thresholds must be positive: tempo={tempo_decay_bpm}, difficulty={difficulty_decay}"
            )
        self.weights = weights
        self.tempo_decay_bpm = tempo_decay_bpm
        self.difficulty_decay = difficulty_decay

    def score(self, reference: SongAttributeView, candidate: SongAttributeView) -> CompatibilityResult:
        """
        호환성 점수 및 설명 생성

        Args:
            reference: 기준 곡 (현재 곡)
            candidate: 후보 곡

        Returns:
            CompatibilityResult: 0~100 점수 (소수 첫째 자리) + 설명 문구
        """
        # 고정 순서: tempo -> genre -> key -> difficulty
        components: List[float] = []
        weights: List[float] = []
        details: List[str] = []

        components.append(tempo_component(reference.tempo_bpm, candidate.tempo_bpm, self.tempo_decay_bpm))
        weights.append(self.weights.tempo)
        details.append(describe_tempo(reference.tempo_bpm, candidate.tempo_bpm))

        components.append(genre_component(reference.genre, candidate.genre))
        weights.append(self.weights.genre)
        details.append(describe_genre(reference.genre, candidate.genre))

        key_score = key_component(reference.musical_key, candidate.musical_key)
        if key_score is not None:
            components.append(key_score)
            weights.append(self.weights.key)
            details.append(describe_key(reference.musical_key, candidate.musical_key))

        components.append(
            difficulty_component(reference.difficulty_rating, candidate.difficulty_rating, self.difficulty_decay)
        )
        weights.append(self.weights.difficulty)
        details.append(describe_difficulty(reference.difficulty_rating, candidate.difficulty_rating))

        weight_vec = np.asarray(weights, dtype=float)
        score_vec = np.asarray(components, dtype=float)
        # 키가 빠지면 남은 가중치 합으로 재정규화
        raw = float(np.dot(weight_vec, score_vec) / weight_vec.sum()) * 100.0

        score = round(float(np.clip(raw, 0.0, 100.0)), 1)
        return CompatibilityResult(score=score, details=tuple(details))


def score_compatibility(reference: SongAttributeView, candidate: SongAttributeView) -> CompatibilityResult:
    """기본 가중치로 점수 계산"""
    return CompatibilityScorer().score(reference, candidate)
