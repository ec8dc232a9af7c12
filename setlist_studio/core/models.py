"""
Setlist Studio Core Models
추천 엔진이 다루는 값 타입
"""

from dataclasses import dataclass
from typing import Hashable, Optional, Tuple


SongId = Hashable


@dataclass(frozen=True)
class SongAttributeView:
    """Read-only view of a song, already scoped to a single owner"""
    song_id: SongId
    owner_id: str
    genre: Optional[str] = None
    tempo_bpm: Optional[int] = None
    musical_key: Optional[str] = None
    difficulty_rating: Optional[int] = None
    # display only, never scored
    title: Optional[str] = None
    artist: Optional[str] = None
    duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class CompatibilityResult:
    """Score (0~100) plus the ordered rationale behind it"""
    score: float
    details: Tuple[str, ...]


@dataclass(frozen=True)
class RecommendationResult:
    """One ranked candidate"""
    song_id: SongId
    compatibility_score: float
    compatibility_details: Tuple[str, ...]
    song: Optional[SongAttributeView] = None
