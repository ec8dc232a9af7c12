"""
Setlist Studio Recommendation Schemas
추천 관련 스키마
"""

from typing import List, Optional
from pydantic import BaseModel


class RecommendItem(BaseModel):
    """추천 결과 항목"""
    rank: int
    song_id: int
    title: Optional[str] = None
    artist: Optional[str] = None
    genre: Optional[str] = None
    bpm: Optional[int] = None
    musical_key: Optional[str] = None
    duration_seconds: Optional[int] = None
    difficulty_rating: Optional[int] = None
    compatibility_score: float
    compatibility_details: List[str]


class RecommendResponse(BaseModel):
    """추천 응답"""
    engine_version: str
    seed_id: int
    total: int
    items: List[RecommendItem]
