"""
Shared fixtures for Setlist Studio recommendation tests.

The catalog mirrors the seven-song setlist used throughout the suite
(Billie Jean is the usual reference song, id 1).
"""

from typing import Optional

import pytest

from setlist_studio.core.catalog import InMemorySongCatalog, demo_songs
from setlist_studio.core.engine import RecommendationService
from setlist_studio.core.models import SongAttributeView


TEST_USER_ID = "test-user"


@pytest.fixture
def song_factory():
    """Build a SongAttributeView with sensible defaults."""
    def _make(
        song_id: int = 100,
        owner_id: str = TEST_USER_ID,
        genre: Optional[str] = "Pop",
        tempo_bpm: Optional[int] = 120,
        musical_key: Optional[str] = "C",
        difficulty_rating: Optional[int] = 3,
        **extra
    ) -> SongAttributeView:
        return SongAttributeView(
            song_id=song_id,
            owner_id=owner_id,
            genre=genre,
            tempo_bpm=tempo_bpm,
            musical_key=musical_key,
            difficulty_rating=difficulty_rating,
            **extra
        )
    return _make


@pytest.fixture
def songs():
    return demo_songs(TEST_USER_ID)


@pytest.fixture
def catalog(songs):
    return InMemorySongCatalog(songs)


@pytest.fixture
def service(catalog):
    return RecommendationService(catalog)
