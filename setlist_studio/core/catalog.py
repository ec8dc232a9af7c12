"""
Setlist Studio Song Catalog
사용자별 곡 카탈로그 (읽기 전용) 및 JSON 로더
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .models import SongAttributeView
from ..utils.timing import timed

logger = logging.getLogger(__name__)


DEMO_USER_ID = "demo-user"


class CatalogUnavailableError(RuntimeError):
    """
    카탈로그 조회 실패 (저장소 장애)

    DB 등 외부 저장소를 쓰는 SongCatalogRepository 구현이 조회 실패 시 던집니다.
    메모리 카탈로그(InMemorySongCatalog)는 실패하지 않으므로 던지지 않습니다.
    """


class SongCatalogRepository(Protocol):
    """사용자 소유 곡만 돌려주는 읽기 전용 저장소"""

    def get_songs_for_user(self, user_id: str) -> List[SongAttributeView]:
        ...


class InMemorySongCatalog:
    """owner_id 기준으로 나눠 둔 메모리 카탈로그"""

    def __init__(self, songs: Iterable[SongAttributeView] = ()):
        self._by_owner: Dict[str, List[SongAttributeView]] = {}
        for song in songs:
            self._by_owner.setdefault(song.owner_id, []).append(song)

    def get_songs_for_user(self, user_id: str) -> List[SongAttributeView]:
        # 호출마다 새 리스트
        return list(self._by_owner.get(user_id, []))

    @property
    def song_count(self) -> int:
        return sum(len(songs) for songs in self._by_owner.values())

    @property
    def user_count(self) -> int:
        return len(self._by_owner)


def _extract_field(item: Dict, candidates: List[str]) -> Any:
    """여러 후보 키에서 필드 추출"""
    for key in candidates:
        if key in item and item[key] is not None:
            return item[key]
    return None


def _parse_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def _parse_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_song(item: Dict) -> Optional[SongAttributeView]:
    """
    JSON 레코드 하나를 SongAttributeView로 변환

    Returns:
        SongAttributeView 또는 None (id/owner 누락 등 잘못된 레코드)
    """
    song_id = _parse_int(_extract_field(item, ["id", "song_id", "songId"]))
    owner_id = _parse_text(_extract_field(item, ["user_id", "owner_id", "userId", "ownerId"]))
    if song_id is None or owner_id is None:
        return None

    return SongAttributeView(
        song_id=song_id,
        owner_id=owner_id,
        genre=_parse_text(_extract_field(item, ["genre"])),
        tempo_bpm=_parse_int(_extract_field(item, ["bpm", "tempo_bpm", "tempoBpm"])),
        musical_key=_parse_text(_extract_field(item, ["musical_key", "musicalKey", "key"])),
        difficulty_rating=_parse_int(_extract_field(item, ["difficulty_rating", "difficultyRating", "difficulty"])),
        title=_parse_text(_extract_field(item, ["title", "song_name", "name"])),
        artist=_parse_text(_extract_field(item, ["artist", "artist_name"])),
        duration_seconds=_parse_int(_extract_field(item, ["duration_seconds", "durationSeconds"])),
    )


def demo_songs(owner_id: str = DEMO_USER_ID) -> List[SongAttributeView]:
    """데모용 7곡 카탈로그"""
    rows = [
        (1, "Billie Jean", "Michael Jackson", "Pop", 117, "F#m", 294, 3),
        (2, "Smooth Criminal", "Michael Jackson", "Pop", 125, "G", 272, 4),
        (3, "Sweet Child O' Mine", "Guns N' Roses", "Rock", 125, "D", 356, 4),
        (4, "Take Five", "Dave Brubeck", "Jazz", 176, "Bb", 324, 4),
        (5, "Summertime", "George Gershwin", "Jazz", 85, "Am", 195, 2),
        (6, "Bohemian Rhapsody", "Queen", "Rock", 72, "Bb", 355, 5),
        (7, "Hey Jude", "The Beatles", "Rock", 126, "C", 431, 3),
    ]
    return [
        SongAttributeView(
            song_id=sid,
            owner_id=owner_id,
            genre=genre,
            tempo_bpm=bpm,
            musical_key=key,
            difficulty_rating=difficulty,
            title=title,
            artist=artist,
            duration_seconds=duration,
        )
        for sid, title, artist, genre, bpm, key, duration, difficulty in rows
    ]


@timed
def load_song_catalog(path: str, demo_mode: bool) -> InMemorySongCatalog:
    """
    곡 카탈로그 JSON 로드

    Args:
        path: JSON 파일 경로 (리스트 또는 {id: 곡} 딕셔너리)
        demo_mode: 데모 모드 여부 (파일 없으면 데모 카탈로그 생성)

    Returns:
        InMemorySongCatalog

    Raises:
        RuntimeError: 데모 모드가 아닌데 카탈로그가 비어 있는 경우
    """
    songs: List[SongAttributeView] = []
    seen = set()

    file_path = Path(path) if path else None

    if file_path and file_path.exists():
        try:
            logger.info(f"Loading song catalog: {file_path}")
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)

            items = []
            if isinstance(data, list):
                items = data
            elif isinstance(data, dict):
                if all(isinstance(v, dict) for v in data.values()):
                    items = list(data.values())
                else:
                    items = [data]

            for item in items:
                if not isinstance(item, dict):
                    continue
                song = parse_song(item)
                if song is None:
                    logger.debug(f"Skipping malformed song record: {item}")
                    continue

                # 사용자별 중복 id 스킵
                ident = (song.owner_id, song.song_id)
                if ident in seen:
                    logger.debug(f"Skipping duplicate song id {song.song_id} for {song.owner_id}")
                    continue
                seen.add(ident)
                songs.append(song)

            logger.info(f"Song catalog loaded: {len(songs):,} songs")

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load song catalog: {e}")
            if not demo_mode:
                raise RuntimeError(f"Failed to load song catalog: {e}")

    if not songs and demo_mode:
        logger.warning("Demo mode: seeding demo catalog")
        songs = demo_songs()

    if not songs and not demo_mode:
        raise RuntimeError(f"Song catalog is empty: {path}")

    return InMemorySongCatalog(songs)
