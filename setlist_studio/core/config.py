"""
Setlist Studio Backend Configuration
환경변수 기반 설정 관리
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .scoring import MIN_COMPONENT_WEIGHT, ScoringWeights


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Engine settings
    ENGINE_VERSION: str = Field(default="compat_v1", description="추천 엔진 버전")
    DEFAULT_MAX_RESULTS: int = Field(default=5, ge=1, description="기본 추천 개수")
    MAX_RESULTS_LIMIT: int = Field(default=100, ge=1, description="요청당 최대 추천 개수")

    # Scoring weights (합 1.0)
    WEIGHT_TEMPO: float = Field(default=0.35, ge=MIN_COMPONENT_WEIGHT, le=1.0, description="템포 근접도 가중치")
    WEIGHT_GENRE: float = Field(default=0.25, ge=MIN_COMPONENT_WEIGHT, le=1.0, description="장르 일치 가중치")
    WEIGHT_KEY: float = Field(default=0.20, ge=MIN_COMPONENT_WEIGHT, le=1.0, description="키 일치 가중치")
    WEIGHT_DIFFICULTY: float = Field(default=0.20, ge=MIN_COMPONENT_WEIGHT, le=1.0, description="난이도 근접도 가중치")

    # Decay thresholds
    TEMPO_DECAY_BPM: int = Field(default=60, ge=1, description="템포 점수가 0이 되는 BPM 차이")
    DIFFICULTY_DECAY: int = Field(default=4, ge=1, description="난이도 점수가 0이 되는 차이")

    # Mode settings
    DEMO_MODE: bool = Field(default=True, description="데모 모드 (카탈로그 파일 없이 동작)")
    LOG_LEVEL: str = Field(default="INFO", description="로그 레벨")

    # File paths
    SONG_CATALOG_PATH: str = Field(default="", description="곡 카탈로그 JSON 경로")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    def scoring_weights(self) -> ScoringWeights:
        """가중치 검증 후 반환 (합이 1.0이 아니면 ValueError)"""
        return ScoringWeights(
            tempo=self.WEIGHT_TEMPO,
            genre=self.WEIGHT_GENRE,
            key=self.WEIGHT_KEY,
            difficulty=self.WEIGHT_DIFFICULTY,
        )


def get_settings() -> Settings:
    return Settings()
