"""
Setlist Studio Backend Main Application
FastAPI 앱 및 startup/shutdown 이벤트
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import get_settings
from .core.catalog import load_song_catalog
from .core.engine import RecommendationService
from .core.scoring import CompatibilityScorer
from .api import routes_health, routes_recommend
from .utils.logging import setup_logging

# 로깅 설정
setup_logging(get_settings().LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """앱 라이프사이클 관리"""
    # Startup
    logger.info("=" * 60)
    logger.info("Setlist Studio Recommendation Backend Starting...")
    logger.info("=" * 60)

    config = get_settings()
    app.state.config = config

    logger.info(f"Engine Version: {config.ENGINE_VERSION}")
    logger.info(f"Demo Mode: {config.DEMO_MODE}")

    # 가중치 설정 오류는 기동 실패로 처리
    scorer = CompatibilityScorer(
        weights=config.scoring_weights(),
        tempo_decay_bpm=config.TEMPO_DECAY_BPM,
        difficulty_decay=config.DIFFICULTY_DECAY
    )

    try:
        app.state.catalog = load_song_catalog(config.SONG_CATALOG_PATH, config.DEMO_MODE)
    except RuntimeError as e:
        logger.error(f"Failed to load song catalog: {e}")
        app.state.catalog = None

    if app.state.catalog is not None:
        app.state.service = RecommendationService(
            catalog=app.state.catalog,
            scorer=scorer,
            default_max_results=config.DEFAULT_MAX_RESULTS
        )
    else:
        app.state.service = None
        logger.warning("Recommendation service not initialized (no catalog)")

    logger.info("=" * 60)
    logger.info("Setlist Studio Recommendation Backend Ready!")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Setlist Studio Recommendation Backend Shutting down...")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Setlist Studio Recommendation API",
        description="셋리스트 다음 곡 추천 API",
        version="1.0.0",
        lifespan=lifespan
    )

    # CORS 설정
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록
    app.include_router(routes_health.router)
    app.include_router(routes_recommend.router)

    @app.get("/")
    async def root():
        """루트 엔드포인트"""
        return {
            "service": "Setlist Studio Recommendation API",
            "version": "1.0.0",
            "docs": "/docs"
        }

    return app


app = create_app()
