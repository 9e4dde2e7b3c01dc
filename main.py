from fastapi import FastAPI
from contextlib import asynccontextmanager
from lingua_spark.core.config import settings
from lingua_spark.core.db.base import init_models
from lingua_spark.core.logging import get_logger, setup_logging
from lingua_spark.apis.words.main import router as words_router
from lingua_spark.apis.flashcards.main import router as flashcards_router
from lingua_spark.apis.quiz.main import router as quiz_router
from lingua_spark.apis.backup.main import router as backup_router
from lingua_spark.apis.stats.main import router as stats_router
from lingua_spark.modules.flashcards.state import flashcard_manager
from lingua_spark.modules.quiz.state import quiz_manager

import uvicorn
from fastapi.middleware.cors import CORSMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    await init_models()
    sweep = {
        "idle_seconds": settings.session_idle_seconds,
        "sweep_interval": settings.session_sweep_interval,
    }
    quiz_manager.start(**sweep)
    flashcard_manager.start(**sweep)
    logger.info(f"{settings.app.name} {settings.app.version} ready")
    try:
        yield
    finally:
        await quiz_manager.stop()
        await flashcard_manager.stop()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app.name, version=settings.app.version, lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(words_router)
    app.include_router(flashcards_router)
    app.include_router(quiz_router)
    app.include_router(backup_router)
    app.include_router(stats_router)

    @app.get("/")
    async def root():
        return {
            "status": "ok",
            "app": settings.app.name,
            "version": settings.app.version,
        }

    return app


app = create_app()


if __name__ == "__main__":
    try:
        uvicorn.run(
            "main:app",
            host="0.0.0.0",
            port=settings.app.port,
            reload=not settings.app.is_production,
        )
    except Exception as e:
        logger.error(f"An error occurred when starting the server: {e}.")
