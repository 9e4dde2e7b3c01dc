from __future__ import annotations

from fastapi import APIRouter, Depends

from lingua_spark.apis.deps import get_vocabulary_service
from lingua_spark.core.config import settings
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.stats.models import LearningStats


router = APIRouter()


@router.get(
    f"/{settings.app.version}/stats",
    response_model=LearningStats,
    tags=["stats"],
)
async def get_stats(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> LearningStats:
    return await svc.learning_stats()
