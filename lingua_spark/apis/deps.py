from __future__ import annotations

from typing import AsyncIterator, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from lingua_spark.core.db.base import async_session_maker, get_session
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.core.logging import get_logger
from lingua_spark.modules.vocabulary.models import VocabularyEntry

logger = get_logger(__name__)


async def get_vocabulary_service(
    session: AsyncSession = Depends(get_session),
) -> AsyncIterator[VocabularyService]:
    yield VocabularyService(session)


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


# Session callbacks ------------------------------------------------------
# Study sessions outlive a request, so each reported event opens its own
# database session, the same way background jobs do.


async def record_review(word_id: str) -> None:
    async with async_session_maker() as session:
        await VocabularyService(session).record_review(word_id)


async def load_words() -> list[VocabularyEntry]:
    async with async_session_maker() as session:
        return await VocabularyService(session).list_words()


async def toggle_learned(word_id: str) -> Optional[VocabularyEntry]:
    async with async_session_maker() as session:
        updated = await VocabularyService(session).toggle_learned(word_id)
    if updated is None:
        logger.warning(f"Learned toggle for unknown word {word_id}")
    return updated


async def record_quiz_result(score: int, total: int) -> None:
    async with async_session_maker() as session:
        await VocabularyService(session).record_quiz_result(score, total)
