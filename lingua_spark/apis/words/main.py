from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from lingua_spark.apis.deps import get_vocabulary_service, not_found
from lingua_spark.core.config import settings
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.vocabulary.generator import GenerationError
from lingua_spark.modules.vocabulary.main import (
    PRESET_TOPICS,
    EmptyInputError,
    WordGenerator,
)
from lingua_spark.modules.vocabulary.models import VocabularyEntry
from .schemas import LookupRequest, PresetsResponse, TopicRequest, WordListResponse


router = APIRouter()


@router.get(
    f"/{settings.app.version}/words",
    response_model=WordListResponse,
    tags=["words"],
)
async def list_words(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> WordListResponse:
    words = await svc.list_words()
    return WordListResponse(count=len(words), words=words)


@router.get(
    f"/{settings.app.version}/words/presets",
    response_model=PresetsResponse,
    tags=["words"],
)
async def list_presets() -> PresetsResponse:
    return PresetsResponse(topics=list(PRESET_TOPICS))


@router.post(
    f"/{settings.app.version}/words/topic",
    response_model=WordListResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["words"],
)
async def generate_topic_words(
    req: TopicRequest,
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> WordListResponse:
    try:
        words = await WordGenerator(svc.add_words).from_topic(req.topic, req.count)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))
    return WordListResponse(count=len(words), words=words)


@router.post(
    f"/{settings.app.version}/words/lookup",
    response_model=VocabularyEntry,
    status_code=status.HTTP_201_CREATED,
    tags=["words"],
)
async def lookup_word(
    req: LookupRequest,
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> VocabularyEntry:
    try:
        return await WordGenerator(svc.add_words).lookup(req.term)
    except EmptyInputError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except GenerationError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


@router.delete(
    f"/{settings.app.version}/words/{{word_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["words"],
)
async def delete_word(
    word_id: str,
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> Response:
    if not await svc.delete_word(word_id):
        raise not_found("Word")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    f"/{settings.app.version}/words/{{word_id}}/learned",
    response_model=VocabularyEntry,
    tags=["words"],
)
async def toggle_learned(
    word_id: str,
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> VocabularyEntry:
    updated = await svc.toggle_learned(word_id)
    if updated is None:
        raise not_found("Word")
    return updated
