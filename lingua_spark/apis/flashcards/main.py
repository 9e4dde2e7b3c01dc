from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from lingua_spark.apis import deps
from lingua_spark.apis.deps import get_vocabulary_service, not_found
from lingua_spark.core.config import settings
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.flashcards.models import FlashcardState
from lingua_spark.modules.flashcards.state import FlashcardSession, flashcard_manager


router = APIRouter()

BASE = f"/{settings.app.version}/flashcards/sessions"


def _session_or_404(session_id: str) -> FlashcardSession:
    session = flashcard_manager.get_session(session_id)
    if session is None:
        raise not_found("Flashcard session")
    return session


@router.post(
    BASE,
    response_model=FlashcardState,
    status_code=status.HTTP_201_CREATED,
    tags=["flashcards"],
)
async def start_session(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> FlashcardState:
    words = await svc.list_words()
    session = flashcard_manager.start_session(
        words,
        load_words=deps.load_words,
        on_review=deps.record_review,
        on_mark_learned=deps.toggle_learned,
    )
    return session.to_state()


@router.get(f"{BASE}/{{session_id}}", response_model=FlashcardState, tags=["flashcards"])
async def get_state(session_id: str) -> FlashcardState:
    return await _session_or_404(session_id).refresh()


@router.post(
    f"{BASE}/{{session_id}}/flip", response_model=FlashcardState, tags=["flashcards"]
)
async def flip(session_id: str) -> FlashcardState:
    return await _session_or_404(session_id).flip()


@router.post(
    f"{BASE}/{{session_id}}/next", response_model=FlashcardState, tags=["flashcards"]
)
async def next_card(session_id: str) -> FlashcardState:
    return await _session_or_404(session_id).next()


@router.post(
    f"{BASE}/{{session_id}}/previous",
    response_model=FlashcardState,
    tags=["flashcards"],
)
async def previous_card(session_id: str) -> FlashcardState:
    return await _session_or_404(session_id).previous()


@router.post(
    f"{BASE}/{{session_id}}/learned",
    response_model=FlashcardState,
    tags=["flashcards"],
)
async def mark_learned(session_id: str) -> FlashcardState:
    return await _session_or_404(session_id).mark_learned()


@router.delete(
    f"{BASE}/{{session_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["flashcards"],
)
async def end_session(session_id: str) -> Response:
    if not flashcard_manager.end_session(session_id):
        raise not_found("Flashcard session")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
