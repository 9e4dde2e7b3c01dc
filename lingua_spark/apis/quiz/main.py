from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from lingua_spark.apis import deps
from lingua_spark.apis.deps import get_vocabulary_service, not_found
from lingua_spark.core.config import settings
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.quiz.models import QuizState
from lingua_spark.modules.quiz.state import QuizSession, QuizStateError, quiz_manager
from lingua_spark.modules.vocabulary import generator
from .schemas import AnswerRequest, AnswerResponse


router = APIRouter()

BASE = f"/{settings.app.version}/quiz/sessions"


def _session_or_404(session_id: str) -> QuizSession:
    session = quiz_manager.get_session(session_id)
    if session is None:
        raise not_found("Quiz session")
    return session


@router.post(
    BASE,
    response_model=QuizState,
    status_code=status.HTTP_201_CREATED,
    tags=["quiz"],
)
async def start_quiz(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> QuizState:
    words = await svc.list_words()
    session = await quiz_manager.start_session(
        words,
        generate=generator.generate_quiz_from_words,
        on_complete=deps.record_quiz_result,
    )
    return session.to_state()


@router.get(f"{BASE}/{{session_id}}", response_model=QuizState, tags=["quiz"])
async def get_quiz_state(session_id: str) -> QuizState:
    return _session_or_404(session_id).to_state()


@router.post(
    f"{BASE}/{{session_id}}/answer", response_model=AnswerResponse, tags=["quiz"]
)
async def answer(session_id: str, req: AnswerRequest) -> AnswerResponse:
    session = _session_or_404(session_id)
    try:
        accepted = session.select_option(req.option_index)
    except QuizStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    q = session.current
    correct = None
    if q is not None and session.is_answered:
        correct = session.selected_option == q.correct_answer_index
    return AnswerResponse(accepted=accepted, correct=correct, state=session.to_state())


@router.post(f"{BASE}/{{session_id}}/next", response_model=QuizState, tags=["quiz"])
async def next_question(session_id: str) -> QuizState:
    session = _session_or_404(session_id)
    try:
        return await session.next_question()
    except QuizStateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.delete(
    f"{BASE}/{{session_id}}",
    status_code=status.HTTP_204_NO_CONTENT,
    tags=["quiz"],
)
async def end_quiz(session_id: str) -> Response:
    if not quiz_manager.end_session(session_id):
        raise not_found("Quiz session")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
