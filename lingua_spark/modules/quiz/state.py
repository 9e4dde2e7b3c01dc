"""In-memory quiz sessions.

One ``QuizSession`` per quiz run: ``loading -> (error | active) -> finished``.
Questions are generated once on start and never reshuffled. Each question
accepts exactly one answer; the running score is reported to ``on_complete``
when the last question is left. Sessions live in-process only and are dropped
when ended, after sitting idle, or when the process restarts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Sequence
from uuid import uuid4

from lingua_spark.core.logging import get_logger, session_context
from lingua_spark.core.session_manager import SessionManager
from lingua_spark.modules.quiz.models import (
    OPTION_COUNT,
    QuestionView,
    QuizQuestion,
    QuizState,
    QuizStatus,
    QuizSummary,
)
from lingua_spark.modules.vocabulary.models import VocabularyEntry

logger = get_logger(__name__)

MIN_QUIZ_WORDS = 3
NOT_ENOUGH_WORDS = "Need at least 3 words to generate a quiz."
LOAD_FAILED = "Failed to load quiz. Please try again later."

QuizGenerator = Callable[[Sequence[VocabularyEntry]], Awaitable[list[QuizQuestion]]]
CompletionCallback = Callable[[int, int], Awaitable[None]]


class QuizStateError(Exception):
    """An action that is not valid in the session's current state."""

    pass


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _short_id() -> str:
    return uuid4().hex[:8]


@dataclass
class QuizSession:
    words: Sequence[VocabularyEntry]
    generate: QuizGenerator
    on_complete: Optional[CompletionCallback] = None
    id: str = field(default_factory=_short_id)
    created_at: datetime = field(default_factory=_now_utc)
    last_activity: datetime = field(default_factory=_now_utc)
    status: QuizStatus = QuizStatus.LOADING
    error: Optional[str] = None
    questions: list[QuizQuestion] = field(default_factory=list)
    current_index: int = 0
    selected_option: Optional[int] = None
    is_answered: bool = False
    score: int = 0

    async def start(self) -> QuizState:
        if self.status != QuizStatus.LOADING:
            return self.to_state()
        if len(self.words) < MIN_QUIZ_WORDS:
            self.status = QuizStatus.ERROR
            self.error = NOT_ENOUGH_WORDS
            return self.to_state()
        try:
            questions = await self.generate(self.words)
        except Exception as e:
            logger.warning(
                f"Quiz generation failed: {e}", extra=session_context(self.id, "start")
            )
            self.status = QuizStatus.ERROR
            self.error = LOAD_FAILED
            return self.to_state()
        if not questions:
            self.status = QuizStatus.ERROR
            self.error = LOAD_FAILED
            return self.to_state()
        self.questions = list(questions)
        self.status = QuizStatus.ACTIVE
        return self.to_state()

    @property
    def current(self) -> Optional[QuizQuestion]:
        if self.status != QuizStatus.ACTIVE:
            return None
        return self.questions[self.current_index]

    def select_option(self, index: int) -> bool:
        """Lock in an answer; returns True when a new answer was accepted."""
        if self.status != QuizStatus.ACTIVE:
            raise QuizStateError(f"quiz is {self.status.value}")
        if not 0 <= int(index) < OPTION_COUNT:
            raise ValueError(f"option index out of range: {index}")
        # Re-selecting after the answer is locked is a no-op
        if self.is_answered:
            return False
        self.selected_option = int(index)
        self.is_answered = True
        if self.selected_option == self.questions[self.current_index].correct_answer_index:
            self.score += 1
        return True

    async def next_question(self) -> QuizState:
        if self.status != QuizStatus.ACTIVE:
            raise QuizStateError(f"quiz is {self.status.value}")
        if not self.is_answered:
            raise QuizStateError("answer the current question first")
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            self.selected_option = None
            self.is_answered = False
            return self.to_state()

        self.status = QuizStatus.FINISHED
        # The running score already includes the last answer
        logger.info(
            f"Quiz finished: {self.score}/{len(self.questions)}",
            extra=session_context(self.id, "finish"),
        )
        if self.on_complete is not None:
            await self.on_complete(self.score, len(self.questions))
        return self.to_state()

    def summary(self) -> QuizSummary:
        total = len(self.questions)
        percentage = round(self.score / total * 100) if total else 0
        return QuizSummary(
            score=self.score,
            total=total,
            correct=self.score,
            incorrect=total - self.score,
            percentage=percentage,
        )

    def to_state(self) -> QuizState:
        current = None
        q = self.current
        if q is not None:
            current = QuestionView(
                index=self.current_index,
                question=q.question,
                options=list(q.options),
                selected_option=self.selected_option,
                is_answered=self.is_answered,
                correct_answer_index=q.correct_answer_index if self.is_answered else None,
                explanation=q.explanation if self.is_answered else None,
            )
        return QuizState(
            id=self.id,
            status=self.status,
            error=self.error,
            score=self.score,
            total_questions=len(self.questions),
            current=current,
            summary=self.summary() if self.status == QuizStatus.FINISHED else None,
        )


class QuizManager(SessionManager[QuizSession]):
    async def start_session(
        self,
        words: Sequence[VocabularyEntry],
        *,
        generate: QuizGenerator,
        on_complete: Optional[CompletionCallback] = None,
    ) -> QuizSession:
        session = QuizSession(words=list(words), generate=generate, on_complete=on_complete)
        self.add(session)
        await session.start()
        return session


# Singleton manager used by the API layer
quiz_manager = QuizManager()
