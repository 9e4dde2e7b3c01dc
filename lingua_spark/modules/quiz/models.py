"""Pydantic models for quiz questions and quiz session state."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import Field, field_validator

from lingua_spark.modules.vocabulary.models import CamelModel

OPTION_COUNT = 4


class QuizQuestion(CamelModel):
    """A single four-option multiple-choice question."""

    question: str
    options: list[str] = Field(description="4 multiple choice options")
    correct_answer_index: int = Field(description="0-3 index of correct option")
    explanation: str

    @field_validator("options")
    @classmethod
    def _four_options(cls, v: list[str]) -> list[str]:
        if len(v) != OPTION_COUNT:
            raise ValueError(f"expected {OPTION_COUNT} options, got {len(v)}")
        return v

    @field_validator("correct_answer_index")
    @classmethod
    def _index_in_range(cls, v: int) -> int:
        if not 0 <= v < OPTION_COUNT:
            raise ValueError(f"correct_answer_index out of range: {v}")
        return v


class QuizQuestionSet(CamelModel):
    """Structured output for quiz generation."""

    questions: list[QuizQuestion] = Field(default_factory=list)


class QuizStatus(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    ACTIVE = "active"
    FINISHED = "finished"


class QuestionView(CamelModel):
    """The current question; answer and explanation only once answered."""

    index: int
    question: str
    options: list[str]
    selected_option: Optional[int] = None
    is_answered: bool = False
    correct_answer_index: Optional[int] = None
    explanation: Optional[str] = None


class QuizSummary(CamelModel):
    score: int
    total: int
    correct: int
    incorrect: int
    percentage: int


class QuizState(CamelModel):
    id: str
    status: QuizStatus
    error: Optional[str] = None
    score: int = 0
    total_questions: int = 0
    current: Optional[QuestionView] = None
    summary: Optional[QuizSummary] = None
