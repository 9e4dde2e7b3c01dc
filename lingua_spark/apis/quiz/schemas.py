from __future__ import annotations

from typing import Optional

from pydantic import Field

from lingua_spark.modules.quiz.models import QuizState
from lingua_spark.modules.vocabulary.models import CamelModel


class AnswerRequest(CamelModel):
    option_index: int = Field(..., description="0-based index of the chosen option")


class AnswerResponse(CamelModel):
    accepted: bool
    correct: Optional[bool] = None
    state: QuizState
