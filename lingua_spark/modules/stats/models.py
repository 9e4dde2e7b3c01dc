"""Learning statistics shapes shared by the store, API and backups."""

from __future__ import annotations

from lingua_spark.modules.vocabulary.models import CamelModel
from pydantic import Field


class DailyStats(CamelModel):
    date: str  # YYYY-MM-DD
    words_learned: int = 0
    words_reviewed: int = 0
    quiz_correct: int = 0
    quiz_total: int = 0


class ScorePoint(CamelModel):
    date: str
    score: int  # percentage 0-100


class LearningStats(CamelModel):
    words_learned: int = 0
    total_words: int = 0
    quiz_score_history: list[ScorePoint] = Field(default_factory=list)
    today: DailyStats
    daily: list[DailyStats] = Field(default_factory=list)
