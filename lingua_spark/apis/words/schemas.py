from __future__ import annotations

from pydantic import Field

from lingua_spark.modules.vocabulary.generator import DEFAULT_WORD_COUNT
from lingua_spark.modules.vocabulary.models import CamelModel, VocabularyEntry


class TopicRequest(CamelModel):
    topic: str = Field(..., description="Topic to build a word list for")
    count: int = Field(default=DEFAULT_WORD_COUNT, ge=1, le=50)


class LookupRequest(CamelModel):
    term: str = Field(..., description="Single word to look up")


class WordListResponse(CamelModel):
    count: int
    words: list[VocabularyEntry] = Field(default_factory=list)


class PresetsResponse(CamelModel):
    topics: list[str]
