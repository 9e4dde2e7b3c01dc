"""Topic generator and word lookup.

Two input modes feed the generation client: a topic (with an optional count)
or a single word. Blank input is rejected before any request is made.
Generated entries are handed to ``on_words_added``, the owner of the
collection; a lookup is passed as a one-element list.
"""

from __future__ import annotations

from enum import Enum
from typing import Awaitable, Callable, Optional

from lingua_spark.core.logging import get_logger
from lingua_spark.modules.vocabulary import generator
from lingua_spark.modules.vocabulary.generator import DEFAULT_WORD_COUNT, GenerationError
from lingua_spark.modules.vocabulary.models import VocabularyEntry

logger = get_logger(__name__)

PRESET_TOPICS = ("Coffee Shop", "Job Interview", "Movies")

TOPIC_ERROR = "Something went wrong while contacting the AI. Please try again."
LOOKUP_ERROR = "Could not find details for this word. Please check spelling."

WordsAdded = Callable[[list[VocabularyEntry]], Awaitable[object]]


class GeneratorMode(str, Enum):
    TOPIC = "topic"
    SINGLE = "single"


class EmptyInputError(ValueError):
    pass


class WordGenerator:
    """Turns a topic or a single term into new collection entries."""

    def __init__(self, on_words_added: Optional[WordsAdded] = None) -> None:
        self.on_words_added = on_words_added

    async def _add(self, words: list[VocabularyEntry]) -> None:
        if self.on_words_added is not None:
            await self.on_words_added(words)

    async def from_topic(
        self, topic: str, count: int = DEFAULT_WORD_COUNT
    ) -> list[VocabularyEntry]:
        topic = (topic or "").strip()
        if not topic:
            raise EmptyInputError("Topic must not be empty")
        try:
            words = await generator.generate_word_list_by_topic(topic, count)
        except GenerationError as e:
            raise GenerationError(TOPIC_ERROR) from e
        await self._add(words)
        logger.info(f"Generated {len(words)} words for topic {topic!r}")
        return words

    async def lookup(self, term: str) -> VocabularyEntry:
        term = (term or "").strip()
        if not term:
            raise EmptyInputError("Word must not be empty")
        try:
            word = await generator.generate_word_details(term)
        except GenerationError as e:
            raise GenerationError(LOOKUP_ERROR) from e
        await self._add([word])
        return word

    async def run(
        self, mode: GeneratorMode, text: str, count: int = DEFAULT_WORD_COUNT
    ) -> list[VocabularyEntry]:
        if mode == GeneratorMode.SINGLE:
            return [await self.lookup(text)]
        return await self.from_topic(text, count)
