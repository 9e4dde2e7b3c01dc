"""In-memory flashcard study sessions.

A session walks the collection one card at a time. Flipping to the back face
counts as a review, reported at most once per card per session. Moving to the
next or previous card always shows the front face first and waits
``flip_delay`` seconds before the index changes so the flip-back finishes
before the new card is shown. Navigation wraps in both directions.

The session does not own the words. When ``load_words`` is given, the list is
re-read from the owner before every action, so words deleted elsewhere drop
out and learned flags come from the store. ``on_mark_learned`` returns the
owner's updated entry, which replaces the card; without an owner the words
list passed in is the collection and is updated in place.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, Optional
from uuid import uuid4

from lingua_spark.core.config import settings
from lingua_spark.core.logging import get_logger, session_context
from lingua_spark.core.session_manager import SessionManager, now_utc
from lingua_spark.modules.flashcards.models import CardView, FlashcardState
from lingua_spark.modules.vocabulary.models import VocabularyEntry

logger = get_logger(__name__)

WordsProvider = Callable[[], Awaitable[list[VocabularyEntry]]]
ReviewEvent = Callable[[str], Awaitable[None]]
LearnedEvent = Callable[[str], Awaitable[Optional[VocabularyEntry]]]


def _default_flip_delay() -> float:
    return max(0, settings.flashcard_flip_delay_ms) / 1000


@dataclass
class FlashcardSession:
    words: list[VocabularyEntry] = field(default_factory=list)
    load_words: Optional[WordsProvider] = None
    on_review: Optional[ReviewEvent] = None
    on_mark_learned: Optional[LearnedEvent] = None
    flip_delay: float = field(default_factory=_default_flip_delay)
    id: str = field(default_factory=lambda: uuid4().hex[:8])
    last_activity: datetime = field(default_factory=now_utc)
    index: int = 0
    is_flipped: bool = False
    reviewed: set[str] = field(default_factory=set)

    @property
    def is_empty(self) -> bool:
        return len(self.words) == 0

    @property
    def current(self) -> Optional[VocabularyEntry]:
        if self.is_empty:
            return None
        return self.words[self._position()]

    def _position(self) -> int:
        return self.index % len(self.words) if self.words else 0

    async def refresh(self) -> FlashcardState:
        """Re-read the collection from its owner, keeping the current card."""
        if self.load_words is None:
            return self.to_state()
        shown = self.current
        self.words = list(await self.load_words())
        ids = [w.id for w in self.words]
        if shown is not None and shown.id in ids:
            self.index = ids.index(shown.id)
        else:
            # Current card is gone; the next one slides into its place
            self.index = min(self.index, max(len(self.words) - 1, 0))
            self.is_flipped = False
        return self.to_state()

    async def flip(self) -> FlashcardState:
        await self.refresh()
        word = self.current
        if word is None:
            return self.to_state()
        self.is_flipped = not self.is_flipped
        if self.is_flipped and word.id not in self.reviewed:
            self.reviewed.add(word.id)
            logger.debug(
                f"Reviewed {word.id}", extra=session_context(self.id, "review")
            )
            if self.on_review is not None:
                await self.on_review(word.id)
        return self.to_state()

    async def next(self) -> FlashcardState:
        return await self._move(1)

    async def previous(self) -> FlashcardState:
        return await self._move(-1)

    async def _move(self, step: int) -> FlashcardState:
        if self.is_empty:
            return await self.refresh()
        self.is_flipped = False
        if self.flip_delay > 0:
            await asyncio.sleep(self.flip_delay)
        # The collection may have changed while the card was turning back
        await self.refresh()
        if self.is_empty:
            return self.to_state()
        self.index = (self._position() + step) % len(self.words)
        return self.to_state()

    async def mark_learned(self) -> FlashcardState:
        await self.refresh()
        word = self.current
        if word is None:
            return self.to_state()
        if self.on_mark_learned is None:
            word.learned = not word.learned
            return self.to_state()
        updated = await self.on_mark_learned(word.id)
        if updated is None:
            return await self.refresh()
        self.words[self._position()] = updated
        return self.to_state()

    def to_state(self) -> FlashcardState:
        word = self.current
        card = None
        if word is not None:
            card = CardView(
                id=word.id,
                term=word.term,
                part_of_speech=word.part_of_speech,
                pronunciation=word.pronunciation,
                learned=word.learned,
                definition=word.definition if self.is_flipped else None,
                example_sentence=word.example_sentence if self.is_flipped else None,
            )
        return FlashcardState(
            id=self.id,
            empty=self.is_empty,
            index=self._position(),
            total=len(self.words),
            is_flipped=self.is_flipped,
            reviewed_count=len(self.reviewed),
            card=card,
        )


class FlashcardManager(SessionManager[FlashcardSession]):
    def start_session(
        self,
        words: list[VocabularyEntry],
        *,
        load_words: Optional[WordsProvider] = None,
        on_review: Optional[ReviewEvent] = None,
        on_mark_learned: Optional[LearnedEvent] = None,
        flip_delay: Optional[float] = None,
    ) -> FlashcardSession:
        kwargs = {}
        if flip_delay is not None:
            kwargs["flip_delay"] = flip_delay
        session = FlashcardSession(
            words=words,
            load_words=load_words,
            on_review=on_review,
            on_mark_learned=on_mark_learned,
            **kwargs,
        )
        return self.add(session)


flashcard_manager = FlashcardManager()
