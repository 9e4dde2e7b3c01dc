from __future__ import annotations

from typing import Optional

from lingua_spark.modules.vocabulary.models import CamelModel


class CardView(CamelModel):
    """Front face fields always; back face fields only while flipped."""

    id: str
    term: str
    part_of_speech: str
    pronunciation: Optional[str] = None
    learned: bool = False
    definition: Optional[str] = None
    example_sentence: Optional[str] = None


class FlashcardState(CamelModel):
    id: str
    empty: bool
    index: int
    total: int
    is_flipped: bool
    reviewed_count: int = 0
    card: Optional[CardView] = None
