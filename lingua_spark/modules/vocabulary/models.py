"""Pydantic models for vocabulary entries.

Wire format keeps the camelCase keys of the browser client
(``partOfSpeech``, ``exampleSentence``) so that backup files written by either
side can be restored by the other. snake_case is accepted on input as well.
"""

from __future__ import annotations

from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GeneratedWord(CamelModel):
    """One word as returned by the model, before it joins the collection."""

    term: str
    definition: str
    part_of_speech: str
    example_sentence: str
    pronunciation: Optional[str] = Field(
        default=None, description="IPA pronunciation or phonetic spelling"
    )


class WordList(CamelModel):
    """Structured output for topic generation."""

    words: list[GeneratedWord] = Field(default_factory=list)


class VocabularyEntry(GeneratedWord):
    """A word in the user's collection."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    learned: bool = False

    @classmethod
    def from_generated(cls, word: GeneratedWord) -> "VocabularyEntry":
        # Fresh client-side id; generated words always start unlearned
        return cls(**word.model_dump(), id=str(uuid4()), learned=False)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
