"""Vocabulary module exports.

The generator is not re-exported here: it depends on the quiz models, which in
turn build on these models.
"""

from .models import CamelModel, GeneratedWord, VocabularyEntry, WordList

__all__ = [
    "CamelModel",
    "GeneratedWord",
    "VocabularyEntry",
    "WordList",
]
