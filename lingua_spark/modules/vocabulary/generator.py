"""Vocabulary and quiz generation using pydantic-ai and a Gemini provider.

Three round-trips are exposed:

- ``generate_word_list_by_topic(topic, count)`` -> list[VocabularyEntry]
- ``generate_word_details(term)`` -> VocabularyEntry
- ``generate_quiz_from_words(words)`` -> list[QuizQuestion]

Schema conformance is delegated to structured output (``output_type``). Any
failure, from a missing API key to a malformed response, is logged and
re-raised as a single ``GenerationError`` per operation; there are no retries
and no partial results. Imports for the LLM provider are kept lazy to avoid
import-time errors when credentials are missing.
"""

from __future__ import annotations

from typing import Sequence

from pydantic_ai import Agent

from lingua_spark.core.config import settings
from lingua_spark.core.logging import get_logger
from lingua_spark.modules.quiz.models import QuizQuestion, QuizQuestionSet
from lingua_spark.modules.vocabulary.models import (
    GeneratedWord,
    VocabularyEntry,
    WordList,
)

logger = get_logger(__name__)

DEFAULT_WORD_COUNT = 5
QUIZ_QUESTION_COUNT = 5
QUIZ_WORD_LIMIT = 10


class GenerationError(Exception):
    """Raised when any generation request fails."""

    pass


def _build_google_model():
    """Build Google Gemini model for pydantic-ai (lazy import)."""
    from pydantic_ai.models.google import GoogleModel
    from pydantic_ai.providers.google import GoogleProvider

    if not settings.gemini_api_key:
        raise RuntimeError(
            "Gemini API key not configured. Set GEMINI_API_KEY in your environment."
        )

    provider = GoogleProvider(api_key=settings.gemini_api_key)
    return GoogleModel(settings.generation_model, provider=provider)


def _build_openrouter_model():
    """Build OpenRouter model via OpenAI-compatible provider (lazy import)."""
    from pydantic_ai.models.openai import OpenAIChatModel
    from pydantic_ai.providers.openai import OpenAIProvider

    if not settings.openrouter_api_key:
        raise RuntimeError(
            "OpenRouter API key not configured. Set OPENROUTER_API_KEY in your environment."
        )

    provider = OpenAIProvider(
        api_key=settings.openrouter_api_key,
        base_url="https://openrouter.ai/api/v1",
    )
    return OpenAIChatModel(settings.openrouter_model, provider=provider)


def _build_model_by_settings():
    provider = (settings.model_provider or "google").lower()
    if provider == "openrouter":
        return _build_openrouter_model()
    return _build_google_model()


TUTOR_PROMPT = (
    "You are an expert language tutor. Generate accurate, useful vocabulary "
    "suitable for an intermediate learner."
)

DICTIONARY_PROMPT = (
    "You are an expert dictionary assistant. Provide accurate definitions and "
    "natural examples."
)

QUIZ_PROMPT = (
    "You are an expert quiz author. Every question has EXACTLY 4 options and "
    "correctAnswerIndex is the 0-based index of the correct option. "
    "Avoid markdown; do not include code fences."
)


def _topic_instruction(topic: str, count: int) -> str:
    return (
        f"Generate a vocabulary list of {int(count)} {settings.study_language} "
        f'words related to the topic: "{topic}". '
        f"Provide definitions in {settings.definition_language} and example "
        f"sentences in {settings.study_language}."
    )


def _details_instruction(term: str) -> str:
    return (
        f"Provide detailed vocabulary information for the {settings.study_language} "
        f'word: "{term}".\n'
        f"1. Definition should be in {settings.definition_language}.\n"
        "2. Part of speech (e.g., Noun, Verb, Adjective).\n"
        f"3. A clear, simple example sentence in {settings.study_language}.\n"
        "4. IPA pronunciation."
    )


def _quiz_instruction(words: Sequence[VocabularyEntry]) -> str:
    word_list = ", ".join(f"{w.term}: {w.definition}" for w in words)
    return (
        f"Create a multiple-choice quiz based on these words: {word_list}. "
        f"Create {QUIZ_QUESTION_COUNT} questions. Questions can ask for "
        "definitions, synonyms, or fill-in-the-blank."
    )


def _agent(output_type, system_prompt: str) -> Agent:
    return Agent(
        model=_build_model_by_settings(),
        output_type=output_type,
        system_prompt=system_prompt,
        retries=0,
    )


async def generate_word_list_by_topic(
    topic: str, count: int = DEFAULT_WORD_COUNT
) -> list[VocabularyEntry]:
    """Generate ``count`` entries about ``topic``, each with a fresh id."""
    try:
        agent: Agent[None, WordList] = _agent(WordList, TUTOR_PROMPT)
        res = await agent.run(_topic_instruction(topic, count))
        words = res.output.words[: max(0, int(count))]
        return [VocabularyEntry.from_generated(w) for w in words]
    except Exception as e:
        logger.error(f"Error generating word list: {e}")
        raise GenerationError("Failed to generate words. Please try again.") from e


async def generate_word_details(term: str) -> VocabularyEntry:
    """Look up one term and return it as a new entry."""
    try:
        agent: Agent[None, GeneratedWord] = _agent(GeneratedWord, DICTIONARY_PROMPT)
        res = await agent.run(_details_instruction(term))
        return VocabularyEntry.from_generated(res.output)
    except Exception as e:
        logger.error(f"Error generating word details: {e}")
        raise GenerationError(
            "Failed to find word details. Please check the spelling."
        ) from e


async def generate_quiz_from_words(
    words: Sequence[VocabularyEntry],
) -> list[QuizQuestion]:
    """Build a quiz from the first ``QUIZ_WORD_LIMIT`` words of the collection."""
    # Only a prefix of the collection goes into the prompt
    subset = list(words)[:QUIZ_WORD_LIMIT]
    try:
        agent: Agent[None, QuizQuestionSet] = _agent(QuizQuestionSet, QUIZ_PROMPT)
        res = await agent.run(_quiz_instruction(subset))
        return list(res.output.questions[:QUIZ_QUESTION_COUNT])
    except Exception as e:
        logger.error(f"Error generating quiz: {e}")
        raise GenerationError("Failed to generate quiz.") from e
