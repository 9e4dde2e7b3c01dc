"""
Pytest configuration and shared fixtures.

Settings are read at import time, so the environment is pinned here before
any ``lingua_spark`` module is imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["FLASHCARD_FLIP_DELAY_MS"] = "0"
os.environ["MODEL_PROVIDER"] = "google"
os.environ.setdefault("GEMINI_API_KEY", "test-key")
os.environ["GOOGLE_INIT_ATTEMPTS"] = "2"
os.environ["GOOGLE_INIT_INTERVAL_SEC"] = "0"

import httpx
import pytest
from pydantic_ai.models.test import TestModel

from lingua_spark.core.db.base import async_session_maker, drop_models, engine, init_models
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.vocabulary import generator
from lingua_spark.modules.vocabulary.models import VocabularyEntry


def pytest_configure(config):
    config.addinivalue_line("markers", "api: Tests that go through the HTTP layer")


@pytest.fixture
def sample_words() -> list[VocabularyEntry]:
    return [
        VocabularyEntry(
            id=f"w{i}",
            term=term,
            definition=definition,
            part_of_speech="Noun",
            example_sentence=f"I ordered a {term}.",
            pronunciation=None,
        )
        for i, (term, definition) in enumerate(
            [
                ("latte", "拿鐵"),
                ("barista", "咖啡師"),
                ("espresso", "濃縮咖啡"),
                ("receipt", "收據"),
            ]
        )
    ]


@pytest.fixture
def generated_words() -> list[dict]:
    """Raw model output for the "Coffee Shop" topic."""
    return [
        {
            "term": term,
            "definition": f"{term} 的定義",
            "partOfSpeech": "Noun",
            "exampleSentence": f"The {term} is ready.",
            "pronunciation": f"/{term}/",
        }
        for term in ("latte", "barista", "espresso", "receipt", "pastry")
    ]


@pytest.fixture
def quiz_questions() -> list[dict]:
    return [
        {
            "question": f"What does word {i} mean?",
            "options": ["a", "b", "c", "d"],
            "correctAnswerIndex": i % 4,
            "explanation": f"Option {i % 4} is right.",
        }
        for i in range(5)
    ]


@pytest.fixture
def use_model(monkeypatch):
    """Route every generation call to a pydantic-ai TestModel."""

    def _use(output: dict) -> None:
        monkeypatch.setattr(
            generator,
            "_build_model_by_settings",
            lambda: TestModel(custom_output_args=output),
        )

    return _use


@pytest.fixture
async def db():
    await init_models()
    yield
    await drop_models()
    # Each test runs on its own event loop; start the next one on a fresh connection
    await engine.dispose()


@pytest.fixture
async def vocab(db):
    async with async_session_maker() as session:
        yield VocabularyService(session)


@pytest.fixture
async def client(db):
    from main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
