import pytest
from pydantic import ValidationError

from lingua_spark.modules.quiz.models import QuizQuestion
from lingua_spark.modules.vocabulary import generator
from lingua_spark.modules.vocabulary.generator import GenerationError
from lingua_spark.modules.vocabulary.main import EmptyInputError, GeneratorMode, WordGenerator
from lingua_spark.modules.vocabulary.models import VocabularyEntry


async def test_topic_generation_returns_unlearned_entries_with_unique_ids(
    use_model, generated_words
):
    use_model({"words": generated_words})

    words = await generator.generate_word_list_by_topic("Coffee Shop", 5)

    assert len(words) == 5
    assert len({w.id for w in words}) == 5
    assert all(not w.learned for w in words)
    assert words[0].term == "latte"
    assert words[0].part_of_speech == "Noun"


async def test_topic_generation_trims_to_requested_count(use_model, generated_words):
    use_model({"words": generated_words})

    words = await generator.generate_word_list_by_topic("Coffee Shop", 3)

    assert [w.term for w in words] == ["latte", "barista", "espresso"]


async def test_word_details_returns_single_entry(use_model):
    use_model(
        {
            "term": "serendipity",
            "definition": "意外發現美好事物的運氣",
            "partOfSpeech": "Noun",
            "exampleSentence": "Finding this café was pure serendipity.",
            "pronunciation": "/ˌserənˈdɪpəti/",
        }
    )

    word = await generator.generate_word_details("serendipity")

    assert isinstance(word, VocabularyEntry)
    assert word.term == "serendipity"
    assert word.pronunciation == "/ˌserənˈdɪpəti/"
    assert word.learned is False


async def test_missing_api_key_surfaces_as_generation_error(monkeypatch):
    monkeypatch.setattr(generator.settings, "gemini_api_key", None)
    monkeypatch.setattr(generator.settings, "model_provider", "google")

    with pytest.raises(GenerationError, match="Failed to generate words"):
        await generator.generate_word_list_by_topic("Movies")

    with pytest.raises(GenerationError, match="check the spelling"):
        await generator.generate_word_details("film")


async def test_quiz_prompt_uses_only_first_ten_words(monkeypatch, use_model, quiz_questions):
    use_model({"questions": quiz_questions})
    seen = []
    original = generator._quiz_instruction

    def spy(words):
        seen.extend(words)
        return original(words)

    monkeypatch.setattr(generator, "_quiz_instruction", spy)
    words = [
        VocabularyEntry(
            term=f"word{i}",
            definition=f"def{i}",
            part_of_speech="Noun",
            example_sentence="Example.",
        )
        for i in range(15)
    ]

    questions = await generator.generate_quiz_from_words(words)

    assert len(seen) == 10
    assert seen[-1].term == "word9"
    assert len(questions) == 5
    assert questions[2].correct_answer_index == 2


async def test_quiz_failure_raises_generation_error(monkeypatch, sample_words):
    def boom():
        raise RuntimeError("provider down")

    monkeypatch.setattr(generator, "_build_model_by_settings", boom)

    with pytest.raises(GenerationError, match="Failed to generate quiz"):
        await generator.generate_quiz_from_words(sample_words)


def test_quiz_question_requires_four_options_and_valid_index():
    with pytest.raises(ValidationError):
        QuizQuestion(question="q", options=["a", "b", "c"], correct_answer_index=0, explanation="")
    with pytest.raises(ValidationError):
        QuizQuestion(question="q", options=["a", "b", "c", "d"], correct_answer_index=4, explanation="")


async def test_blank_topic_is_rejected_before_any_request(monkeypatch):
    calls = []

    async def fake(topic, count):
        calls.append(topic)
        return []

    monkeypatch.setattr(generator, "generate_word_list_by_topic", fake)

    with pytest.raises(EmptyInputError):
        await WordGenerator().from_topic("   ")
    assert calls == []


async def test_word_generator_hands_results_to_owner(monkeypatch, sample_words):
    added = []

    async def fake_details(term):
        return sample_words[0]

    async def on_added(words):
        added.extend(words)

    monkeypatch.setattr(generator, "generate_word_details", fake_details)

    result = await WordGenerator(on_added).run(GeneratorMode.SINGLE, " latte ")

    assert result == [sample_words[0]]
    assert added == [sample_words[0]]


async def test_word_generator_reports_friendly_message(monkeypatch):
    async def failing(topic, count):
        raise GenerationError("Failed to generate words. Please try again.")

    monkeypatch.setattr(generator, "generate_word_list_by_topic", failing)

    with pytest.raises(GenerationError, match="contacting the AI"):
        await WordGenerator().from_topic("Movies")
