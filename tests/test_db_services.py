from lingua_spark.modules.backup.models import BackupSnapshot
from lingua_spark.modules.stats.models import DailyStats, ScorePoint


async def test_add_words_appends_in_insertion_order(vocab, sample_words):
    await vocab.add_words(sample_words[2:])
    await vocab.add_words(sample_words[:2])

    terms = [w.term for w in await vocab.list_words()]

    assert terms == ["espresso", "receipt", "latte", "barista"]


async def test_toggle_learned_counts_only_when_becoming_learned(vocab, sample_words):
    await vocab.add_words(sample_words)

    assert (await vocab.toggle_learned("w1")).learned is True
    assert (await vocab.toggle_learned("w1")).learned is False
    assert await vocab.toggle_learned("missing") is None

    stats = await vocab.learning_stats()
    assert stats.words_learned == 0
    assert stats.total_words == 4
    assert stats.today.words_learned == 1


async def test_review_and_quiz_results_feed_statistics(vocab, sample_words):
    await vocab.add_words(sample_words)

    await vocab.record_review("w0")
    await vocab.record_review("w1")
    await vocab.record_review("unknown")
    await vocab.record_quiz_result(4, 5)

    stats = await vocab.learning_stats()
    assert stats.today.words_reviewed == 2
    assert stats.today.quiz_correct == 4
    assert stats.today.quiz_total == 5
    assert [p.score for p in stats.quiz_score_history] == [80]


async def test_delete_word(vocab, sample_words):
    await vocab.add_words(sample_words)

    assert await vocab.delete_word("w0") is True
    assert await vocab.delete_word("w0") is False
    assert await vocab.get_word("w0") is None


async def test_replace_from_snapshot_is_wholesale(vocab, sample_words):
    await vocab.add_words(sample_words)
    await vocab.record_quiz_result(1, 5)
    incoming = [sample_words[3], sample_words[3], sample_words[0]]
    snapshot = BackupSnapshot(
        words=incoming,
        daily_stats=[DailyStats(date="2026-01-02", words_reviewed=7)],
        quiz_history=[ScorePoint(date="2026-01-02", score=60)],
    )

    restored = await vocab.replace_from_snapshot(snapshot)

    assert restored == 2
    assert [w.id for w in await vocab.list_words()] == ["w3", "w0"]
    assert [d.date for d in await vocab.daily_stats()] == ["2026-01-02"]
    assert [p.score for p in await vocab.quiz_history()] == [60]


async def test_export_snapshot_uses_camel_case(vocab, sample_words):
    await vocab.add_words(sample_words[:1])

    wire = (await vocab.export_snapshot()).to_wire()

    assert wire["words"][0]["partOfSpeech"] == "Noun"
    assert "exampleSentence" in wire["words"][0]
    assert "dailyStats" in wire and "quizHistory" in wire
