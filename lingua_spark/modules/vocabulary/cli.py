from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Callable

from lingua_spark.core.logging import setup_logging
from lingua_spark.modules.quiz.models import QuizStatus
from lingua_spark.modules.quiz.state import QuizSession
from lingua_spark.modules.vocabulary import generator
from lingua_spark.modules.vocabulary.generator import DEFAULT_WORD_COUNT, GenerationError
from lingua_spark.modules.vocabulary.main import EmptyInputError, WordGenerator
from lingua_spark.modules.vocabulary.models import VocabularyEntry


def _dump(words: list[VocabularyEntry]) -> str:
    return json.dumps([w.to_wire() for w in words], indent=2, ensure_ascii=False)


def _load_words(path: str) -> list[VocabularyEntry]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    # Accept either a bare list or a backup snapshot
    if isinstance(data, dict):
        data = data.get("words", [])
    return [VocabularyEntry.model_validate(w) for w in data]


async def run_quiz(
    words: list[VocabularyEntry],
    *,
    ask: Callable[[str], str] = input,
    out: Callable[[str], None] = print,
) -> QuizSession:
    """Play a quiz in the terminal; returns the finished (or failed) session."""
    session = QuizSession(words=words, generate=generator.generate_quiz_from_words)
    out("Crafting your quiz...")
    state = await session.start()
    if state.status == QuizStatus.ERROR:
        out(state.error or "Quiz failed")
        return session

    while session.status == QuizStatus.ACTIVE:
        q = session.current
        assert q is not None
        out(f"\nQuestion {session.current_index + 1}/{len(session.questions)}")
        out(q.question)
        for i, option in enumerate(q.options, start=1):
            out(f"  {i}. {option}")
        while not session.is_answered:
            raw = ask("Your answer (1-4): ").strip()
            if raw.isdigit() and 1 <= int(raw) <= len(q.options):
                session.select_option(int(raw) - 1)
        mark = "Correct!" if session.selected_option == q.correct_answer_index else (
            f"Wrong. Answer: {q.options[q.correct_answer_index]}"
        )
        out(mark)
        out(f"Explanation: {q.explanation}")
        await session.next_question()

    s = session.summary()
    out(f"\nQuiz Complete! You scored {s.score} out of {s.total} ({s.percentage}%)")
    return session


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lingua-spark", description="AI vocabulary builder"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    t = sub.add_parser("topic", help="Generate a word list for a topic")
    t.add_argument("topic", help="Topic, e.g. 'Coffee Shop'")
    t.add_argument("--count", "-n", type=int, default=DEFAULT_WORD_COUNT)

    lk = sub.add_parser("lookup", help="Look up a single word")
    lk.add_argument("term")

    qz = sub.add_parser("quiz", help="Take a quiz on words from a JSON file")
    qz.add_argument("words_file", help="Word list or backup snapshot (JSON)")

    parser.add_argument("--log-level", default="WARNING")

    args = parser.parse_args(argv)
    setup_logging(args.log_level.upper())

    svc = WordGenerator()
    try:
        if args.cmd == "topic":
            words = asyncio.run(svc.from_topic(args.topic, args.count))
            print(_dump(words))
            return 0
        if args.cmd == "lookup":
            word = asyncio.run(svc.lookup(args.term))
            print(_dump([word]))
            return 0
        if args.cmd == "quiz":
            session = asyncio.run(run_quiz(_load_words(args.words_file)))
            return 0 if session.status == QuizStatus.FINISHED else 1
    except (EmptyInputError, GenerationError) as e:
        print(str(e))
        return 1

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
