"""Quick DB inspector for the word collection.

Prints collection counts, the most recently added words, today's study
numbers and the last few quiz scores.

Usage:
  python scripts/inspect_vocabulary.py
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# Ensure project root is on sys.path so `lingua_spark` imports resolve
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import func, select

from lingua_spark.core.db import get_session, init_models
from lingua_spark.core.db.schemas.vocabulary import QuizResult, Word
from lingua_spark.core.db_services import VocabularyService


async def main() -> int:
    await init_models()
    async for session in get_session():  # get_session is an async generator
        total = (await session.execute(select(func.count(Word.id)))).scalar() or 0
        learned = (
            await session.execute(
                select(func.count(Word.id)).where(Word.learned.is_(True))
            )
        ).scalar() or 0

        print("Vocabulary DB summary:")
        print(f"- Words: {total}")
        print(f"- Learned: {learned}")

        recent = (
            (
                await session.execute(
                    select(Word).order_by(Word.position.desc()).limit(5)
                )
            )
            .scalars()
            .all()
        )
        if not recent:
            print("- No words found.")
            return 0

        print("\nMost recent words:")
        for w in recent:
            mark = "x" if w.learned else " "
            print(f"  [{mark}] {w.term} ({w.part_of_speech}) | {w.definition[:60]!r}")

        stats = await VocabularyService(session).learning_stats()
        t = stats.today
        print(f"\nToday ({t.date}):")
        print(f"  learned={t.words_learned} reviewed={t.words_reviewed} quiz={t.quiz_correct}/{t.quiz_total}")

        quizzes = (
            (
                await session.execute(
                    select(QuizResult).order_by(QuizResult.id.desc()).limit(5)
                )
            )
            .scalars()
            .all()
        )
        print("\nRecent quizzes:")
        if not quizzes:
            print("- No quizzes taken.")
        for q in quizzes:
            print(f"  • {q.date} score={q.score}% ({q.correct}/{q.total})")

        return 0


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
