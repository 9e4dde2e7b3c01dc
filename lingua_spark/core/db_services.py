"""Database service for the word collection and learning statistics.

``VocabularyService`` is the owner of the collection: views report mutations
(learned, reviewed, deleted, quiz finished) and this service applies them.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lingua_spark.core.db.schemas.vocabulary import DailyStatsRow, QuizResult, Word
from lingua_spark.modules.backup.models import BackupSnapshot
from lingua_spark.modules.stats.models import DailyStats, LearningStats, ScorePoint
from lingua_spark.modules.vocabulary.models import VocabularyEntry


def _today() -> str:
    return date.today().isoformat()


def to_entry(row: Word) -> VocabularyEntry:
    return VocabularyEntry(
        id=row.id,
        term=row.term,
        definition=row.definition,
        part_of_speech=row.part_of_speech,
        example_sentence=row.example_sentence,
        pronunciation=row.pronunciation,
        learned=bool(row.learned),
    )


def _to_row(entry: VocabularyEntry, position: int) -> Word:
    return Word(
        id=entry.id,
        term=entry.term,
        definition=entry.definition,
        part_of_speech=entry.part_of_speech,
        example_sentence=entry.example_sentence,
        pronunciation=entry.pronunciation,
        learned=bool(entry.learned),
        position=position,
    )


def _to_daily(row: DailyStatsRow) -> DailyStats:
    return DailyStats(
        date=row.date,
        words_learned=row.words_learned,
        words_reviewed=row.words_reviewed,
        quiz_correct=row.quiz_correct,
        quiz_total=row.quiz_total,
    )


class VocabularyService:
    """Service for the stored collection and its statistics."""

    def __init__(self, session: AsyncSession):
        self.session = session

    # Collection ---------------------------------------------------------
    async def list_words(self) -> list[VocabularyEntry]:
        rows = await self.session.execute(
            select(Word).order_by(Word.position, Word.created_at)
        )
        return [to_entry(w) for w in rows.scalars().all()]

    async def get_word(self, word_id: str) -> Optional[VocabularyEntry]:
        row = await self.session.get(Word, word_id)
        return to_entry(row) if row else None

    async def add_words(self, entries: Iterable[VocabularyEntry]) -> list[VocabularyEntry]:
        """Append entries at the end of the collection."""
        last = (await self.session.execute(select(func.max(Word.position)))).scalar()
        position = (last or 0) + 1
        added: list[VocabularyEntry] = []
        for entry in entries:
            self.session.add(_to_row(entry, position))
            position += 1
            added.append(entry)
        await self.session.commit()
        return added

    async def delete_word(self, word_id: str) -> bool:
        row = await self.session.get(Word, word_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.commit()
        return True

    async def toggle_learned(self, word_id: str) -> Optional[VocabularyEntry]:
        row = await self.session.get(Word, word_id)
        if row is None:
            return None
        row.learned = not row.learned
        if row.learned:
            stats = await self._today_row()
            stats.words_learned += 1
        await self.session.commit()
        await self.session.refresh(row)
        return to_entry(row)

    # Statistics ---------------------------------------------------------
    async def _today_row(self) -> DailyStatsRow:
        today = _today()
        row = await self.session.get(DailyStatsRow, today)
        if row is None:
            row = DailyStatsRow(
                date=today,
                words_learned=0,
                words_reviewed=0,
                quiz_correct=0,
                quiz_total=0,
            )
            self.session.add(row)
        return row

    async def record_review(self, word_id: str) -> None:
        if await self.session.get(Word, word_id) is None:
            return
        stats = await self._today_row()
        stats.words_reviewed += 1
        await self.session.commit()

    async def record_quiz_result(self, score: int, total: int) -> None:
        stats = await self._today_row()
        stats.quiz_correct += score
        stats.quiz_total += total
        percentage = round(score / total * 100) if total else 0
        self.session.add(
            QuizResult(date=stats.date, score=percentage, correct=score, total=total)
        )
        await self.session.commit()

    async def daily_stats(self) -> list[DailyStats]:
        rows = await self.session.execute(select(DailyStatsRow).order_by(DailyStatsRow.date))
        return [_to_daily(r) for r in rows.scalars().all()]

    async def quiz_history(self) -> list[ScorePoint]:
        rows = await self.session.execute(select(QuizResult).order_by(QuizResult.id))
        return [ScorePoint(date=r.date, score=r.score) for r in rows.scalars().all()]

    async def learning_stats(self) -> LearningStats:
        learned = (
            await self.session.execute(
                select(func.count(Word.id)).where(Word.learned.is_(True))
            )
        ).scalar() or 0
        total = (await self.session.execute(select(func.count(Word.id)))).scalar() or 0
        daily = await self.daily_stats()
        today = next((d for d in daily if d.date == _today()), DailyStats(date=_today()))
        return LearningStats(
            words_learned=learned,
            total_words=total,
            quiz_score_history=await self.quiz_history(),
            today=today,
            daily=daily,
        )

    # Backups ------------------------------------------------------------
    async def export_snapshot(self) -> BackupSnapshot:
        return BackupSnapshot(
            words=await self.list_words(),
            daily_stats=await self.daily_stats(),
            quiz_history=await self.quiz_history(),
        )

    async def replace_from_snapshot(self, snapshot: BackupSnapshot) -> int:
        """Replace the collection and statistics wholesale."""
        await self.session.execute(delete(Word))
        await self.session.execute(delete(DailyStatsRow))
        await self.session.execute(delete(QuizResult))
        # Duplicate ids in a hand-edited backup keep the last occurrence
        unique: dict[str, VocabularyEntry] = {}
        for entry in snapshot.words:
            unique[entry.id] = entry
        for position, entry in enumerate(unique.values(), start=1):
            self.session.add(_to_row(entry, position))
        days = {d.date: d for d in snapshot.daily_stats}
        for d in days.values():
            self.session.add(
                DailyStatsRow(
                    date=d.date,
                    words_learned=d.words_learned,
                    words_reviewed=d.words_reviewed,
                    quiz_correct=d.quiz_correct,
                    quiz_total=d.quiz_total,
                )
            )
        for point in snapshot.quiz_history:
            self.session.add(QuizResult(date=point.date, score=point.score))
        await self.session.commit()
        return len(unique)

