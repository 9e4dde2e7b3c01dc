from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import Field, model_validator

from lingua_spark.modules.stats.models import DailyStats, ScorePoint
from lingua_spark.modules.vocabulary.models import CamelModel, VocabularyEntry


class DriveFile(CamelModel):
    id: str
    name: str
    modified_time: Optional[str] = None


class BackupSnapshot(CamelModel):
    """Whole collection as stored in the remote backup file."""

    words: list[VocabularyEntry] = Field(default_factory=list)
    daily_stats: list[DailyStats] = Field(default_factory=list)
    quiz_history: list[ScorePoint] = Field(default_factory=list)
    saved_at: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, data: Any) -> Any:
        # Older backups hold just the array of words
        if isinstance(data, list):
            return {"words": data}
        return data

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @staticmethod
    def now() -> str:
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
