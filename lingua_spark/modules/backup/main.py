"""Backup orchestration: save or restore the whole collection as one file."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError

from lingua_spark.core.logging import get_logger
from lingua_spark.modules.backup.auth import GoogleAuthSession
from lingua_spark.modules.backup.drive import DriveBackupClient
from lingua_spark.modules.backup.models import BackupSnapshot, DriveFile

logger = get_logger(__name__)


class BackupNotFoundError(Exception):
    pass


class InvalidBackupError(Exception):
    pass


class BackupManager:
    """Locate-then-write and locate-then-read over the Drive client."""

    def __init__(self, auth: GoogleAuthSession, drive: DriveBackupClient) -> None:
        self.auth = auth
        self.drive = drive

    async def locate(self) -> Optional[DriveFile]:
        return await self.drive.find_backup_file()

    async def save(self, snapshot: BackupSnapshot) -> DriveFile:
        if snapshot.saved_at is None:
            snapshot.saved_at = BackupSnapshot.now()
        existing = await self.drive.find_backup_file()
        result = await self.drive.upload_backup_file(
            snapshot.to_wire(), existing.id if existing else None
        )
        saved = DriveFile(
            id=result.get("id") or (existing.id if existing else ""),
            name=result.get("name") or self.drive.file_name,
            modified_time=result.get("modifiedTime"),
        )
        logger.info(
            f"Backup {'replaced' if existing else 'created'}: {saved.id} "
            f"({len(snapshot.words)} words)"
        )
        return saved

    async def restore(self) -> BackupSnapshot:
        existing = await self.drive.find_backup_file()
        if existing is None:
            raise BackupNotFoundError("No backup found")
        raw = await self.drive.download_backup_file(existing.id)
        try:
            return BackupSnapshot.model_validate(raw)
        except ValidationError as e:
            logger.error(f"Backup file {existing.id} has an unexpected shape: {e}")
            raise InvalidBackupError("Backup file has an unexpected shape") from e


auth_session = GoogleAuthSession()
drive_client = DriveBackupClient(auth_session.credential)
backup_manager = BackupManager(auth_session, drive_client)
