"""Google Drive REST calls for the single backup file.

Each call needs a valid token on the shared ``DriveCredential``; a missing or
expired token fails before any request is made. Any non-2xx response raises
``StorageError`` carrying the status code and body. There is no backoff and no
refresh. Uploading without a file id always creates a new file, so callers
must re-locate the file by name before retrying a failed upload.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx

from lingua_spark.core.config import GoogleDriveSettings, settings
from lingua_spark.core.logging import get_logger
from lingua_spark.modules.backup.auth import DriveCredential
from lingua_spark.modules.backup.models import DriveFile

logger = get_logger(__name__)


class StorageError(Exception):
    """A Drive request returned a non-success status."""

    def __init__(self, status_code: int, body: str, reason: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"Drive API Error: {status_code} {reason} - {body}")


class DriveBackupClient:
    def __init__(
        self,
        credential: DriveCredential,
        *,
        drive_settings: Optional[GoogleDriveSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.credential = credential
        self.settings = drive_settings or settings.drive
        self._transport = transport

    @property
    def file_name(self) -> str:
        return self.settings.backup_file_name

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self.credential.bearer()}"}
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.request(method, url, headers=headers, **kwargs)
        if not response.is_success:
            raise StorageError(
                response.status_code, response.text, response.reason_phrase
            )
        return response

    async def find_backup_file(self) -> Optional[DriveFile]:
        """First non-trashed file with the backup name, or None."""
        params = {
            "q": f"name = '{self.file_name}' and trashed = false",
            "fields": "files(id,name,modifiedTime)",
            "spaces": "drive",
        }
        try:
            response = await self._request(
                "GET", f"{self.settings.api_base}/files", params=params
            )
        except Exception as e:
            logger.error(f"Error searching Drive: {e}")
            raise
        files = response.json().get("files") or []
        if not files:
            return None
        return DriveFile.model_validate(files[0])

    async def download_backup_file(self, file_id: str) -> Any:
        """Raw JSON content of ``file_id``; no schema check."""
        try:
            response = await self._request(
                "GET",
                f"{self.settings.api_base}/files/{file_id}",
                params={"alt": "media"},
            )
        except Exception as e:
            logger.error(f"Error downloading file: {e}")
            raise
        try:
            return response.json()
        except ValueError as e:
            raise StorageError(
                response.status_code, f"Backup file is not valid JSON: {e}"
            ) from e

    async def upload_backup_file(
        self, data: Any, existing_file_id: Optional[str] = None
    ) -> dict:
        """Create the backup file, or replace ``existing_file_id`` in place."""
        content = json.dumps(data, indent=2, ensure_ascii=False)
        metadata = {"name": self.file_name, "mimeType": "application/json"}
        files = {
            "metadata": ("metadata.json", json.dumps(metadata), "application/json"),
            "file": (self.file_name, content.encode("utf-8"), "application/json"),
        }

        url = f"{self.settings.upload_base}/files"
        method = "POST"
        if existing_file_id:
            url = f"{self.settings.upload_base}/files/{existing_file_id}"
            method = "PATCH"

        try:
            response = await self._request(
                method, url, params={"uploadType": "multipart"}, files=files
            )
        except Exception as e:
            logger.error(f"Upload failed: {e}")
            raise
        return response.json()
