from __future__ import annotations

from typing import Optional

from lingua_spark.modules.backup.auth import AuthStatus, CredentialState
from lingua_spark.modules.backup.models import DriveFile
from lingua_spark.modules.vocabulary.models import CamelModel


class BackupStatusResponse(CamelModel):
    status: AuthStatus
    credential: CredentialState
    file_name: str


class LoginResponse(CamelModel):
    authorization_url: str


class CallbackResponse(CamelModel):
    authenticated: bool


class LocateResponse(CamelModel):
    file: Optional[DriveFile] = None


class SaveResponse(CamelModel):
    file: DriveFile
    words: int


class RestoreResponse(CamelModel):
    words: int
