from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from lingua_spark.apis.deps import get_vocabulary_service
from lingua_spark.core.config import settings
from lingua_spark.core.db_services import VocabularyService
from lingua_spark.modules.backup import main as backup
from lingua_spark.modules.backup.auth import AuthenticationError
from lingua_spark.modules.backup.drive import StorageError
from lingua_spark.modules.backup.main import BackupNotFoundError, InvalidBackupError
from .schemas import (
    BackupStatusResponse,
    CallbackResponse,
    LocateResponse,
    LoginResponse,
    RestoreResponse,
    SaveResponse,
)


router = APIRouter()

BASE = f"/{settings.app.version}/backup"


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, AuthenticationError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    if isinstance(e, StorageError):
        return HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"message": str(e), "status_code": e.status_code, "body": e.body},
        )
    if isinstance(e, BackupNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if isinstance(e, InvalidBackupError):
        return HTTPException(status_code=422, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


@router.get(f"{BASE}/status", response_model=BackupStatusResponse, tags=["backup"])
async def backup_status() -> BackupStatusResponse:
    mgr = backup.backup_manager
    return BackupStatusResponse(
        status=mgr.auth.status,
        credential=mgr.auth.credential.state,
        file_name=mgr.drive.file_name,
    )


@router.post(f"{BASE}/login", response_model=LoginResponse, tags=["backup"])
async def login() -> LoginResponse:
    try:
        url = await backup.backup_manager.auth.begin_login()
    except AuthenticationError as e:
        raise _http_error(e)
    return LoginResponse(authorization_url=url)


@router.get(f"{BASE}/oauth/callback", response_model=CallbackResponse, tags=["backup"])
async def oauth_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
) -> CallbackResponse:
    try:
        await backup.backup_manager.auth.complete_login(
            code=code, state=state, error=error
        )
    except AuthenticationError as e:
        raise _http_error(e)
    return CallbackResponse(authenticated=True)


@router.post(f"{BASE}/logout", response_model=BackupStatusResponse, tags=["backup"])
async def logout() -> BackupStatusResponse:
    backup.backup_manager.auth.logout()
    return await backup_status()


@router.get(f"{BASE}/file", response_model=LocateResponse, tags=["backup"])
async def locate_backup() -> LocateResponse:
    try:
        found = await backup.backup_manager.locate()
    except (AuthenticationError, StorageError) as e:
        raise _http_error(e)
    return LocateResponse(file=found)


@router.post(f"{BASE}/save", response_model=SaveResponse, tags=["backup"])
async def save_backup(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> SaveResponse:
    snapshot = await svc.export_snapshot()
    try:
        saved = await backup.backup_manager.save(snapshot)
    except (AuthenticationError, StorageError) as e:
        raise _http_error(e)
    return SaveResponse(file=saved, words=len(snapshot.words))


@router.post(f"{BASE}/restore", response_model=RestoreResponse, tags=["backup"])
async def restore_backup(
    svc: VocabularyService = Depends(get_vocabulary_service),
) -> RestoreResponse:
    try:
        snapshot = await backup.backup_manager.restore()
    except (
        AuthenticationError,
        StorageError,
        BackupNotFoundError,
        InvalidBackupError,
    ) as e:
        raise _http_error(e)
    restored = await svc.replace_from_snapshot(snapshot)
    return RestoreResponse(words=restored)
