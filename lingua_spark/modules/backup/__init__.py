"""Drive backup module exports."""

from .auth import AuthenticationError, CredentialState, DriveCredential, GoogleAuthSession
from .drive import DriveBackupClient, StorageError
from .models import BackupSnapshot, DriveFile

__all__ = [
    "AuthenticationError",
    "CredentialState",
    "DriveCredential",
    "GoogleAuthSession",
    "DriveBackupClient",
    "StorageError",
    "BackupSnapshot",
    "DriveFile",
]
