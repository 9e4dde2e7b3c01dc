import json
from datetime import datetime, timedelta, timezone
from email import policy
from email.parser import BytesParser

import httpx
import pytest

from lingua_spark.core.config import GoogleDriveSettings
from lingua_spark.modules.backup.auth import AuthenticationError, DriveCredential
from lingua_spark.modules.backup.drive import DriveBackupClient, StorageError
from lingua_spark.modules.backup.main import BackupManager, BackupNotFoundError, InvalidBackupError
from lingua_spark.modules.backup.models import BackupSnapshot

FILE_NAME = "lingua_spark_backup_v1.json"


class FakeDrive:
    """Minimal in-memory stand-in for the Drive v3 endpoints we call."""

    def __init__(self):
        self.files: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []
        self.fail_with: tuple[int, str] | None = None
        self._next = 1

    def _parts(self, request: httpx.Request) -> dict[str, bytes]:
        raw = b"Content-Type: " + request.headers["content-type"].encode() + b"\r\n\r\n"
        msg = BytesParser(policy=policy.default).parsebytes(raw + request.read())
        return {
            part.get_param("name", header="content-disposition"): part.get_payload(decode=True)
            for part in msg.iter_parts()
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with:
            code, body = self.fail_with
            return httpx.Response(code, text=body)
        path = request.url.path
        if request.method == "GET" and path.endswith("/drive/v3/files"):
            files = [{"id": fid, "name": FILE_NAME, "modifiedTime": "2026-01-01T00:00:00Z"} for fid in self.files]
            return httpx.Response(200, json={"files": files})
        if request.method == "GET" and "/drive/v3/files/" in path:
            fid = path.rsplit("/", 1)[-1]
            return httpx.Response(200, content=self.files[fid])
        if request.method == "POST" and path.endswith("/upload/drive/v3/files"):
            fid = f"file{self._next}"
            self._next += 1
            self.files[fid] = self._parts(request)["file"]
            return httpx.Response(200, json={"id": fid, "name": FILE_NAME})
        if request.method == "PATCH" and "/upload/drive/v3/files/" in path:
            fid = path.rsplit("/", 1)[-1]
            self.files[fid] = self._parts(request)["file"]
            return httpx.Response(200, json={"id": fid, "name": FILE_NAME})
        return httpx.Response(404, text="not found")


@pytest.fixture
def drive():
    return FakeDrive()


@pytest.fixture
def credential():
    cred = DriveCredential()
    cred.set_token("token-123", datetime.now(timezone.utc) + timedelta(hours=1))
    return cred


@pytest.fixture
def client(drive, credential):
    return DriveBackupClient(
        credential,
        drive_settings=GoogleDriveSettings(),
        transport=httpx.MockTransport(drive.handler),
    )


async def test_find_returns_none_then_upload_creates(client, drive):
    assert await client.find_backup_file() is None

    result = await client.upload_backup_file([{"term": "latte"}])

    assert result["id"] == "file1"
    create = drive.requests[-1]
    assert create.method == "POST"
    assert create.url.params["uploadType"] == "multipart"
    assert create.headers["authorization"] == "Bearer token-123"


async def test_find_sends_name_query(client, drive):
    await client.find_backup_file()

    params = drive.requests[0].url.params
    assert params["q"] == f"name = '{FILE_NAME}' and trashed = false"
    assert params["spaces"] == "drive"


async def test_upload_with_id_replaces_in_place(client, drive):
    await client.upload_backup_file({"words": []})
    await client.upload_backup_file({"words": [{"term": "barista"}]}, "file1")

    assert drive.requests[-1].method == "PATCH"
    assert list(drive.files) == ["file1"]
    assert json.loads(drive.files["file1"]) == {"words": [{"term": "barista"}]}


async def test_download_returns_parsed_json(client, drive):
    drive.files["abc"] = json.dumps([{"term": "拿鐵"}], ensure_ascii=False).encode()

    data = await client.download_backup_file("abc")

    assert data == [{"term": "拿鐵"}]
    assert drive.requests[-1].url.params["alt"] == "media"


async def test_non_success_raises_storage_error(client, drive):
    drive.fail_with = (403, '{"error": "insufficientPermissions"}')

    with pytest.raises(StorageError) as exc:
        await client.find_backup_file()

    assert exc.value.status_code == 403
    assert "insufficientPermissions" in exc.value.body
    assert str(exc.value).startswith("Drive API Error: 403")


async def test_missing_or_expired_token_fails_before_request(drive):
    transport = httpx.MockTransport(drive.handler)
    unset = DriveBackupClient(DriveCredential(), drive_settings=GoogleDriveSettings(), transport=transport)
    expired_cred = DriveCredential()
    expired_cred.set_token("old", datetime.now(timezone.utc) - timedelta(seconds=1))
    expired = DriveBackupClient(expired_cred, drive_settings=GoogleDriveSettings(), transport=transport)

    with pytest.raises(AuthenticationError):
        await unset.find_backup_file()
    with pytest.raises(AuthenticationError, match="expired"):
        await expired.upload_backup_file({})
    assert drive.requests == []


async def test_manager_save_then_restore_round_trip(client, drive, sample_words):
    manager = BackupManager(auth=None, drive=client)
    snapshot = BackupSnapshot(words=sample_words)

    first = await manager.save(snapshot)
    second = await manager.save(snapshot)
    restored = await manager.restore()

    assert first.id == second.id == "file1"
    assert [r.method for r in drive.requests if r.method != "GET"] == ["POST", "PATCH"]
    assert [w.term for w in restored.words] == [w.term for w in sample_words]
    assert restored.saved_at is not None


async def test_restore_accepts_bare_word_list(client, drive, sample_words):
    drive.files["legacy"] = json.dumps([w.to_wire() for w in sample_words]).encode()

    restored = await BackupManager(auth=None, drive=client).restore()

    assert len(restored.words) == len(sample_words)
    assert restored.daily_stats == []


async def test_restore_without_backup_or_with_bad_shape(client, drive):
    manager = BackupManager(auth=None, drive=client)
    with pytest.raises(BackupNotFoundError):
        await manager.restore()

    drive.files["bad"] = b'{"words": "nope"}'
    with pytest.raises(InvalidBackupError):
        await manager.restore()
