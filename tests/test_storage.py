from __future__ import annotations

from unittest import mock

import pytest
from google.api_core import exceptions

from lingua_lens.errors import StorageError
from lingua_lens.storage import GCSStore, InMemoryStore, JsonFileStore, create_store


def test_in_memory_store_get_set_delete() -> None:
    store = InMemoryStore()

    assert store.get("key") is None
    store.set("key", "value")
    assert store.get("key") == "value"
    store.delete("key")
    store.delete("key")
    assert store.get("key") is None


def test_json_file_store_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "history.json"

    JsonFileStore(str(path)).set("linguaLensHistory", "[]")

    assert path.exists()
    assert JsonFileStore(str(path)).get("linguaLensHistory") == "[]"


def test_json_file_store_delete_keeps_other_keys(tmp_path) -> None:
    store = JsonFileStore(str(tmp_path / "store.json"))
    store.set("a", "1")
    store.set("b", "2")

    store.delete("a")

    assert store.get("a") is None
    assert store.get("b") == "2"


def test_json_file_store_corrupt_file_raises_storage_error(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(StorageError):
        JsonFileStore(str(path)).get("a")


def _gcs_store() -> tuple[GCSStore, mock.MagicMock]:
    client = mock.MagicMock()
    blob = client.bucket.return_value.blob.return_value
    return GCSStore("my-bucket", prefix="/sessions/", client=client), blob


def test_gcs_store_reads_and_writes_blobs() -> None:
    store, blob = _gcs_store()
    blob.exists.return_value = True
    blob.download_as_text.return_value = "[]"

    assert store.get("linguaLensHistory") == "[]"
    store.bucket.blob.assert_called_with("sessions/linguaLensHistory.json")

    store.set("linguaLensHistory", "[1]")
    blob.upload_from_string.assert_called_once_with("[1]", content_type="application/json")


def test_gcs_store_missing_blob_and_errors() -> None:
    store, blob = _gcs_store()
    blob.exists.return_value = False
    assert store.get("k") is None

    blob.delete.side_effect = exceptions.NotFound("gone")
    store.delete("k")

    blob.upload_from_string.side_effect = exceptions.ServiceUnavailable("down")
    with pytest.raises(StorageError):
        store.set("k", "v")


def test_create_store_selects_backend() -> None:
    assert isinstance(create_store("memory"), InMemoryStore)
    with pytest.raises(ValueError):
        create_store("redis")


def test_json_file_store_invalid_utf8_raises_storage_error(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_bytes(b'{"a": "\xff\xfe"}')

    with pytest.raises(StorageError):
        JsonFileStore(str(path)).get("a")


def test_json_file_store_overwrites_unreadable_file(tmp_path) -> None:
    path = tmp_path / "store.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    store = JsonFileStore(str(path))

    store.set("a", "1")

    assert store.get("a") == "1"

    path.write_text("{broken", encoding="utf-8")
    store.delete("a")
    assert store.get("a") is None


def test_json_file_store_failed_write_leaves_no_temp_file(tmp_path, monkeypatch) -> None:
    store = JsonFileStore(str(tmp_path / "store.json"))

    def fail_replace(_src, _dst):
        raise OSError("disk full")

    monkeypatch.setattr("lingua_lens.storage.os.replace", fail_replace)
    with pytest.raises(StorageError):
        store.set("a", "1")

    assert list(tmp_path.iterdir()) == []
