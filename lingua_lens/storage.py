"""
Key-value persistence used by the translation history.

Three interchangeable stores are provided:
- InMemoryStore: process-local dict, used in tests and throwaway sessions.
- JsonFileStore: a single JSON object file on local disk.
- GCSStore: one blob per key in a Google Cloud Storage bucket.
"""

import abc
import json
import logging
import os
import tempfile
from typing import Dict, Optional, Tuple

from google.api_core import exceptions
from google.cloud import storage

from lingua_lens import config
from lingua_lens.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(abc.ABC):
    """Minimal get/set/delete interface over string values."""

    @abc.abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value stored under ``key``, or None if absent."""

    @abc.abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abc.abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""


class InMemoryStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """
    Stores all keys in one JSON object file.

    Writes go to a temporary file in the same directory which then replaces
    the target, so a crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: str):
        self.path = path

    def _read_all(self) -> Dict[str, str]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            # ValueError covers json.JSONDecodeError and UnicodeDecodeError
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected content in {self.path}: expected a JSON object")
        return data

    def _read_for_update(self) -> Tuple[Dict[str, str], bool]:
        """Return the current data and whether the file must be rewritten.

        An unreadable file is replaced rather than blocking every later write.
        """
        try:
            return self._read_all(), False
        except StorageError as e:
            logger.error(f"Discarding unreadable store file: {e}")
            return {}, True

    def _write_all(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StorageError(f"Could not write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        data, _ = self._read_for_update()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data, corrupt = self._read_for_update()
        if data.pop(key, None) is not None or corrupt:
            self._write_all(data)


class GCSStore(KeyValueStore):
    """
    Stores each key as a text blob under ``{prefix}/{key}.json``.

    Useful when the web app runs on Cloud Run, where local disk does not
    survive instance restarts.
    """

    def __init__(
        self,
        bucket_name: str,
        prefix: str = config.Config.GCS_PREFIX,
        client: Optional[storage.Client] = None,
    ):
        """
        Initialize GCS store.

        Args:
            bucket_name: Name of the GCS bucket to use
            prefix: Folder inside the bucket holding the keys
            client: Optional ``storage.Client``; created from default
                credentials when omitted.
        """
        self.client = client or storage.Client()
        self.bucket_name = bucket_name
        self.bucket = self.client.bucket(bucket_name)
        self.prefix = prefix.strip("/")

    def _blob_path(self, key: str) -> str:
        return f"{self.prefix}/{key}.json" if self.prefix else f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        blob = self.bucket.blob(self._blob_path(key))
        try:
            if not blob.exists():
                return None
            return blob.download_as_text(encoding="utf-8")
        except exceptions.GoogleAPICallError as e:
            raise StorageError(f"Error reading gs://{self.bucket_name}/{blob.name}: {e}") from e

    def set(self, key: str, value: str) -> None:
        blob = self.bucket.blob(self._blob_path(key))
        try:
            blob.upload_from_string(value, content_type="application/json")
        except exceptions.GoogleAPICallError as e:
            raise StorageError(f"Error saving gs://{self.bucket_name}/{blob.name}: {e}") from e

    def delete(self, key: str) -> None:
        blob = self.bucket.blob(self._blob_path(key))
        try:
            blob.delete()
        except exceptions.NotFound:
            return
        except exceptions.GoogleAPICallError as e:
            raise StorageError(f"Error deleting gs://{self.bucket_name}/{blob.name}: {e}") from e


def create_store(backend: str = config.Config.STORAGE_BACKEND) -> KeyValueStore:
    """
    Build the store selected by configuration.

    Raises:
        ValueError: If the backend name is unknown or its settings are missing.
    """
    if backend == config.StorageBackends.MEMORY:
        return InMemoryStore()
    if backend == config.StorageBackends.FILE:
        return JsonFileStore(config.Config.HISTORY_FILE)
    if backend == config.StorageBackends.GCS:
        if not config.Config.GCS_BUCKET:
            raise ValueError("LINGUA_LENS_GCS_BUCKET must be set to use the 'gcs' storage backend.")
        return GCSStore(config.Config.GCS_BUCKET, config.Config.GCS_PREFIX)
    raise ValueError(
        f"Unknown storage backend '{backend}'. Supported: {sorted(config.StorageBackends.SUPPORTED)}"
    )
