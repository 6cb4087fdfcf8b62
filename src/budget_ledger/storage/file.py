# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

"""
JSON document storage backend.

All entries live in one JSON object keyed by record name. Every write
serialises the whole document to a sibling temporary file and atomically
replaces the target, so a reader never observes a half-written document.
A missing file is an empty store.

Ledger operations run inside :meth:`JsonFileStorage.locked`, an
inter-process lock on a sibling ``<name>.lock`` file, so several processes
can share one ledger file without losing updates.
"""

from __future__ import annotations

import json
import os
import stat
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from filelock import FileLock

from budget_ledger.errors import StorageError
from budget_ledger.storage.interface import LedgerStorage
from budget_ledger.types import StorageKey


class JsonFileStorage(LedgerStorage):
    """
    Persistent JSON file storage backend.

    Parameters
    ----------
    file_path:
        Path to the JSON document. Created on the first write.
    lock_timeout:
        Seconds to wait for the file lock before raising
        :class:`filelock.Timeout`. Negative waits forever.
    """

    def __init__(self, file_path: str | Path, lock_timeout: float = -1) -> None:
        self._file_path = Path(file_path)
        self._lock_path = self._file_path.with_name(f"{self._file_path.name}.lock")
        self._file_lock = FileLock(self._lock_path, timeout=lock_timeout)

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def lock_path(self) -> Path:
        return self._lock_path

    def get(self, key: StorageKey) -> Any:
        document = self._read()
        return document[StorageKey(key).value]

    def set(self, key: StorageKey, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, entries: Mapping[StorageKey, Any]) -> None:
        with self.locked():
            document = self._read()
            for key, value in entries.items():
                document[StorageKey(key).value] = value
            self._write(document)

    def contains(self, key: StorageKey) -> bool:
        return StorageKey(key).value in self._read()

    @contextmanager
    def locked(self) -> Iterator[None]:
        self._lock_path.parent.mkdir(parents=True, exist_ok=True)
        with self._file_lock:
            yield

    # ─── Internals ────────────────────────────────────────────────────────────

    def _read(self) -> dict[str, Any]:
        if not self._file_path.exists():
            return {}
        try:
            document = json.loads(self._file_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise StorageError(f"Ledger file {self._file_path} is not valid JSON: {exc}") from exc
        if not isinstance(document, dict):
            raise StorageError(f"Ledger file {self._file_path} does not hold a JSON object.")
        return document

    def _write(self, document: dict[str, Any]) -> None:
        directory = self._file_path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            prefix=f".{self._file_path.name}.", suffix=".tmp", dir=directory
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as file_handle:
                json.dump(document, file_handle, indent=2, sort_keys=True)
                file_handle.write("\n")
            # mkstemp creates 0600; keep the mode the ledger file already had.
            if self._file_path.exists():
                os.chmod(temp_name, stat.S_IMODE(self._file_path.stat().st_mode))
            os.replace(temp_name, self._file_path)
        except BaseException:
            Path(temp_name).unlink(missing_ok=True)
            raise
