# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

import copy
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from budget_ledger.storage.interface import LedgerStorage
from budget_ledger.types import StorageKey


class MemoryStorage(LedgerStorage):
    """
    In-process memory store, suitable for single-process hosts and testing.

    Values are deep-copied on the way in and out so callers can never
    mutate stored state in place. All state is lost when the process exits.
    Ledgers sharing one instance are serialized through :meth:`locked`.
    """

    def __init__(self) -> None:
        self._entries: dict[StorageKey, Any] = {}
        self._lock = threading.RLock()

    def get(self, key: StorageKey) -> Any:
        with self._lock:
            return copy.deepcopy(self._entries[StorageKey(key)])

    def set(self, key: StorageKey, value: Any) -> None:
        with self._lock:
            self._entries[StorageKey(key)] = copy.deepcopy(value)

    def set_many(self, entries: Mapping[StorageKey, Any]) -> None:
        staged = {StorageKey(key): copy.deepcopy(value) for key, value in entries.items()}
        with self._lock:
            self._entries.update(staged)

    def contains(self, key: StorageKey) -> bool:
        with self._lock:
            return StorageKey(key) in self._entries

    @contextmanager
    def locked(self) -> Iterator[None]:
        with self._lock:
            yield
