# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from contextlib import AbstractContextManager
from typing import Any

from budget_ledger.types import StorageKey


class LedgerStorage(ABC):
    """
    Persistent key-value contract for the budget ledger.

    Values crossing this boundary are JSON-compatible: the owner is a
    string, the operator set a list of strings and the budget a mapping of
    ``current``/``min``/``max`` to integers. The ledger converts them to
    typed records on read.

    Implementors may back this with any key-value store. The default
    MemoryStorage is suitable for single-process use and testing only.
    """

    @abstractmethod
    def get(self, key: StorageKey) -> Any:
        """
        Return the value stored under ``key``.

        Raises:
            KeyError: If nothing is stored under ``key``.
        """
        ...

    @abstractmethod
    def set(self, key: StorageKey, value: Any) -> None:
        ...

    @abstractmethod
    def set_many(self, entries: Mapping[StorageKey, Any]) -> None:
        """Write several entries at once; either all land or none do."""
        ...

    @abstractmethod
    def contains(self, key: StorageKey) -> bool:
        ...

    @abstractmethod
    def locked(self) -> AbstractContextManager[None]:
        """
        Return a re-entrant critical section over the whole store.

        The ledger holds it across the read, validate and write phases of
        one operation, so writers sharing the backing store never
        interleave. It must exclude every other holder of the same store,
        including ones in other processes where the store is shared
        between processes.
        """
        ...