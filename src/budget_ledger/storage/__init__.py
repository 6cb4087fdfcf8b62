# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation

from budget_ledger.storage.file import JsonFileStorage
from budget_ledger.storage.interface import LedgerStorage
from budget_ledger.storage.memory import MemoryStorage

__all__ = ["LedgerStorage", "MemoryStorage", "JsonFileStorage"]
