# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
budget-ledger: governance-controlled budget ledger.

A single signed 128-bit budget value bounded by an inclusive floor and
ceiling. The owner manages a set of operators; only operators move the
budget, and never outside its bounds.

Quick start::

    from budget_ledger import BudgetLedger, InvokerAuthenticator

    auth = InvokerAuthenticator()
    ledger = BudgetLedger(authenticator=auth)
    ledger.initialize("owner", initial=1000, min=0, max=10_000)

    with auth.invoked_by("owner"):
        ledger.add_operator("owner", "ops")
    with auth.invoked_by("ops"):
        ledger.increase_budget("ops", 500)

    print(ledger.get_budget().current)  # 1500
"""
from __future__ import annotations

from budget_ledger.arithmetic import checked_add, checked_sub
from budget_ledger.auth import Authenticator, InvokerAuthenticator, PermissiveAuthenticator
from budget_ledger.client import OPERATIONS, InvokerView, LedgerClient
from budget_ledger.config import LedgerConfig
from budget_ledger.errors import (
    AlreadyInitializedError,
    AlreadyOperatorError,
    AuthenticationError,
    BelowMinError,
    BudgetError,
    BudgetErrorCode,
    BudgetLedgerError,
    BudgetOverflowError,
    BudgetUnderflowError,
    ConfigurationError,
    ExceedsMaxError,
    InvalidLimitsError,
    NotInitializedError,
    NotOperatorError,
    NotOperatorFoundError,
    NotOwnerError,
    StorageError,
    UnknownOperationError,
)
from budget_ledger.ledger import BudgetLedger
from budget_ledger.storage import JsonFileStorage, LedgerStorage, MemoryStorage
from budget_ledger.types import I128_MAX, I128_MIN, BudgetState, Principal, StorageKey

__version__ = "0.1.0"

__all__ = [
    # Core types
    "Principal",
    "BudgetState",
    "StorageKey",
    "I128_MIN",
    "I128_MAX",
    # Configuration
    "LedgerConfig",
    # Ledger
    "BudgetLedger",
    "checked_add",
    "checked_sub",
    # Client
    "LedgerClient",
    "InvokerView",
    "OPERATIONS",
    # Authentication
    "Authenticator",
    "InvokerAuthenticator",
    "PermissiveAuthenticator",
    # Storage
    "LedgerStorage",
    "MemoryStorage",
    "JsonFileStorage",
    # Errors
    "BudgetLedgerError",
    "BudgetError",
    "BudgetErrorCode",
    "NotOwnerError",
    "NotOperatorError",
    "AlreadyOperatorError",
    "NotOperatorFoundError",
    "BudgetOverflowError",
    "BudgetUnderflowError",
    "ExceedsMaxError",
    "BelowMinError",
    "InvalidLimitsError",
    "AuthenticationError",
    "NotInitializedError",
    "AlreadyInitializedError",
    "UnknownOperationError",
    "ConfigurationError",
    "StorageError",
    "__version__",
]
