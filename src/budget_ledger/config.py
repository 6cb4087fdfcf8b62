# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from pydantic import BaseModel


class LedgerConfig(BaseModel, frozen=True):
    """
    Configuration for a :class:`~budget_ledger.ledger.BudgetLedger`.

    Attributes:
        allow_reinitialize: When True, calling ``initialize`` on an active
            ledger overwrites the owner, clears the operator set and resets
            the budget. When False (the default) the second call raises
            :class:`~budget_ledger.errors.AlreadyInitializedError`.
        log_operations: When True, each successful mutation emits an INFO
            record and each rejected one a WARNING record to the
            ``budget_ledger.ledger`` logger.

    Example::

        ledger = BudgetLedger(config=LedgerConfig(log_operations=False))
    """

    allow_reinitialize: bool = False
    log_operations: bool = True
