# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for budget-ledger tests."""

from __future__ import annotations

import pytest

from budget_ledger.auth import InvokerAuthenticator
from budget_ledger.ledger import BudgetLedger
from budget_ledger.storage.memory import MemoryStorage

from principals import OPERATOR, OWNER


@pytest.fixture
def auth() -> InvokerAuthenticator:
    return InvokerAuthenticator()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def ledger(storage: MemoryStorage, auth: InvokerAuthenticator) -> BudgetLedger:
    """An uninitialized ledger over in-memory storage."""
    return BudgetLedger(storage=storage, authenticator=auth)


@pytest.fixture
def active_ledger(ledger: BudgetLedger) -> BudgetLedger:
    """A ledger initialized with current=1000, min=0, max=10000 and no operators."""
    ledger.initialize(OWNER, initial=1000, min=0, max=10_000)
    return ledger


@pytest.fixture
def operated_ledger(active_ledger: BudgetLedger, auth: InvokerAuthenticator) -> BudgetLedger:
    """An active ledger with OPERATOR in the operator set."""
    with auth.invoked_by(OWNER):
        active_ledger.add_operator(OWNER, OPERATOR)
    return active_ledger
