# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Checked signed 128-bit arithmetic.

Python integers never wrap, so range checks are explicit: a result that
falls outside ``[I128_MIN, I128_MAX]`` is reported as an error instead of
being stored.
"""
from __future__ import annotations

from budget_ledger.errors import BudgetOverflowError, BudgetUnderflowError
from budget_ledger.types import is_i128


def checked_add(current: int, amount: int) -> int:
    """
    Return ``current + amount``.

    Raises:
        BudgetOverflowError: If the sum leaves the signed 128-bit range.
    """
    result = current + amount
    if not is_i128(result):
        raise BudgetOverflowError(current=current, amount=amount)
    return result


def checked_sub(current: int, amount: int) -> int:
    """
    Return ``current - amount``.

    Raises:
        BudgetUnderflowError: If the difference leaves the signed 128-bit range.
    """
    result = current - amount
    if not is_i128(result):
        raise BudgetUnderflowError(current=current, amount=amount)
    return result
