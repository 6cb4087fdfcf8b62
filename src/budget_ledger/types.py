# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, Field, model_validator

I128_MIN = -(2**127)
I128_MAX = 2**127 - 1

I128 = Annotated[int, Field(ge=I128_MIN, le=I128_MAX, strict=True)]

Principal = str
"""Opaque caller identity. Principals are compared by equality only."""


class StorageKey(str, Enum):
    """Names under which the three ledger records are persisted."""

    OWNER = "Owner"
    OPERATORS = "Operators"
    BUDGET = "Budget"


class BudgetState(BaseModel, frozen=True):
    """
    The persisted budget record.

    Attributes:
        current: The live budget value.
        min: Inclusive lower bound, fixed at initialization.
        max: Inclusive upper bound, fixed at initialization.
    """

    current: I128
    min: I128
    max: I128

    @model_validator(mode="after")
    def _check_bounds(self) -> BudgetState:
        if not self.min <= self.current <= self.max:
            raise ValueError(
                f"budget must satisfy min <= current <= max; "
                f"got min={self.min}, current={self.current}, max={self.max}."
            )
        return self

    @property
    def headroom(self) -> int:
        """Amount the budget can still grow before reaching ``max``."""
        return self.max - self.current

    @property
    def slack(self) -> int:
        """Amount the budget can still shrink before reaching ``min``."""
        return self.current - self.min

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-compatible storage form of this state."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: Any) -> BudgetState:
        """Rebuild a state from its storage form."""
        return cls.model_validate(record)


def is_i128(value: int) -> bool:
    """Return True if ``value`` fits in a signed 128-bit integer."""
    return I128_MIN <= value <= I128_MAX
