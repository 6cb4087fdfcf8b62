# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from enum import IntEnum


class BudgetErrorCode(IntEnum):
    """Numbered failure kinds returned by ledger operations."""

    NOT_OWNER = 1
    NOT_OPERATOR = 2
    ALREADY_OPERATOR = 3
    NOT_OPERATOR_FOUND = 4
    OVERFLOW = 5
    UNDERFLOW = 6
    EXCEEDS_MAX = 7
    BELOW_MIN = 8
    INVALID_LIMITS = 9


class BudgetLedgerError(Exception):
    """Base class for all budget-ledger errors."""

    def __init__(self, message: str, code: str = "LEDGER_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class BudgetError(BudgetLedgerError):
    """
    A validation failure of a ledger operation.

    Raised before any state is written. Every subclass corresponds to
    exactly one :class:`BudgetErrorCode`.

    Attributes:
        kind: The numbered failure kind.
    """

    kind: BudgetErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message, code=self.kind.name)

    @property
    def error_code(self) -> int:
        """The numeric value of :attr:`kind`."""
        return int(self.kind)

    @staticmethod
    def from_code(code: int) -> type[BudgetError]:
        """
        Return the exception class registered for a numeric error code.

        Raises:
            ValueError: If ``code`` is not a known error code.
        """
        kind = BudgetErrorCode(code)
        return _ERRORS_BY_KIND[kind]


class NotOwnerError(BudgetError):
    """Raised when a non-owner calls an owner-only operation."""

    kind = BudgetErrorCode.NOT_OWNER

    def __init__(self, caller: str) -> None:
        super().__init__(f"Principal '{caller}' is not the ledger owner.")
        self.caller = caller


class NotOperatorError(BudgetError):
    """Raised when a non-operator tries to change the budget."""

    kind = BudgetErrorCode.NOT_OPERATOR

    def __init__(self, caller: str) -> None:
        super().__init__(f"Principal '{caller}' is not an operator.")
        self.caller = caller


class AlreadyOperatorError(BudgetError):
    """Raised when adding a principal that is already an operator."""

    kind = BudgetErrorCode.ALREADY_OPERATOR

    def __init__(self, operator: str) -> None:
        super().__init__(f"Principal '{operator}' is already an operator.")
        self.operator = operator


class NotOperatorFoundError(BudgetError):
    """Raised when removing a principal that is not an operator."""

    kind = BudgetErrorCode.NOT_OPERATOR_FOUND

    def __init__(self, operator: str) -> None:
        super().__init__(f"Principal '{operator}' is not in the operator set.")
        self.operator = operator


class BudgetOverflowError(BudgetError):
    """
    Raised when an addition leaves the signed 128-bit range.

    Attributes:
        current: The budget value before the operation.
        amount: The amount that was added.
    """

    kind = BudgetErrorCode.OVERFLOW

    def __init__(self, current: int, amount: int) -> None:
        super().__init__(
            f"Adding {amount} to {current} overflows the 128-bit budget range."
        )
        self.current = current
        self.amount = amount


class BudgetUnderflowError(BudgetError):
    """
    Raised when a subtraction leaves the signed 128-bit range.

    Attributes:
        current: The budget value before the operation.
        amount: The amount that was subtracted.
    """

    kind = BudgetErrorCode.UNDERFLOW

    def __init__(self, current: int, amount: int) -> None:
        super().__init__(
            f"Subtracting {amount} from {current} underflows the 128-bit budget range."
        )
        self.current = current
        self.amount = amount


class ExceedsMaxError(BudgetError):
    """Raised when the resulting budget would be above ``max``."""

    kind = BudgetErrorCode.EXCEEDS_MAX

    def __init__(self, requested: int, maximum: int) -> None:
        super().__init__(
            f"Resulting budget {requested} exceeds the maximum of {maximum}."
        )
        self.requested = requested
        self.maximum = maximum


class BelowMinError(BudgetError):
    """Raised when the resulting budget would be below ``min``."""

    kind = BudgetErrorCode.BELOW_MIN

    def __init__(self, requested: int, minimum: int) -> None:
        super().__init__(
            f"Resulting budget {requested} is below the minimum of {minimum}."
        )
        self.requested = requested
        self.minimum = minimum


class InvalidLimitsError(BudgetError):
    """Raised when initialization limits do not satisfy min <= initial <= max."""

    kind = BudgetErrorCode.INVALID_LIMITS

    def __init__(self, initial: int, minimum: int, maximum: int, detail: str | None = None) -> None:
        message = (
            f"Invalid limits: need min <= initial <= max; "
            f"got min={minimum}, initial={initial}, max={maximum}."
        )
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.initial = initial
        self.minimum = minimum
        self.maximum = maximum


_ERRORS_BY_KIND: dict[BudgetErrorCode, type[BudgetError]] = {
    cls.kind: cls
    for cls in (
        NotOwnerError,
        NotOperatorError,
        AlreadyOperatorError,
        NotOperatorFoundError,
        BudgetOverflowError,
        BudgetUnderflowError,
        ExceedsMaxError,
        BelowMinError,
        InvalidLimitsError,
    )
}


class AuthenticationError(BudgetLedgerError):
    """
    Raised by an authenticator when the invoking identity does not match
    the claimed principal. Aborts the whole operation before any ledger
    logic runs; deliberately not a :class:`BudgetError`.
    """

    def __init__(self, principal: str, invoker: str | None = None) -> None:
        invoker_text = f"'{invoker}'" if invoker is not None else "no authenticated invoker"
        super().__init__(
            f"Authorization for '{principal}' was not given ({invoker_text}).",
            code="AUTHENTICATION_FAILED",
        )
        self.principal = principal
        self.invoker = invoker


class NotInitializedError(BudgetLedgerError):
    """Raised when the ledger is used before :meth:`initialize` has run."""

    def __init__(self, key: str | None = None) -> None:
        key_text = f" (missing record '{key}')" if key else ""
        super().__init__(
            f"Budget ledger is not initialized{key_text}.",
            code="NOT_INITIALIZED",
        )
        self.key = key


class AlreadyInitializedError(BudgetLedgerError):
    """Raised when :meth:`initialize` is called on an active ledger."""

    def __init__(self) -> None:
        super().__init__(
            "Budget ledger is already initialized. "
            "Set LedgerConfig(allow_reinitialize=True) to overwrite it.",
            code="ALREADY_INITIALIZED",
        )


class UnknownOperationError(BudgetLedgerError):
    """Raised when a client invokes an operation name the ledger does not expose."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            f"'{operation}' is not a ledger operation.",
            code="UNKNOWN_OPERATION",
        )
        self.operation = operation


class StorageError(BudgetLedgerError):
    """Raised when a storage backend holds data it cannot decode."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="STORAGE_ERROR")


class ConfigurationError(BudgetLedgerError):
    """Raised when ledger components are wired together incorrectly."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")
