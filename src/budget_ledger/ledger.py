# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from pydantic import ValidationError

from budget_ledger.arithmetic import checked_add, checked_sub
from budget_ledger.auth import Authenticator, InvokerAuthenticator
from budget_ledger.config import LedgerConfig
from budget_ledger.errors import (
    AlreadyInitializedError,
    AlreadyOperatorError,
    BelowMinError,
    BudgetError,
    ExceedsMaxError,
    InvalidLimitsError,
    NotInitializedError,
    NotOperatorError,
    NotOperatorFoundError,
    NotOwnerError,
    StorageError,
)
from budget_ledger.storage.interface import LedgerStorage
from budget_ledger.storage.memory import MemoryStorage
from budget_ledger.types import BudgetState, Principal, StorageKey, is_i128

logger = logging.getLogger("budget_ledger.ledger")


class BudgetLedger:
    """
    Governance-controlled budget ledger.

    Holds one signed 128-bit budget value bounded by an inclusive ``min``
    and ``max``. The owner manages the operator set; operators move the
    budget within its bounds. Bounds and owner are fixed at initialization.

    Every operation reads state, validates the caller and the requested
    change, then writes back. Validation always precedes the write, so a
    rejected call leaves storage untouched. Operations run under this
    instance's lock and the storage's :meth:`~LedgerStorage.locked` section,
    so no two of them interleave their read and write phases, even across
    ledgers or processes sharing one store.

    Example::

        auth = InvokerAuthenticator()
        ledger = BudgetLedger(authenticator=auth)
        ledger.initialize("owner", initial=1000, min=0, max=10_000)
        with auth.invoked_by("owner"):
            ledger.add_operator("owner", "ops")
        with auth.invoked_by("ops"):
            assert ledger.increase_budget("ops", 500) == 1500
    """

    def __init__(
        self,
        storage: LedgerStorage | None = None,
        authenticator: Authenticator | None = None,
        config: LedgerConfig | None = None,
    ) -> None:
        self._storage: LedgerStorage = storage if storage is not None else MemoryStorage()
        self._auth: Authenticator = (
            authenticator if authenticator is not None else InvokerAuthenticator()
        )
        self._config = config or LedgerConfig()
        self._lock = threading.RLock()

    @property
    def storage(self) -> LedgerStorage:
        return self._storage

    @property
    def authenticator(self) -> Authenticator:
        return self._auth

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self, owner: Principal, initial: int, min: int, max: int) -> None:  # noqa: A002
        """
        Create the owner, an empty operator set and the budget record.

        No authentication is performed: whoever deploys the ledger decides
        who may initialize it.

        Args:
            owner: The principal that will manage operators.
            initial: Starting budget value.
            min: Inclusive lower bound.
            max: Inclusive upper bound.

        Raises:
            InvalidLimitsError: If ``min <= initial <= max`` does not hold or
                a value is outside the signed 128-bit range. Nothing is
                written.
            AlreadyInitializedError: If the ledger is already active and
                re-initialization is not enabled in the config.
            TypeError: If ``owner`` is not a string.
        """
        if not isinstance(owner, str):
            raise TypeError(f"owner must be a string; got {owner!r}.")
        if not owner:
            raise ValueError("owner must be a non-empty string.")
        with self._critical():
            try:
                state = self._validate_limits(initial, min, max)
            except InvalidLimitsError as exc:
                self._log_rejection("initialize", owner, exc)
                raise

            if self.is_initialized() and not self._config.allow_reinitialize:
                raise AlreadyInitializedError()

            self._storage.set_many(
                {
                    StorageKey.OWNER: owner,
                    StorageKey.OPERATORS: [],
                    StorageKey.BUDGET: state.to_record(),
                }
            )
            self._log_success(
                "initialize",
                owner,
                owner=owner,
                current=initial,
                min=min,
                max=max,
            )

    def is_initialized(self) -> bool:
        """Return True once :meth:`initialize` has succeeded."""
        with self._critical():
            return all(
                self._storage.contains(key)
                for key in (StorageKey.OWNER, StorageKey.OPERATORS, StorageKey.BUDGET)
            )

    # ------------------------------------------------------------------
    # Owner operations
    # ------------------------------------------------------------------

    def add_operator(self, caller: Principal, operator: Principal) -> None:
        """
        Append ``operator`` to the operator set.

        Raises:
            AuthenticationError: If ``caller`` did not authorize the call.
            NotOwnerError: If ``caller`` is not the owner.
            AlreadyOperatorError: If ``operator`` is already in the set.
        """
        self._auth.require_auth(caller)
        with self._critical():
            try:
                self._require_owner(caller)
                operators = self._load_operators()
                if _find(operators, operator):
                    raise AlreadyOperatorError(operator)
            except BudgetError as exc:
                self._log_rejection("add_operator", caller, exc, operator=operator)
                raise

            operators.append(operator)
            self._storage.set(StorageKey.OPERATORS, operators)
            self._log_success("add_operator", caller, operator=operator)

    def remove_operator(self, caller: Principal, operator: Principal) -> None:
        """
        Remove ``operator`` from the operator set, keeping the order of the rest.

        Raises:
            AuthenticationError: If ``caller`` did not authorize the call.
            NotOwnerError: If ``caller`` is not the owner.
            NotOperatorFoundError: If ``operator`` is not in the set.
        """
        self._auth.require_auth(caller)
        with self._critical():
            try:
                self._require_owner(caller)
                operators = self._load_operators()
                remaining = [op for op in operators if op != operator]
                if len(remaining) == len(operators):
                    raise NotOperatorFoundError(operator)
            except BudgetError as exc:
                self._log_rejection("remove_operator", caller, exc, operator=operator)
                raise

            self._storage.set(StorageKey.OPERATORS, remaining)
            self._log_success("remove_operator", caller, operator=operator)

    # ------------------------------------------------------------------
    # Operator operations
    # ------------------------------------------------------------------

    def increase_budget(self, caller: Principal, amount: int) -> int:
        """
        Add ``amount`` to the budget and return the new value.

        ``amount`` is not sign-checked: a negative amount lowers the budget,
        down to ``min`` at most.

        Raises:
            AuthenticationError: If ``caller`` did not authorize the call.
            NotOperatorError: If ``caller`` is not an operator.
            BudgetOverflowError: If the sum leaves the signed 128-bit range.
            ExceedsMaxError: If the new value would be above ``max``.
            BelowMinError: If a negative ``amount`` would take the value below ``min``.
        """
        self._auth.require_auth(caller)
        _check_amount(amount)
        with self._critical():
            try:
                self._require_operator(caller)
                budget = self._load_budget()
                new_value = checked_add(budget.current, amount)
                if new_value > budget.max:
                    raise ExceedsMaxError(requested=new_value, maximum=budget.max)
                if new_value < budget.min:
                    raise BelowMinError(requested=new_value, minimum=budget.min)
            except BudgetError as exc:
                self._log_rejection("increase_budget", caller, exc, amount=amount)
                raise

            self._store_current(budget, new_value)
            self._log_success("increase_budget", caller, amount=amount, current=new_value)
            return new_value

    def decrease_budget(self, caller: Principal, amount: int) -> int:
        """
        Subtract ``amount`` from the budget and return the new value.

        ``amount`` is not sign-checked: a negative amount raises the budget,
        up to ``max`` at most.

        Raises:
            AuthenticationError: If ``caller`` did not authorize the call.
            NotOperatorError: If ``caller`` is not an operator.
            BudgetUnderflowError: If the difference leaves the signed 128-bit range.
            BelowMinError: If the new value would be below ``min``.
            ExceedsMaxError: If a negative ``amount`` would take the value above ``max``.
        """
        self._auth.require_auth(caller)
        _check_amount(amount)
        with self._critical():
            try:
                self._require_operator(caller)
                budget = self._load_budget()
                new_value = checked_sub(budget.current, amount)
                if new_value < budget.min:
                    raise BelowMinError(requested=new_value, minimum=budget.min)
                if new_value > budget.max:
                    raise ExceedsMaxError(requested=new_value, maximum=budget.max)
            except BudgetError as exc:
                self._log_rejection("decrease_budget", caller, exc, amount=amount)
                raise

            self._store_current(budget, new_value)
            self._log_success("decrease_budget", caller, amount=amount, current=new_value)
            return new_value

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_budget(self) -> BudgetState:
        """Return the budget record. Raises NotInitializedError before init."""
        with self._critical():
            return self._load_budget()

    def get_owner(self) -> Principal:
        """Return the owner. Raises NotInitializedError before init."""
        with self._critical():
            return self._load_owner()

    def get_operators(self) -> tuple[Principal, ...]:
        """Return the operators in insertion order. Raises NotInitializedError before init."""
        with self._critical():
            return tuple(self._load_operators())

    def is_operator(self, address: Principal) -> bool:
        """Return True if ``address`` is an operator. Raises NotInitializedError before init."""
        with self._critical():
            return _find(self._load_operators(), address)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _critical(self) -> Iterator[None]:
        with self._lock, self._storage.locked():
            yield

    def _require_owner(self, caller: Principal) -> None:
        if caller != self._load_owner():
            raise NotOwnerError(caller)

    def _require_operator(self, caller: Principal) -> None:
        if not _find(self._load_operators(), caller):
            raise NotOperatorError(caller)

    def _read(self, key: StorageKey) -> Any:
        try:
            return self._storage.get(key)
        except KeyError:
            raise NotInitializedError(key.value) from None

    def _load_owner(self) -> Principal:
        owner = self._read(StorageKey.OWNER)
        if not isinstance(owner, str):
            raise StorageError(f"Stored owner must be a string; got {owner!r}.")
        return owner

    def _load_operators(self) -> list[Principal]:
        operators = self._read(StorageKey.OPERATORS)
        if not isinstance(operators, list) or not all(isinstance(op, str) for op in operators):
            raise StorageError(f"Stored operators must be a list of strings; got {operators!r}.")
        return operators

    def _load_budget(self) -> BudgetState:
        record = self._read(StorageKey.BUDGET)
        try:
            return BudgetState.from_record(record)
        except ValidationError as exc:
            raise StorageError(f"Stored budget is invalid: {exc}") from exc

    def _store_current(self, budget: BudgetState, new_value: int) -> None:
        updated = budget.model_copy(update={"current": new_value})
        self._storage.set(StorageKey.BUDGET, updated.to_record())

    @staticmethod
    def _validate_limits(initial: int, minimum: int, maximum: int) -> BudgetState:
        for value in (initial, minimum, maximum):
            _check_integer(value)
        if not all(is_i128(value) for value in (initial, minimum, maximum)):
            raise InvalidLimitsError(
                initial,
                minimum,
                maximum,
                detail="Values must fit in a signed 128-bit integer.",
            )
        if minimum > initial or initial > maximum:
            raise InvalidLimitsError(initial, minimum, maximum)
        return BudgetState(current=initial, min=minimum, max=maximum)

    def _log_success(self, operation: str, caller: Principal, **fields: Any) -> None:
        if self._config.log_operations:
            logger.info(
                "ledger_operation",
                extra={"operation": operation, "caller": caller, **fields},
            )

    def _log_rejection(
        self,
        operation: str,
        caller: Principal,
        error: BudgetError,
        **fields: Any,
    ) -> None:
        if self._config.log_operations:
            logger.warning(
                "ledger_operation_rejected",
                extra={
                    "operation": operation,
                    "caller": caller,
                    "error": error.kind.name,
                    "error_code": error.error_code,
                    **fields,
                },
            )


def _find(operators: list[Principal], principal: Principal) -> bool:
    for op in operators:
        if op == principal:
            return True
    return False


def _check_integer(value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Budget values must be integers; got {value!r}.")


def _check_amount(amount: Any) -> None:
    _check_integer(amount)
    if not is_i128(amount):
        raise ValueError(f"amount must fit in a signed 128-bit integer; got {amount}.")
