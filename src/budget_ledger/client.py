# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Name-based invocation of ledger operations.

Hosts address the ledger by operation name with keyword arguments and an
invoking identity, the same way a transaction names a contract function::

    client = LedgerClient(ledger)
    client.invoke("initialize", owner="alice", initial=1000, min=0, max=10_000)
    client.invoke("add_operator", invoker="alice", caller="alice", operator="bob")

    bob = client.as_invoker("bob")
    bob.increase_budget("bob", 500)
"""
from __future__ import annotations

from contextlib import nullcontext
from typing import Any

from budget_ledger.auth import InvokerAuthenticator
from budget_ledger.errors import ConfigurationError, UnknownOperationError
from budget_ledger.ledger import BudgetLedger
from budget_ledger.types import Principal

OPERATIONS: frozenset[str] = frozenset(
    {
        "initialize",
        "add_operator",
        "remove_operator",
        "increase_budget",
        "decrease_budget",
        "get_budget",
        "get_owner",
        "get_operators",
        "is_operator",
        "is_initialized",
    }
)


class LedgerClient:
    """
    Dispatches named operations to a :class:`BudgetLedger`.

    The ledger must authenticate with an :class:`InvokerAuthenticator`;
    the client binds the invoking identity around each call.
    """

    def __init__(self, ledger: BudgetLedger) -> None:
        authenticator = ledger.authenticator
        if not isinstance(authenticator, InvokerAuthenticator):
            raise ConfigurationError(
                "LedgerClient requires a ledger that uses InvokerAuthenticator; "
                f"got {type(authenticator).__name__}."
            )
        self._ledger = ledger
        self._auth = authenticator

    @property
    def ledger(self) -> BudgetLedger:
        return self._ledger

    @property
    def authenticator(self) -> InvokerAuthenticator:
        return self._auth

    def invoke(
        self,
        operation: str,
        /,
        *,
        invoker: Principal | None = None,
        **arguments: Any,
    ) -> Any:
        """
        Run ``operation`` with ``arguments``, optionally as ``invoker``.

        Args:
            operation: One of :data:`OPERATIONS`.
            invoker: Identity that signed this call. When omitted no
                identity is bound and authenticated operations fail.
            **arguments: Keyword arguments for the operation.

        Returns:
            Whatever the operation returns.

        Raises:
            UnknownOperationError: If ``operation`` is not a ledger operation.
        """
        if operation not in OPERATIONS:
            raise UnknownOperationError(operation)
        method = getattr(self._ledger, operation)
        binding = self._auth.invoked_by(invoker) if invoker is not None else nullcontext()
        with binding:
            return method(**arguments)

    def as_invoker(self, invoker: Principal) -> InvokerView:
        """Return a view whose operations all run as ``invoker``."""
        return InvokerView(self, invoker)


class InvokerView:
    """Ledger operations bound to one invoking identity."""

    def __init__(self, client: LedgerClient, invoker: Principal) -> None:
        self._client = client
        self.invoker = invoker

    def __getattr__(self, name: str) -> Any:
        if name not in OPERATIONS:
            raise AttributeError(name)

        def call(*args: Any, **kwargs: Any) -> Any:
            method = getattr(self._client.ledger, name)
            with self._client.authenticator.invoked_by(self.invoker):
                return method(*args, **kwargs)

        call.__name__ = name
        return call

    def __repr__(self) -> str:
        return f"InvokerView(invoker={self.invoker!r})"
