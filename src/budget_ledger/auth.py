# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Caller authentication for ledger operations.

Every mutating operation names the principal it acts for and calls
:meth:`Authenticator.require_auth` with it before touching state. The
authenticator decides whether the current invocation really carries that
principal's authorization; a mismatch raises
:class:`~budget_ledger.errors.AuthenticationError` and aborts the call.

Bind an invoking identity with :meth:`InvokerAuthenticator.invoked_by`::

    auth = InvokerAuthenticator()
    ledger = BudgetLedger(authenticator=auth)
    with auth.invoked_by("alice"):
        ledger.add_operator("alice", "bob")
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar

from budget_ledger.errors import AuthenticationError
from budget_ledger.types import Principal

# One variable for the process; each authenticator keys its own binding.
_INVOKERS: ContextVar[Mapping[InvokerAuthenticator, Principal]] = ContextVar(
    "budget_ledger_invokers", default={}
)


class Authenticator(ABC):
    """Asserts that a claimed principal authorized the current call."""

    @abstractmethod
    def require_auth(self, principal: Principal) -> None:
        """
        Return normally if ``principal`` authorized the current call.

        Raises:
            AuthenticationError: If it did not.
        """
        ...


class InvokerAuthenticator(Authenticator):
    """
    Authenticates against the invoking identity bound to the current context.

    Bindings live in a module-level :class:`contextvars.ContextVar` holding a
    mapping keyed by authenticator, so concurrent threads and asyncio tasks
    each see their own invoker and separate authenticators never share one.
    Calls made with no invoker bound fail authentication.
    """

    @property
    def current_invoker(self) -> Principal | None:
        """The identity bound to the current context, if any."""
        return _INVOKERS.get().get(self)

    @contextmanager
    def invoked_by(self, principal: Principal) -> Iterator[Principal]:
        """Bind ``principal`` as the invoking identity for the enclosed block."""
        if not principal:
            raise ValueError("principal must be a non-empty string.")
        bindings = dict(_INVOKERS.get())
        bindings[self] = principal
        token = _INVOKERS.set(bindings)
        try:
            yield principal
        finally:
            _INVOKERS.reset(token)

    def require_auth(self, principal: Principal) -> None:
        invoker = self.current_invoker
        if invoker is None or invoker != principal:
            raise AuthenticationError(principal=principal, invoker=invoker)


class PermissiveAuthenticator(Authenticator):
    """
    Accepts every principal.

    Use only where the host has already authenticated callers, or in tests
    that exercise authorization rules rather than authentication.
    """

    def require_auth(self, principal: Principal) -> None:
        return None
