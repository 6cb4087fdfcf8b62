# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for authenticators and name-based invocation through LedgerClient."""

from __future__ import annotations

import pytest

from budget_ledger.auth import _INVOKERS, InvokerAuthenticator, PermissiveAuthenticator
from budget_ledger.client import OPERATIONS, LedgerClient
from budget_ledger.errors import (
    AuthenticationError,
    ConfigurationError,
    NotOwnerError,
    UnknownOperationError,
)
from budget_ledger.ledger import BudgetLedger
from budget_ledger.types import BudgetState


class TestInvokerAuthenticator:
    def test_matching_invoker_passes(self) -> None:
        auth = InvokerAuthenticator()
        with auth.invoked_by("alice"):
            auth.require_auth("alice")

    def test_mismatched_invoker_fails(self) -> None:
        auth = InvokerAuthenticator()
        with auth.invoked_by("alice"), pytest.raises(AuthenticationError) as excinfo:
            auth.require_auth("bob")
        assert excinfo.value.principal == "bob"
        assert excinfo.value.invoker == "alice"

    def test_no_invoker_fails(self) -> None:
        with pytest.raises(AuthenticationError):
            InvokerAuthenticator().require_auth("alice")

    def test_binding_is_restored_after_block(self) -> None:
        auth = InvokerAuthenticator()
        with auth.invoked_by("alice"):
            with auth.invoked_by("bob"):
                assert auth.current_invoker == "bob"
            assert auth.current_invoker == "alice"
        assert auth.current_invoker is None

    def test_binding_is_restored_after_exception(self) -> None:
        auth = InvokerAuthenticator()
        with pytest.raises(RuntimeError), auth.invoked_by("alice"):
            raise RuntimeError("boom")
        assert auth.current_invoker is None

    def test_instances_do_not_share_bindings(self) -> None:
        first, second = InvokerAuthenticator(), InvokerAuthenticator()
        with first.invoked_by("alice"):
            assert second.current_invoker is None

    def test_nested_bindings_of_two_authenticators_stay_independent(self) -> None:
        first, second = InvokerAuthenticator(), InvokerAuthenticator()
        with first.invoked_by("alice"):
            with second.invoked_by("bob"):
                assert (first.current_invoker, second.current_invoker) == ("alice", "bob")
            assert (first.current_invoker, second.current_invoker) == ("alice", None)

    def test_released_authenticator_leaves_no_binding(self) -> None:
        auth = InvokerAuthenticator()
        with auth.invoked_by("alice"):
            assert auth in _INVOKERS.get()
        assert auth not in _INVOKERS.get()

    def test_empty_principal_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            with InvokerAuthenticator().invoked_by(""):
                pass

    def test_permissive_authenticator_never_raises(self) -> None:
        PermissiveAuthenticator().require_auth("anyone")


@pytest.fixture
def client() -> LedgerClient:
    return LedgerClient(BudgetLedger(authenticator=InvokerAuthenticator()))


class TestLedgerClient:
    def test_invoke_runs_operations_by_name(self, client: LedgerClient) -> None:
        client.invoke("initialize", owner="alice", initial=1000, min=0, max=10_000)
        client.invoke("add_operator", invoker="alice", caller="alice", operator="bob")
        assert client.invoke("is_operator", address="bob") is True
        assert client.invoke("increase_budget", invoker="bob", caller="bob", amount=500) == 1500
        assert client.invoke("get_budget") == BudgetState(current=1500, min=0, max=10_000)

    def test_invoke_without_invoker_fails_authenticated_operations(
        self, client: LedgerClient
    ) -> None:
        client.invoke("initialize", owner="alice", initial=0, min=0, max=1)
        with pytest.raises(AuthenticationError):
            client.invoke("add_operator", caller="alice", operator="bob")

    def test_invoke_propagates_budget_errors(self, client: LedgerClient) -> None:
        client.invoke("initialize", owner="alice", initial=0, min=0, max=1)
        with pytest.raises(NotOwnerError):
            client.invoke("add_operator", invoker="bob", caller="bob", operator="bob")

    def test_unknown_operation_raises(self, client: LedgerClient) -> None:
        with pytest.raises(UnknownOperationError):
            client.invoke("transfer_ownership", owner="mallory")

    def test_private_attributes_are_not_operations(self, client: LedgerClient) -> None:
        with pytest.raises(UnknownOperationError):
            client.invoke("_load_budget")

    def test_as_invoker_binds_identity(self, client: LedgerClient) -> None:
        client.invoke("initialize", owner="alice", initial=10, min=0, max=100)
        alice = client.as_invoker("alice")
        alice.add_operator("alice", "bob")
        bob = client.as_invoker("bob")
        assert bob.decrease_budget("bob", 10) == 0
        assert bob.get_operators() == ("bob",)

    def test_invoker_view_rejects_unknown_attributes(self, client: LedgerClient) -> None:
        with pytest.raises(AttributeError):
            client.as_invoker("alice").drain

    def test_client_requires_invoker_authenticator(self) -> None:
        with pytest.raises(ConfigurationError):
            LedgerClient(BudgetLedger(authenticator=PermissiveAuthenticator()))

    def test_operation_names_cover_the_ledger_surface(self) -> None:
        for name in OPERATIONS:
            assert callable(getattr(BudgetLedger, name))
