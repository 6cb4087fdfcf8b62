# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""Tests for the budget-ledger command line front end."""

from __future__ import annotations

import json
import multiprocessing
from pathlib import Path

import pytest

from budget_ledger.cli import (
    EXIT_AUTHENTICATION,
    EXIT_BUDGET_ERROR_BASE,
    EXIT_LEDGER_STATE,
    main,
)



def _increase_repeatedly(state: str, times: int) -> None:
    for _ in range(times):
        if main(["--state", state, "--as", "bob", "increase", "bob", "1"]) != 0:
            raise SystemExit(1)


@pytest.fixture
def state(tmp_path: Path) -> str:
    return str(tmp_path / "ledger.json")


def _run(capsys: pytest.CaptureFixture[str], *argv: str) -> tuple[int, dict, dict]:
    code = main(list(argv))
    captured = capsys.readouterr()
    out = json.loads(captured.out) if captured.out.strip() else {}
    err = json.loads(captured.err.strip().splitlines()[-1]) if captured.err.strip() else {}
    return code, out, err


class TestCli:
    def test_init_prints_budget(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        code, out, _ = _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        assert code == 0
        assert out == {"current": 1000, "min": 0, "max": 10000}

    def test_full_flow(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")

        code, out, _ = _run(capsys, "--state", state, "--as", "alice", "add-operator", "alice", "bob")
        assert code == 0
        assert out == {"operators": ["bob"]}

        code, out, _ = _run(capsys, "--state", state, "--as", "bob", "increase", "bob", "500")
        assert (code, out) == (0, {"current": 1500})

        code, out, _ = _run(capsys, "--state", state, "--as", "bob", "decrease", "bob", "200")
        assert (code, out) == (0, {"current": 1300})

        code, out, _ = _run(capsys, "--state", state, "is-operator", "bob")
        assert out == {"address": "bob", "is_operator": True}

        code, out, _ = _run(capsys, "--state", state, "owner")
        assert out == {"owner": "alice"}

        code, out, _ = _run(
            capsys, "--state", state, "--as", "alice", "remove-operator", "alice", "bob"
        )
        assert out == {"operators": []}

        code, out, _ = _run(capsys, "--state", state, "budget")
        assert out == {"current": 1300, "min": 0, "max": 10000}

    def test_budget_error_exit_code_encodes_kind(
        self, capsys: pytest.CaptureFixture[str], state: str
    ) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        code, out, err = _run(capsys, "--state", state, "--as", "mallory", "increase", "mallory", "1")
        assert code == EXIT_BUDGET_ERROR_BASE + 2
        assert out == {}
        assert err["error"] == "NOT_OPERATOR"
        assert err["code"] == 2

    def test_invalid_limits_exit_code(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        code, _, err = _run(capsys, "--state", state, "init", "alice", "5", "10", "20")
        assert code == EXIT_BUDGET_ERROR_BASE + 9
        assert err["error"] == "INVALID_LIMITS"
        assert not Path(state).exists()

    def test_missing_invoker_fails_authentication(
        self, capsys: pytest.CaptureFixture[str], state: str
    ) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        code, _, err = _run(capsys, "--state", state, "add-operator", "alice", "bob")
        assert code == EXIT_AUTHENTICATION
        assert err["error"] == "AUTHENTICATION_FAILED"

    def test_reading_uninitialized_state(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        code, _, err = _run(capsys, "--state", state, "budget")
        assert code == EXIT_LEDGER_STATE
        assert err["error"] == "NOT_INITIALIZED"

    def test_second_init_is_rejected(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        code, _, err = _run(capsys, "--state", state, "init", "mallory", "1", "0", "2")
        assert code == EXIT_LEDGER_STATE
        assert err["error"] == "ALREADY_INITIALIZED"

    def test_negative_amount_is_accepted(self, capsys: pytest.CaptureFixture[str], state: str) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        _run(capsys, "--state", state, "--as", "alice", "add-operator", "alice", "bob")
        code, out, _ = _run(capsys, "--state", state, "--as", "bob", "increase", "bob", "-100")
        assert (code, out) == (0, {"current": 900})

    def test_state_path_from_environment(
        self,
        capsys: pytest.CaptureFixture[str],
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        path = tmp_path / "env-ledger.json"
        monkeypatch.setenv("BUDGET_LEDGER_STATE", str(path))
        code, _, _ = _run(capsys, "init", "alice", "1", "0", "2")
        assert code == 0
        assert path.exists()


class TestConcurrentProcesses:
    @pytest.mark.skipif(
        "fork" not in multiprocessing.get_all_start_methods(), reason="needs fork"
    )
    def test_parallel_increases_are_all_recorded(
        self, capsys: pytest.CaptureFixture[str], state: str
    ) -> None:
        _run(capsys, "--state", state, "init", "alice", "1000", "0", "10000")
        _run(capsys, "--state", state, "--as", "alice", "add-operator", "alice", "bob")

        context = multiprocessing.get_context("fork")
        workers = [
            context.Process(target=_increase_repeatedly, args=(state, 25)) for _ in range(4)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join(timeout=60)

        assert [worker.exitcode for worker in workers] == [0, 0, 0, 0]
        capsys.readouterr()
        code, out, _ = _run(capsys, "--state", state, "budget")
        assert (code, out) == (0, {"current": 1100, "min": 0, "max": 10000})
