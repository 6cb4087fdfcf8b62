# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2026 MuVeraAI Corporation
"""
Command line front end for a JSON-file-backed budget ledger.

Every command prints a JSON document on stdout. Mutating commands are
authenticated against the identity given with ``--as``::

    budget-ledger --state ledger.json init alice 1000 0 10000
    budget-ledger --state ledger.json --as alice add-operator alice bob
    budget-ledger --state ledger.json --as bob increase bob 500
    budget-ledger --state ledger.json budget
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from budget_ledger.client import LedgerClient
from budget_ledger.errors import (
    AlreadyInitializedError,
    AuthenticationError,
    BudgetError,
    BudgetLedgerError,
    NotInitializedError,
)
from budget_ledger.ledger import BudgetLedger
from budget_ledger.storage.file import JsonFileStorage

logger = logging.getLogger("budget_ledger.cli")

DEFAULT_STATE_PATH = "budget_ledger.json"
STATE_PATH_ENV = "BUDGET_LEDGER_STATE"

EXIT_AUTHENTICATION = 2
EXIT_LEDGER_STATE = 3
EXIT_OTHER = 4
EXIT_BUDGET_ERROR_BASE = 10


def _emit(payload: Any) -> None:
    print(json.dumps(payload, sort_keys=True))


def _cmd_init(client: LedgerClient, args: argparse.Namespace) -> int:
    client.invoke(
        "initialize",
        owner=args.owner,
        initial=args.initial,
        min=args.min,
        max=args.max,
    )
    _emit(client.invoke("get_budget").to_record())
    return 0


def _cmd_add_operator(client: LedgerClient, args: argparse.Namespace) -> int:
    client.invoke("add_operator", invoker=args.invoker, caller=args.caller, operator=args.operator)
    _emit({"operators": list(client.invoke("get_operators"))})
    return 0


def _cmd_remove_operator(client: LedgerClient, args: argparse.Namespace) -> int:
    client.invoke(
        "remove_operator", invoker=args.invoker, caller=args.caller, operator=args.operator
    )
    _emit({"operators": list(client.invoke("get_operators"))})
    return 0


def _cmd_increase(client: LedgerClient, args: argparse.Namespace) -> int:
    current = client.invoke(
        "increase_budget", invoker=args.invoker, caller=args.caller, amount=args.amount
    )
    _emit({"current": current})
    return 0


def _cmd_decrease(client: LedgerClient, args: argparse.Namespace) -> int:
    current = client.invoke(
        "decrease_budget", invoker=args.invoker, caller=args.caller, amount=args.amount
    )
    _emit({"current": current})
    return 0


def _cmd_budget(client: LedgerClient, args: argparse.Namespace) -> int:
    _emit(client.invoke("get_budget").to_record())
    return 0


def _cmd_owner(client: LedgerClient, args: argparse.Namespace) -> int:
    _emit({"owner": client.invoke("get_owner")})
    return 0


def _cmd_operators(client: LedgerClient, args: argparse.Namespace) -> int:
    _emit({"operators": list(client.invoke("get_operators"))})
    return 0


def _cmd_is_operator(client: LedgerClient, args: argparse.Namespace) -> int:
    _emit({"address": args.address, "is_operator": client.invoke("is_operator", address=args.address)})
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="budget-ledger", description="Governance-controlled budget ledger")
    p.add_argument(
        "--state",
        default=os.environ.get(STATE_PATH_ENV, DEFAULT_STATE_PATH),
        help=f"Path to the ledger JSON file (env: {STATE_PATH_ENV})",
    )
    p.add_argument(
        "--as",
        dest="invoker",
        default=None,
        help="Identity that authorizes this invocation",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    init = sub.add_parser("init", help="Initialize the ledger")
    init.add_argument("owner")
    init.add_argument("initial", type=int)
    init.add_argument("min", type=int)
    init.add_argument("max", type=int)
    init.set_defaults(func=_cmd_init)

    add = sub.add_parser("add-operator", help="Add an operator (owner only)")
    add.add_argument("caller")
    add.add_argument("operator")
    add.set_defaults(func=_cmd_add_operator)

    remove = sub.add_parser("remove-operator", help="Remove an operator (owner only)")
    remove.add_argument("caller")
    remove.add_argument("operator")
    remove.set_defaults(func=_cmd_remove_operator)

    inc = sub.add_parser("increase", help="Increase the budget (operators only)")
    inc.add_argument("caller")
    inc.add_argument("amount", type=int)
    inc.set_defaults(func=_cmd_increase)

    dec = sub.add_parser("decrease", help="Decrease the budget (operators only)")
    dec.add_argument("caller")
    dec.add_argument("amount", type=int)
    dec.set_defaults(func=_cmd_decrease)

    sub.add_parser("budget", help="Show the budget").set_defaults(func=_cmd_budget)
    sub.add_parser("owner", help="Show the owner").set_defaults(func=_cmd_owner)
    sub.add_parser("operators", help="List operators").set_defaults(func=_cmd_operators)

    is_op = sub.add_parser("is-operator", help="Check whether an address is an operator")
    is_op.add_argument("address")
    is_op.set_defaults(func=_cmd_is_operator)

    return p


def _report(message: str, kind: str, code: int | None) -> None:
    print(
        json.dumps({"error": kind, "code": code, "message": message}, sort_keys=True),
        file=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    storage = JsonFileStorage(args.state)
    client = LedgerClient(BudgetLedger(storage=storage))
    logger.debug("command", extra={"cmd": args.cmd, "state": str(storage.file_path)})

    try:
        return args.func(client, args)
    except BudgetError as exc:
        _report(exc.message, exc.kind.name, exc.error_code)
        return EXIT_BUDGET_ERROR_BASE + exc.error_code
    except AuthenticationError as exc:
        _report(exc.message, exc.code, None)
        return EXIT_AUTHENTICATION
    except (NotInitializedError, AlreadyInitializedError) as exc:
        _report(exc.message, exc.code, None)
        return EXIT_LEDGER_STATE
    except BudgetLedgerError as exc:
        _report(exc.message, exc.code, None)
        return EXIT_OTHER
    except ValueError as exc:
        _report(str(exc), "INVALID_ARGUMENT", None)
        return EXIT_OTHER


if __name__ == "__main__":
    raise SystemExit(main())
