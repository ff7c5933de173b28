"""Mini README: Console entry point for inspecting freightbooks workbooks.

This script exposes a Typer CLI that loads a workbook JSON file (vehicle
master data plus the event log), replays it through the ledger store and
prints balances, outstanding amounts or statements as JSON. Logging and the
account names used while deriving come from ``FREIGHTBOOKS_`` environment
variables.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import typer

from freightbooks.balances import SignConvention
from freightbooks.configuration import get_settings
from freightbooks.errors import LedgerError
from freightbooks.logging_utils import configure_root_logger
from freightbooks.records.ledger import LedgerType
from freightbooks.store import LedgerStore
from freightbooks.store.serialization import build_store, dump_workbook

cli = typer.Typer(help="Replay freightbooks workbooks and report balances.")


def _open_store(workbook: Path) -> LedgerStore:
    settings = get_settings()
    configure_root_logger(settings.log_level)
    try:
        return build_store(workbook, settings=settings)
    except (LedgerError, OSError) as error:
        typer.echo(f"Could not load {workbook}: {error}", err=True)
        raise typer.Exit(code=1) from error


def _echo(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2))


@cli.command()
def replay(
    workbook: Path = typer.Argument(..., help="Workbook JSON file to replay."),
    output: Optional[Path] = typer.Option(None, help="Write the replayed workbook here."),
) -> None:
    """Rebuild the ledger from the workbook and print a summary."""

    store = _open_store(workbook)
    entries = store.recompute_all()
    if output is not None:
        dump_workbook(store, output)
    _echo(
        {
            "events": len(store.events()),
            "ledger_entries": entries,
            "fuel_wallets": [wallet.as_dict() for wallet in store.fuel_wallets()],
        }
    )


@cli.command()
def balance(
    workbook: Path = typer.Argument(..., help="Workbook JSON file to replay."),
    counterparty: str = typer.Argument(..., help="Party, supplier, account name or vehicle number."),
    ledger_type: List[str] = typer.Option(..., "--ledger-type", help="Ledger type(s) to include."),
    sign: str = typer.Option(..., help="debit_minus_credit or credit_minus_debit."),
    date_from: Optional[str] = typer.Option(None, help="ISO start date (inclusive)."),
    date_to: Optional[str] = typer.Option(None, help="ISO end date (inclusive)."),
) -> None:
    """Print the running balance of one counterparty."""

    try:
        types = [LedgerType(value.strip().lower()) for value in ledger_type]
        convention = SignConvention(sign.strip().lower())
    except ValueError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2) from error

    store = _open_store(workbook)
    try:
        report = store.compute_balance(
            counterparty, types, sign=convention, date_from=date_from, date_to=date_to
        )
    except ValueError as error:
        typer.echo(str(error), err=True)
        raise typer.Exit(code=2) from error
    _echo(report.as_dict())


@cli.command()
def outstanding(
    workbook: Path = typer.Argument(..., help="Workbook JSON file to replay."),
    kind: str = typer.Option("party", help="party or supplier."),
    name: Optional[str] = typer.Option(None, help="Limit the report to one party or supplier."),
) -> None:
    """Print outstanding amounts for parties or suppliers."""

    normalised = kind.strip().lower()
    if normalised not in {"party", "supplier"}:
        typer.echo(f"Unsupported outstanding kind: {kind}", err=True)
        raise typer.Exit(code=2)

    store = _open_store(workbook)
    if normalised == "party":
        rows = [store.party_outstanding(name)] if name else store.all_party_balances()
    else:
        rows = [store.supplier_outstanding(name)] if name else store.all_supplier_balances()
    _echo([row.as_dict() for row in rows])


@cli.command()
def statement(
    workbook: Path = typer.Argument(..., help="Workbook JSON file to replay."),
    name: str = typer.Argument(..., help="Party or supplier name."),
    kind: str = typer.Option("party", help="party or supplier."),
    date_from: Optional[str] = typer.Option(None, help="ISO start date (inclusive)."),
    date_to: Optional[str] = typer.Option(None, help="ISO end date (inclusive)."),
) -> None:
    """Print a party or supplier statement with running balances."""

    store = _open_store(workbook)
    if kind.strip().lower() == "supplier":
        lines = store.supplier_statement(name, date_from=date_from, date_to=date_to)
    else:
        lines = store.party_statement(name, date_from=date_from, date_to=date_to)
    _echo([line.as_dict() for line in lines])


if __name__ == "__main__":
    cli()
