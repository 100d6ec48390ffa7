"""Typer CLI for maintenance tasks."""

import json
import logging
from typing import Optional

import typer

from fooddelivery.settings import API_BASE_URL, API_TOKEN, REPAIR_BATCH_SIZE
from fooddelivery.setup_logging import setup_logging

log = logging.getLogger(__name__)

app = typer.Typer(
    name="fooddelivery",
    help="Food delivery maintenance tools.",
    no_args_is_help=True,
)


@app.command(name="repair-combos")
def repair_combos_cmd(
    database_url: Optional[str] = typer.Option(
        None,
        "--database-url",
        help="SQLAlchemy URL of the data store (defaults to DATABASE_URL)",
    ),
    batch_size: int = typer.Option(
        REPAIR_BATCH_SIZE,
        "--batch-size",
        min=1,
        help="Combos read per batch",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every combo"),
) -> None:
    """Rewrite embedded restaurant documents in combos to plain restaurant ids.

    Exit codes: 0 all combos verified, 1 data store unreachable,
    2 finished but some combos still need manual attention.
    """
    from fooddelivery.exceptions import ConnectivityError
    from fooddelivery.maintenance import repair_combos

    setup_logging("DEBUG" if verbose else "INFO")
    try:
        report = repair_combos(database_url, batch_size=batch_size)
    except ConnectivityError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(report.model_dump(), indent=2, default=str))
    else:
        typer.echo(report.summary())
        for issue in report.anomalies + report.read_failures + report.write_failures + report.mismatches:
            typer.echo(f"  [{issue['kind']}] {issue['combo_id']} ({issue['name']}): {issue['error']}")

    if not report.ok:
        raise typer.Exit(2)


@app.command(name="smoke-test")
def smoke_test_cmd(
    base_url: str = typer.Option(API_BASE_URL, "--base-url", help="API root, e.g. http://localhost:8000"),
    token: str = typer.Option(API_TOKEN, "--token", help="Bearer token for POST /api/combos"),
) -> None:
    """Hit GET /api/restaurants and POST /api/combos and print what came back."""
    from fooddelivery.smoke import run_smoke_test

    setup_logging()
    result = run_smoke_test(base_url, token)
    if not result.reachable:
        typer.echo(f"Error: server not reachable: {result.error}", err=True)
        raise typer.Exit(1)
    typer.echo(f"GET /api/restaurants -> {result.liveness_status}")
    typer.echo(f"POST /api/combos -> {result.create_status}")
    typer.echo(result.create_body or "")


if __name__ == "__main__":
    app()
