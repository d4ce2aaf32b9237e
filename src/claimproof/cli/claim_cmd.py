"""Claim evaluation commands."""
from __future__ import annotations

import json

import click
from rich.console import Console
from rich.table import Table

from ..claims import ClaimType, claim_domain, evaluate_claim, iter_claims
from ..errors import ClaimProofError
from .exit_codes import EXIT_FALSE_CLAIM, EXIT_MALFORMED

CLAIM_TYPE_CHOICE = click.Choice([kind.label for kind in ClaimType], case_sensitive=False)


@click.command("evaluate")
@click.argument("position", type=int)
@click.argument("claim_type", type=CLAIM_TYPE_CHOICE)
@click.argument("claim_value", type=int)
@click.option("--exit-code", is_flag=True, help="Exit 1 when the claim is false")
def evaluate_command(position: int, claim_type: str, claim_value: int, exit_code: bool) -> None:
    """Evaluate CLAIM_TYPE CLAIM_VALUE against a hidden POSITION."""
    try:
        result = evaluate_claim(position, claim_type, claim_value)
    except ClaimProofError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(EXIT_MALFORMED)
    click.echo("true" if result else "false")
    if exit_code and not result:
        raise SystemExit(EXIT_FALSE_CLAIM)


@click.command("grid")
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table")
def grid_command(as_json: bool) -> None:
    """Print the truth of every claim for every position."""
    if as_json:
        rows = [
            {
                "position": position,
                "claimType": kind.label,
                "claimValue": value,
                "isTrue": evaluate_claim(position, kind, value),
            }
            for position, kind, value in iter_claims()
        ]
        click.echo(json.dumps(rows, indent=2))
        return

    table = Table(title="Claim truth table")
    table.add_column("position", justify="right")
    for kind in ClaimType:
        table.add_column(f"{kind.label} true for")
    for position in range(1, 10):
        cells = []
        for kind in ClaimType:
            true_values = [str(v) for v in claim_domain(kind) if evaluate_claim(position, kind, v)]
            cells.append(", ".join(true_values))
        table.add_row(str(position), *cells)
    Console().print(table)
