"""claimproof CLI - prove claims about a hidden grid position.

Commands:
    evaluate  - Compute whether a claim holds for a position
    grid      - Print the full claim truth table
    prove     - Generate a Groth16 proof with snarkjs
    verify    - Verify a proof against the verification key
    convert   - Re-encode a proof in the on-chain byte layout
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import click

from ..config import load_config
from .claim_cmd import evaluate_command, grid_command
from .proof_cmd import convert_command, prove_command, verify_command


@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None, help="Global config file")
@click.option("-w", "--workspace", type=click.Path(file_okay=False, path_type=Path), default=None, help="Workspace with .claimproof/config.json")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.version_option(package_name="claimproof")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[Path], workspace: Optional[Path], verbose: bool) -> None:
    """Zero-knowledge claim proofs for the 3x3 grid."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(config_path=config_path, workspace=workspace)


main.add_command(evaluate_command)
main.add_command(grid_command)
main.add_command(prove_command)
main.add_command(verify_command)
main.add_command(convert_command)


__all__ = ["main"]
