"""CLI entry point using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from spa.core.config import SpaConfig, load_config

app = typer.Typer(name="spa", help="Simple proof assistant")

_config_option = typer.Option(None, "--config", help="JSON configuration file")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Interactive natural-deduction proofs over integers and sets."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _load(path: Optional[Path]) -> SpaConfig:
    try:
        return load_config(path)
    except (OSError, ValueError, ValidationError) as e:
        typer.echo(f"error: cannot load config {path}: {e}", err=True)
        raise typer.Exit(code=1)


@app.command("repl")
def repl(config: Optional[Path] = _config_option) -> None:
    """Run the interactive prover."""
    from spa.session import Session

    session = Session(config=_load(config))
    session.console.print('Simple Proof Assistant. Type "help" to get started.')
    while True:
        try:
            line = session.console.input("[bold magenta]spa>[/bold magenta] ")
        except EOFError:
            session.console.print()
            break
        if session.dispatch(line):
            break


@app.command("run")
def run(
    script: Path = typer.Argument(..., help="File with one command per line"),
    export: Optional[Path] = typer.Option(None, "--export", help="Write the proof as JSON"),
    config: Optional[Path] = _config_option,
) -> None:
    """Execute a command script. Exits with code 1 if any command fails."""
    from spa.reports.proof_export import export_proof
    from spa.session import Session

    try:
        lines = script.read_text().splitlines()
    except OSError as e:
        typer.echo(f"error: cannot read {script}: {e}", err=True)
        raise typer.Exit(code=1)

    session = Session(config=_load(config))
    for line in lines:
        if line.strip().startswith("#"):
            continue
        if session.dispatch(line):
            break

    if export is not None:
        export_proof(session.prover, export)
        typer.echo(f"Proof written to {export}")

    if session.error_count:
        raise typer.Exit(code=1)


@app.command("parse")
def parse(
    text: str = typer.Argument(..., help="Sentence in prefix notation"),
    json_output: bool = typer.Option(False, "--json", help="Output the model as JSON"),
    config: Optional[Path] = _config_option,
) -> None:
    """Parse a sentence and print its canonical form."""
    from spa.parsing.parser import parse_text

    result = parse_text(text, config=_load(config))
    if not result.ok:
        typer.echo(f"error: {result.error.message}", err=True)
        raise typer.Exit(code=1)

    if json_output:
        typer.echo(json.dumps(result.sentence.model_dump(mode="json"), indent=2))
    else:
        typer.echo(str(result.sentence))


if __name__ == "__main__":
    app()
