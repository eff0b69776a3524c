"""Gamepack CLI Entry Point.

Developer tooling around the gamepack protocol: transcript validation and
a demo pack that speaks the protocol on stdin/stdout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog
import typer

from gamepack.core.config import get_settings
from gamepack.core.exceptions import ConfigurationError, ProtocolError
from gamepack.core.logging import configure_logging
from gamepack.protocol.framing import decode_command, decode_response
from gamepack.protocol.version import PROTOCOL_VERSION


log = structlog.get_logger()

app = typer.Typer(
    name="gamepack",
    help="Gamepack protocol tools",
    no_args_is_help=True,
)


def load_config_callback(config: Optional[Path]) -> Optional[Path]:
    """Load configuration file if provided, then set up logging."""
    if config:
        if not config.exists():
            typer.echo(f"Error: Config file '{config}' not found", err=True)
            raise typer.Exit(code=1)
        try:
            get_settings(force_reload=True, system_config_path=config)
        except ConfigurationError as e:
            typer.echo(f"Error loading config: {e}", err=True)
            raise typer.Exit(code=1)

    configure_logging(get_settings().logging)
    return config


@app.callback()
def main(
    config: Optional[Path] = typer.Option(
        None, "--config", "-c",
        callback=load_config_callback,
        is_eager=True,
        help="Path to configuration file",
    ),
) -> None:
    """Gamepack protocol tools."""


@app.command()
def version() -> None:
    """Show the protocol version."""
    typer.echo(f"gamepack protocol v{PROTOCOL_VERSION}")


@app.command()
def validate(
    transcript: Path = typer.Argument(..., help="NDJSON file to check"),
    direction: str = typer.Option(
        "any", "--direction", "-d",
        help="Expected traffic: 'commands', 'responses' or 'any'",
    ),
) -> None:
    """Check that every line of a transcript is a valid protocol message."""
    if direction not in ("commands", "responses", "any"):
        typer.echo(f"Error: invalid direction '{direction}'", err=True)
        raise typer.Exit(code=2)
    if not transcript.exists():
        typer.echo(f"Error: File '{transcript}' not found", err=True)
        raise typer.Exit(code=1)

    max_size = get_settings().protocol.max_message_size
    errors = 0
    checked = 0
    with transcript.open("rb") as f:
        for lineno, raw in enumerate(f, start=1):
            line = raw.strip()
            if not line:
                continue
            checked += 1
            try:
                if direction == "commands":
                    message = decode_command(line, max_size)
                elif direction == "responses":
                    message = decode_response(line, max_size)
                else:
                    try:
                        message = decode_command(line, max_size)
                    except ProtocolError:
                        message = decode_response(line, max_size)
            except ProtocolError as e:
                errors += 1
                typer.echo(f"{transcript}:{lineno}: {e.reason}", err=True)
                continue
            typer.echo(f"{lineno}: {message.type}")

    typer.echo(f"{checked} message(s) checked, {errors} error(s)")
    if errors:
        raise typer.Exit(code=1)


@app.command()
def demo(
    seed: Optional[int] = typer.Option(None, help="Seed for sample data"),
) -> None:
    """Run the demo pack on stdin/stdout."""
    from gamepack.demo import DemoHandler
    from gamepack.worker.runner import run_gamepack

    run_gamepack(DemoHandler(seed=seed), settings=get_settings())


if __name__ == "__main__":  # pragma: no cover
    app()
