import json
import logging
import sys
from typing import Iterable, List

import click

from .engine import CLEAR_KEY, DIGITS, EQUALS_KEY, OPERATOR_KEYS, CalculatorEngine, InvalidToken

KEYS = DIGITS | OPERATOR_KEYS | {CLEAR_KEY, EQUALS_KEY}
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def split_keys(chunks: Iterable[str]) -> List[str]:
    """Split arguments such as ``12+3=`` into single keys, ignoring whitespace."""
    keys: List[str] = []
    for chunk in chunks:
        for ch in chunk:
            if ch.isspace():
                continue
            if ch not in KEYS:
                raise InvalidToken(f"Unknown key: {ch!r}")
            keys.append(ch)
    return keys


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="CALCULATOR_LOG_LEVEL",
    help="Logging verbosity",
)
def main(log_level: str) -> None:
    """Four-function calculator."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("labels", nargs=-1, required=True)
@click.option("--history", "show_history", is_flag=True, default=False, help="Also print the history")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the full state as JSON")
def keys(labels: List[str], show_history: bool, as_json: bool) -> None:
    """Press LABELS on a fresh calculator, e.g. ``keys 12+3=``."""
    try:
        sequence = split_keys(labels)
    except InvalidToken as e:
        raise click.BadParameter(str(e), param_hint="LABELS")

    engine = CalculatorEngine().press_sequence(sequence)

    if as_json:
        click.echo(json.dumps(engine.snapshot(), ensure_ascii=False))
        return
    click.echo(engine.display)
    if show_history:
        for line in engine.history.lines():
            click.echo(line)


@main.command()
def repl() -> None:
    """Interactive prompt: one key sequence per line, 'h' for history, 'q' to quit."""
    engine = CalculatorEngine()
    click.echo(engine.display)
    for line in sys.stdin:
        line = line.strip()
        if line == "q":
            break
        if line == "h":
            for entry in engine.history.lines():
                click.echo(entry)
            continue
        try:
            engine.press_sequence(split_keys([line]))
        except InvalidToken as e:
            click.echo(f"Error: {e}", err=True)
            continue
        click.echo(engine.display)


@main.command()
@click.option("--host", default="127.0.0.1", show_default=True, envvar="CALCULATOR_HOST", help="Host to bind to")
@click.option("--port", default=5000, show_default=True, envvar="CALCULATOR_PORT", help="Port to bind to")
@click.option("--debug", is_flag=True, default=False, help="Enable the Flask debugger")
def serve(host: str, port: int, debug: bool) -> None:
    """Run the web calculator."""
    from .webapp.server import run_server

    click.echo(f"Access at: http://{host}:{port}")
    run_server(host=host, port=port, debug=debug)


if __name__ == "__main__":  # pragma: no cover
    main()
