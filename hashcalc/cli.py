from __future__ import annotations

import json
import sys
from pathlib import Path

import typer
import uvicorn

from hashcalc.config import Settings, load_config
from hashcalc.encoding import from_hex
from hashcalc.errors import HashcalcError
from hashcalc.logger import configure_logging, get_logger
from hashcalc.sha256 import digest, hexdigest, sha256_trace

logger = get_logger(__name__)

app = typer.Typer(add_completion=False, help="hashcalc: compute SHA-256 digests of text, files or stdin")

RULE = "-" * 50


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Log level (or set LOG_LEVEL)"),
) -> None:
    configure_logging(log_level)


def _settings(overrides: dict) -> Settings:
    try:
        return load_config(overrides)
    except ValueError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


def _read_message(text: str | None, file: Path | None) -> bytes:
    if text is not None and file is not None:
        typer.echo("Pass either TEXT or --file, not both.", err=True)
        raise typer.Exit(code=2)
    if file is not None:
        return file.read_bytes()
    if text is not None:
        return text.encode("utf-8")
    return typer.get_binary_stream("stdin").read()


@app.command("hash")
def hash_cmd(
    text: str = typer.Argument(None, help="Text to hash; reads stdin when omitted"),
    file: Path = typer.Option(None, "--file", "-f", exists=True, dir_okay=False, readable=True,
                              help="Hash the bytes of this file"),
    trace: bool = typer.Option(False, "--trace", help="Print every padding/compression step as JSON"),
) -> None:
    """Print the SHA-256 hex digest of TEXT, a file, or standard input."""
    message = _read_message(text, file)
    try:
        if trace:
            typer.echo(json.dumps(sha256_trace(message), indent=2, ensure_ascii=False))
        else:
            typer.echo(hexdigest(message))
    except HashcalcError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)


@app.command()
def interactive() -> None:
    """Prompt for lines of text and print their digests until 'exit'."""
    typer.echo("===Program to calculate hashes===")
    typer.echo("Type exit to finish the program\n")

    while True:
        typer.echo("Enter text:")
        line = sys.stdin.readline()
        if not line:
            break

        text = line.strip()
        if text.lower() == "exit":
            typer.echo("bye bye!")
            break

        typer.echo(f"Text: {text}")
        typer.echo(f"Text hashed: {hexdigest(text.encode('utf-8'))}\n")
        typer.echo(RULE)


@app.command()
def verify(
    text: str = typer.Argument(..., help="Text whose digest is checked"),
    expected: str = typer.Argument(..., metavar="DIGEST", help="Expected 64-character hex digest"),
) -> None:
    """Exit 0 when TEXT hashes to DIGEST, 1 otherwise."""
    try:
        raw = from_hex(expected)
    except HashcalcError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2)

    if digest(text.encode("utf-8")) == raw:
        typer.echo("OK")
        return
    typer.echo("MISMATCH")
    raise typer.Exit(code=1)


@app.command()
def analyze(
    samples: int = typer.Option(None, "--samples", "-n", min=1, help="Number of random strings"),
    buckets: int = typer.Option(None, "--buckets", min=1, help="Uniformity histogram buckets"),
    seed: int = typer.Option(None, "--seed", help="Random seed for reproducible runs"),
    plots: Path = typer.Option(None, "--plots", help="Directory to write PNG plots into"),
) -> None:
    """Run collision, uniformity and avalanche checks on random inputs."""
    from hashcalc.analysis import run_analysis, save_plots

    settings = _settings({"analysis_samples": samples, "analysis_buckets": buckets})
    report = run_analysis(
        num_samples=settings.analysis_samples,
        num_buckets=settings.analysis_buckets,
        seed=seed,
    )
    typer.echo(f"Collisions found: {report.collisions}")
    typer.echo(f"Avalanche bit differences (sample): {report.avalanche_diffs[:5]}")
    typer.echo(f"Avalanche mean: {report.avalanche_mean:.2f}")
    if plots is not None:
        for path in save_plots(report, plots):
            typer.echo(f"wrote {path}")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (or set HASHCALC_HOST)"),
    port: int = typer.Option(None, "--port", help="Port (or set HASHCALC_PORT)"),
) -> None:
    """Run the HTTP API."""
    from hashcalc.main import create_app

    settings = _settings({"host": host, "port": port})
    logger.info("Serving on %s:%d", settings.host, settings.port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port,
                log_level=settings.log_level.lower())


if __name__ == "__main__":
    app()
