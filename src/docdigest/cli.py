"""Command-line entry points for docdigest."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from docdigest.config import ConfigError, DocDigestConfig, dump_example_config, load_config
from docdigest.errors import DocDigestError
from docdigest.input import Input, InputFactory
from docdigest.util.hashing import hex_digest
from docdigest.util.logging import configure_logging

app = typer.Typer(add_completion=False, help="Content digests for documents read from files, URLs or stdin")

STDIN_SOURCE = "-"


def _load(
    config_path: Optional[Path],
    *,
    algorithm: Optional[str],
    policy: Optional[str],
    verbose: bool,
) -> tuple[DocDigestConfig, logging.Logger]:
    overrides: dict[str, object] = {}
    if algorithm is not None:
        overrides["digest.algorithm"] = algorithm
    if policy is not None:
        overrides["reference.hash_policy"] = policy
    if verbose:
        overrides["logging.level"] = "DEBUG"

    try:
        cfg = load_config(config_path, overrides=overrides)
    except (ConfigError, ValueError) as exc:
        typer.echo(f"Invalid configuration: {exc}", err=True)
        raise typer.Exit(code=2) from exc

    logger = configure_logging(level=cfg.logging.level, log_path=cfg.logging.log_path)
    return cfg, logger


def _hash_of(factory: InputFactory, source: str, name: Optional[str]) -> tuple[Input, bytes]:
    """Read `source` and return it with its digest, draining reference inputs if needed."""

    if source == STDIN_SOURCE:
        item = factory.read_stream(sys.stdin.buffer, name or "stdin")
    else:
        item = factory.read(source, name)

    if not item.is_hash_computed():
        with item.open_digesting_stream() as stream:
            while stream.read(factory.chunk_size):
                pass
    return item, item.get_hash()


@app.command()
def digest(
    sources: List[str] = typer.Argument(..., help="Paths, URLs, or '-' for stdin"),
    name: Optional[str] = typer.Option(None, help="Name for stdin input"),
    algorithm: Optional[str] = typer.Option(None, "--algorithm", "-a", help="Digest algorithm, e.g. SHA-256"),
    policy: Optional[str] = typer.Option(None, help="Reference hash policy: deferred, eager or materialize"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (YAML/TOML/JSON)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Print the digest and name of each source."""

    cfg, logger = _load(config, algorithm=algorithm, policy=policy, verbose=verbose)
    try:
        factory = InputFactory.from_config(cfg)
    except DocDigestError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    failures = 0
    for source in sources:
        try:
            item, value = _hash_of(factory, source, name)
        except (DocDigestError, OSError) as exc:
            logger.error("Failed to digest %s: %s", source, exc)
            failures += 1
            continue
        typer.echo(f"{hex_digest(value)}  {item.name}")

    if failures:
        raise typer.Exit(code=1)


@app.command()
def compare(
    first: str = typer.Argument(..., help="Path or URL"),
    second: str = typer.Argument(..., help="Path or URL"),
    algorithm: Optional[str] = typer.Option(None, "--algorithm", "-a", help="Digest algorithm, e.g. SHA-256"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Config file (YAML/TOML/JSON)"),
) -> None:
    """Exit 0 when both sources have the same content digest, 1 otherwise."""

    cfg, logger = _load(config, algorithm=algorithm, policy=None, verbose=False)
    factory = InputFactory.from_config(cfg)
    try:
        _, left = _hash_of(factory, first, None)
        _, right = _hash_of(factory, second, None)
    except (DocDigestError, OSError) as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    if left == right:
        typer.echo(f"identical {hex_digest(left)}")
        return
    logger.debug("Digest mismatch %s != %s", hex_digest(left), hex_digest(right))
    typer.echo("different")
    raise typer.Exit(code=1)


@app.command()
def dump_config(dest: Path = typer.Argument(..., help="Destination .yaml or .json file")) -> None:
    """Write the default configuration to DEST."""

    try:
        dump_example_config(dest)
    except ConfigError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    typer.echo(f"Wrote {dest}")


def main() -> None:
    app()


__all__ = ["main", "app"]
