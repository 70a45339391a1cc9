from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.logging import RichHandler

from .collector import InvalidOrder, PathCollector
from .config import AppConfig, load_config

logger = logging.getLogger("cascade_includer.cli")
app = typer.Typer(help="Collect cascading fragments from several directories.")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, markup=False)],
    )


def _prepare(
    config_path: Optional[Path],
    dirs: Optional[List[str]],
    files: Optional[List[str]],
) -> Tuple[AppConfig, PathCollector]:
    cfg = load_config(config_path)
    collector = cfg.build_collector()
    if dirs:
        collector.set_dirs(str(cfg.resolve(directory)) for directory in dirs)
    if files:
        collector.set_files(files)
    return cfg, collector


@app.command()
def paths(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML or JSON config file."),
    dirs: Optional[List[str]] = typer.Option(None, "--dir", "-d", help="Directory to search; repeat to add more."),
    files: Optional[List[str]] = typer.Option(None, "--file", "-f", help="File name to look for; repeat to add more."),
    order: Optional[str] = typer.Option(None, "--order", "-o", help="dir_order or file_order."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Print the resolved paths, one per line."""

    _setup_logging(verbose)
    cfg, collector = _prepare(config_path, dirs, files)
    try:
        resolved = collector.get_paths(order or cfg.collector.order)
    except InvalidOrder as exc:
        raise typer.BadParameter(str(exc), param_hint="--order") from exc
    for path in resolved:
        typer.echo(path)


@app.command()
def read(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML or JSON config file."),
    dirs: Optional[List[str]] = typer.Option(None, "--dir", "-d", help="Directory to search; repeat to add more."),
    files: Optional[List[str]] = typer.Option(None, "--file", "-f", help="File name to look for; repeat to add more."),
    order: Optional[str] = typer.Option(None, "--order", "-o", help="dir_order or file_order."),
    output: Optional[Path] = typer.Option(None, "--output", help="Write the merged text here instead of stdout."),
    to_stdout: bool = typer.Option(False, "--stdout", help="Print to stdout even when the config sets an output file."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Concatenate the resolved fragments."""

    _setup_logging(verbose)
    cfg, collector = _prepare(config_path, dirs, files)
    target = output or (cfg.resolve(cfg.output) if cfg.output else None)
    if to_stdout:
        target = None
    resolved_order = order or cfg.collector.order
    try:
        if target is None:
            typer.echo(collector.read(resolved_order), nl=False)
            return
        written = collector.write(target, resolved_order)
    except InvalidOrder as exc:
        raise typer.BadParameter(str(exc), param_hint="--order") from exc
    logger.info("Merged fragments into %s", written)


@app.command()
def load(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to a YAML or JSON config file."),
    dirs: Optional[List[str]] = typer.Option(None, "--dir", "-d", help="Directory to search; repeat to add more."),
    files: Optional[List[str]] = typer.Option(None, "--file", "-f", help="File name to look for; repeat to add more."),
    order: Optional[str] = typer.Option(None, "--order", "-o", help="dir_order or file_order."),
    cache_file: Optional[Path] = typer.Option(None, "--cache-file", help="Evaluate only this file; relative paths start at base_dir."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    """Evaluate the resolved fragments with the configured variables."""

    _setup_logging(verbose)
    cfg, collector = _prepare(config_path, dirs, files)
    if cache_file is not None:
        collector.set_cache_file(str(cfg.resolve(cache_file)))
    try:
        results = collector.load(order or cfg.collector.order)
    except InvalidOrder as exc:
        raise typer.BadParameter(str(exc), param_hint="--order") from exc
    for result in results:
        if isinstance(result, str):
            typer.echo(result, nl=False)
    logger.info("Loaded %d fragment(s)", len(results))


def cli() -> None:
    app()


if __name__ == "__main__":
    cli()
