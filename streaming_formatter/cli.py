"""
Replays a file through the streaming formatter.
Plain text is split into fixed-size deltas; a JSON delta log is replayed as
recorded. The resulting elements are printed as Markdown or JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from . import __version__
from .config import ConfigError, build_config
from .exceptions import DeltaLogError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    load_delta_log,
    normalize_filepath,
    read_text,
)
from .formatter import replay, split_into_deltas
from .render import element_to_dict, render_elements

__all__ = ["cli"]

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="streaming-formatter")
@click.option("--chunk-size", type=int, help="Characters per delta when replaying plain text")
@click.option("--deltas-json", is_flag=True, help="Read FILEPATH as a JSON array of deltas")
@click.option(
    "--format", "output_format", type=click.Choice(["text", "json"]), help="Output format"
)
@click.option(
    "--base-path",
    type=click.Path(file_okay=False),
    help="Directory that relative code block paths are resolved against",
)
@click.option(
    "--resolve-paths/--no-resolve-paths",
    default=None,
    help="Include resolved code block paths in JSON output",
)
@click.option(
    "--finish/--no-finish",
    "finish_stream",
    default=None,
    help="Finish the stream before printing (completes trailing text)",
)
@click.option("-v", "--verbose", is_flag=True, help="Log formatter activity to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    chunk_size: int | None = None,
    deltas_json: bool = False,
    output_format: str | None = None,
    base_path: str | None = None,
    resolve_paths: bool | None = None,
    finish_stream: bool | None = None,
    verbose: bool = False,
):
    """
    Replay FILEPATH through the streaming formatter and print the elements.

    Args:
        filepath: Path to a text file or, with `deltas_json`, a delta log.
        chunk_size: Override for the number of characters per delta.
        deltas_json: Whether the file is a JSON array of recorded deltas.
        output_format: Output format (`text` or `json`).
        base_path: Directory used to resolve relative code block paths.
        resolve_paths: Whether JSON output includes resolved paths.
        finish_stream: Whether to finish the stream before printing.
        verbose: Whether to log formatter activity at DEBUG level.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path or configuration overrides are invalid.
        click.ClickException: If the file is too large, unreadable, or not a
            valid delta log.

    Examples:
        streaming-formatter reply.md --chunk-size 3 --format json
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        path = normalize_filepath(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            path.parent,
            chunk_size=chunk_size,
            output_format=output_format,
            resolve_paths=resolve_paths,
            finish_stream=finish_stream,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        enforce_file_size(collect_file_stat(path), max_file_size, path)
        if deltas_json:
            deltas = load_delta_log(path)
        else:
            deltas = split_into_deltas(read_text(path), config.chunk_size)
    except (IOError, DeltaLogError) as error:
        raise click.ClickException(str(error)) from error

    formatter = replay(
        deltas,
        base_path=Path(base_path) if base_path is not None else None,
        finish=config.finish_stream,
    )
    logger.debug("Replayed %d deltas into %d elements", len(deltas), len(formatter.elements))

    if config.output_format == "json":
        payload = [
            element_to_dict(element, resolve_paths=config.resolve_paths)
            for element in formatter.elements
        ]
        click.echo(json.dumps(payload, indent=2))
    else:
        click.echo("".join(render_elements(formatter.elements)), nl=False)


if __name__ == "__main__":
    cli()
