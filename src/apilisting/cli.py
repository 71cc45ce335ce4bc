#!/usr/bin/env python3
from pathlib import Path
from typing import Optional

import click

from apilisting.listing import generate_listing
from apilisting.logger import configure_logging, logger
from apilisting.output import render_text, write_json
from apilisting.settings import load_settings


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument(
    "source",
    type=click.Path(exists=True, readable=True, path_type=Path),
)
@click.option(
    "--name",
    "review_name",
    type=str,
    default=None,
    help="Listing name (default: source directory or archive name).",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    default=None,
    help="Write the JSON listing to this file.",
)
@click.option(
    "--print/--no-print",
    "print_listing",
    default=True,
    help="Print the rendered listing to stdout.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    help="Number of parser threads (default: CPU count - 1).",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="TOML file with listing settings.",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging.",
)
def main(
    source: Path,
    review_name: Optional[str],
    output_path: Optional[Path],
    print_listing: bool,
    workers: Optional[int],
    config_file: Optional[Path],
    debug: bool,
) -> None:
    """
    Produce the public API listing of the Java sources in SOURCE (a directory,
    a .java file or a sources .jar/.zip).
    """
    configure_logging(debug)

    overrides = {"source_path": str(source)}
    if review_name:
        overrides["review_name"] = review_name
    if output_path:
        overrides["output_path"] = str(output_path)
    if workers:
        overrides["num_workers"] = workers

    try:
        settings = load_settings(
            toml_file=str(config_file) if config_file else None, **overrides
        )
        result = generate_listing(settings)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    if print_listing:
        click.echo(render_text(result.listing))

    if settings.output_path:
        out = write_json(result.listing, settings.output_path)
        logger.info("Listing written", path=str(out))

    if result.scan.failed:
        logger.warning(
            "Some files could not be parsed", count=len(result.scan.failed), files=result.scan.failed
        )


if __name__ == "__main__":
    main()
