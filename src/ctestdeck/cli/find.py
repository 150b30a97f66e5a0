"""ctd find command - locate build directories."""

from pathlib import Path

import click

from ctestdeck.cli.utils import get_config
from ctestdeck.core.progress import pluralize, status
from ctestdeck.testing.discovery import find_build_directories


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.pass_context
def find_command(ctx: click.Context, root: Path) -> None:
    """List CTest build directories below ROOT (default: current directory)."""
    config = get_config(ctx)
    found = list(find_build_directories(root, config.discovery))
    for build_dir in found:
        click.echo(str(build_dir))
    if not found:
        status(f"No build directories found below {root.resolve()}", style="warning")
    else:
        status(pluralize(len(found), "build directory", "build directories"), style="success")
