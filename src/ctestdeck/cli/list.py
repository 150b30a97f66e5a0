"""ctd list command - list the tests of a build directory."""

import json
from pathlib import Path

import click

from ctestdeck.cli.utils import open_session, reported_errors
from ctestdeck.core.progress import spinner


@click.command()
@click.argument("build_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_command(ctx: click.Context, build_dir: Path, as_json: bool) -> None:
    """List the tests defined in BUILD_DIR."""
    session = open_session(ctx, build_dir)
    with reported_errors(), spinner("Querying ctest"):
        names = session.list_tests()

    if as_json:
        click.echo(json.dumps(names))
        return
    for name in names:
        click.echo(name)
