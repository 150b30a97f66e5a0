"""ctd log command - print one test's section of the last run's log."""

from pathlib import Path

import click

from ctestdeck.cli.utils import open_session, reported_errors


@click.command()
@click.argument("build_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("name")
@click.pass_context
def log_command(ctx: click.Context, build_dir: Path, name: str) -> None:
    """Print the output test NAME produced in the last run."""
    session = open_session(ctx, build_dir)
    with reported_errors():
        text = session.extract_log(name)
    click.echo(text, nl=False)
