"""ctd command command - show how a single test is invoked."""

import shlex
from pathlib import Path

import click

from ctestdeck.cli.utils import open_session, reported_errors


@click.command()
@click.argument("build_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("name")
@click.option(
    "--debugger",
    default=None,
    help="Debugger prefix, e.g. 'gdb --args' or 'lldb --'",
)
@click.pass_context
def command_command(ctx: click.Context, build_dir: Path, name: str, debugger: str | None) -> None:
    """Print the command line CTest uses for test NAME."""
    session = open_session(ctx, build_dir)
    with reported_errors():
        command = session.get_command(name)

    argv = command.with_debugger(shlex.split(debugger)) if debugger else command.argv
    if command.working_directory:
        click.echo(f"cd {shlex.quote(command.working_directory)} && {shlex.join(argv)}")
    else:
        click.echo(shlex.join(argv))
