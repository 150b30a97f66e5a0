"""ctd run command - run tests and follow their status."""

import asyncio
from pathlib import Path

import click

from ctestdeck.cli.utils import open_session, reported_errors
from ctestdeck.core.progress import (
    format_record,
    get_console,
    make_status_table,
    pluralize,
    status,
)
from ctestdeck.testing.models import StatusUpdate, TestStatus
from ctestdeck.testing.session import TestSession


async def _run_and_wait(session: TestSession, tests: tuple[str, ...]) -> str:
    console = get_console()

    def show(updates: list[StatusUpdate]) -> None:
        for name, record in updates:
            console.print(format_record(name, record))

    session.on_update(show)
    handle = await session.run(tests)
    try:
        return await handle.wait()
    except asyncio.CancelledError:
        # Ctrl-C: stop the runner before leaving the event loop.
        await handle.cancel()
        raise


@click.command()
@click.argument("build_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("-t", "--test", "tests", multiple=True, help="Test to run (repeatable, default: all)")
@click.option("--show-output", is_flag=True, help="Print the runner's full output afterwards")
@click.pass_context
def run_command(
    ctx: click.Context, build_dir: Path, tests: tuple[str, ...], show_output: bool
) -> None:
    """Run the tests of BUILD_DIR and report each result as it arrives."""
    session = open_session(ctx, build_dir)
    with reported_errors():
        description = asyncio.run(_run_and_wait(session, tests))

    if show_output and session.current is not None:
        click.echo(session.current.output, nl=False)

    console = get_console()
    console.print()
    console.print(make_status_table(session.status_table))
    status(f"ctest {description}", style="success" if description == "finished" else "warning")

    stuck = session.status_table.running()
    if stuck:
        status(
            f"{pluralize(len(stuck), 'test')} never reported a result: {', '.join(stuck)}",
            style="warning",
        )

    counts = session.status_table.counts()
    if counts[TestStatus.FAILED] or counts[TestStatus.TIMEOUT] or stuck:
        ctx.exit(1)
