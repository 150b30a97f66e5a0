"""ctestdeck CLI - ctd command."""

from pathlib import Path

import click

from ctestdeck.cli.command import command_command
from ctestdeck.cli.find import find_command
from ctestdeck.cli.list import list_command
from ctestdeck.cli.log import log_command
from ctestdeck.cli.run import run_command
from ctestdeck.config.loader import load_config
from ctestdeck.core.errors import ConfigError
from ctestdeck.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="ctd")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """ctestdeck - run CTest suites and follow their results as they stream in."""
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        raise click.ClickException(e.message) from e
    if verbose:
        config.logging.level = "DEBUG"
    configure_logging(config=config.logging)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config


cli.add_command(find_command, name="find")
cli.add_command(list_command, name="list")
cli.add_command(command_command, name="command")
cli.add_command(run_command, name="run")
cli.add_command(log_command, name="log")


if __name__ == "__main__":
    cli()
