"""Click-based CLI for pinba_monitor."""

import json
import subprocess
import sys
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import MonitoringConfig, create_default_settings_file, load_config
from .config.config_loader import DEFAULT_SETTINGS_FILE
from .engine import LocalEngine, RequestInfo
from .errors import ConfigurationError, MonitoringError
from .gate import MetricsGate
from .monitoring_logging import setup_logging
from .timers import NamedTimerRegistry


def common_options(f: Any) -> Any:
    """Options shared by all commands."""
    f = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
        help="Settings file path",
    )(f)
    return f


def _load(config_file: Path | None, quiet: bool, verbose: bool) -> MonitoringConfig:
    if quiet and verbose:
        raise click.UsageError("--quiet and --verbose are mutually exclusive")
    try:
        config = load_config(config_file)
    except ConfigurationError as e:
        raise click.ClickException(e.format(use_color=False)) from e
    setup_logging(
        level=config.log_level,
        quiet=quiet,
        verbose=verbose,
        log_format=config.log_format,
    )
    return config


def _parse_tags(values: tuple[str, ...]) -> dict[str, str]:
    tags: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--tag")
        tags[name] = value
    return tags


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """pinba-monitor - timer facade over a profiling engine."""


@cli.command()
@common_options
@click.option("--json", "as_json", is_flag=True, help="Print configuration as JSON")
def status(config_file: Path | None, quiet: bool, verbose: bool, as_json: bool) -> None:
    """Show the resolved configuration and whether monitoring is enabled."""
    config = _load(config_file, quiet, verbose)

    if as_json:
        click.echo(json.dumps(config.model_dump(), indent=2))
        return

    state = "enabled" if config.enabled else "disabled"
    click.echo(f"Monitoring: {state}")
    for name, value in config.model_dump().items():
        if name == "enabled":
            continue
        click.echo(f"  {name}: {value if value not in (None, '') else '-'}")


@cli.command()
@click.option(
    "--path",
    "-p",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_SETTINGS_FILE,
    show_default=True,
    help="Settings file to create",
)
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
def init(settings_path: Path, force: bool) -> None:
    """Write a commented settings file template."""
    if settings_path.exists() and not force:
        raise click.ClickException(
            f"{settings_path} already exists (use --force to overwrite)"
        )
    try:
        create_default_settings_file(settings_path)
    except OSError as e:
        raise click.ClickException(f"Cannot write {settings_path}: {e}") from e
    click.echo(f"Created {settings_path}")


@cli.command(
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False}
)
@common_options
@click.option("--tag", "-t", "tag_values", multiple=True, help="Timer tag as NAME=VALUE")
@click.option("--script-name", help="Script name reported with the request")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def measure(
    config_file: Path | None,
    quiet: bool,
    verbose: bool,
    tag_values: tuple[str, ...],
    script_name: str | None,
    command: tuple[str, ...],
) -> None:
    """Time COMMAND and print the flushed request as JSON.

    Monitoring is forced on for the duration of the command.
    """
    config = _load(config_file, quiet, verbose)
    tags = _parse_tags(tag_values)

    flushed: list[RequestInfo] = []
    engine = LocalEngine(
        hostname=config.hostname,
        server_name=config.server_name,
        script_name=config.script_name,
        schema=config.request_schema,
        sink=flushed.append,
    )
    gate = MetricsGate.from_config(config, engine=engine).set_enabled(True)
    timers = NamedTimerRegistry(gate)

    try:
        with timers.measure("command", {"command": command[0], **tags}):
            try:
                returncode = subprocess.call(list(command))
            except OSError as e:
                raise click.ClickException(f"Cannot run {command[0]}: {e}") from e
    except MonitoringError as e:
        raise click.ClickException(e.format(use_color=False)) from e

    gate.flush(script_name or config.script_name or " ".join(command))
    click.echo(json.dumps(flushed[-1].to_dict(), indent=2))
    sys.exit(returncode)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
