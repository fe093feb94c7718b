"""
Command-line interface for impmon.

Provides commands for replaying recorded measurement streams through the
session controller, exporting reports, and managing configuration.
"""

import logging
import sys
import tomllib

from collections.abc import Iterable, Iterator
from datetime import datetime
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import TextIO

import click

from pydantic import ValidationError

from impmon.config import (
    clear_alarm_config,
    get_alarm_config,
    get_config_path,
    get_export_directory,
    load_config,
    set_alarm_config,
)
from impmon.logging_config import setup_logging
from impmon.models.alarm import AlarmConfig, AlarmMode, AlarmNotification
from impmon.models.metadata import ExportMetadata, Sex
from impmon.models.session import EventMarker
from impmon.report.exporter import report_filename, write_report
from impmon.session.controller import SessionController
from impmon.session.events import BaseObserver, LoggingObserver
from impmon.transport.base import StreamWriterTransport
from impmon.transport.stream import feed_stream, read_frames

logger = logging.getLogger(__name__)

try:
    __version__ = get_version("impmon")
except PackageNotFoundError:
    __version__ = "dev"

MODE_CHOICES = [mode.value for mode in AlarmMode]


class ConsoleObserver(BaseObserver):
    """Echoes markers and the alarm to the terminal."""

    def on_marker(self, marker: EventMarker) -> None:
        click.echo(f"📍 Event {marker.label} at {marker.elapsed_time:.2f}s")

    def on_alarm(self, notification: AlarmNotification) -> None:
        click.echo(
            f"⚠️  {notification.message} "
            f"(value {notification.value:.2f} at {notification.elapsed_time:.2f}s)",
            err=True,
        )


def load_metadata_file(path: Path) -> ExportMetadata:
    """
    Load export metadata from a TOML file.

    Args:
        path: TOML file with name, age, sex, weight, height, circumference
            and optionally last_menstruation

    Returns:
        Validated metadata

    Raises:
        click.ClickException: If the file is unreadable or invalid
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise click.ClickException(f"Cannot read metadata file {path}: {e}") from e

    try:
        return ExportMetadata(**data)
    except ValidationError as e:
        raise click.ClickException(f"Invalid metadata in {path}: {e}") from e


def prompt_metadata() -> ExportMetadata:
    """Collect export metadata interactively."""
    name = click.prompt("Name", default="", show_default=False)
    age = click.prompt("Age", default="", show_default=False)
    sex = click.prompt("Sex", type=click.Choice([s.value for s in Sex]))
    weight = click.prompt("Weight (kg)", default="", show_default=False)
    height = click.prompt("Height (m)", default="", show_default=False)
    circumference = click.prompt(
        "Suprailiac circumference (cm)", default="", show_default=False
    )
    last_menstruation = None
    if sex == Sex.FEMALE.value:
        last_menstruation = click.prompt(
            "Last menstruation", default="", show_default=False
        )
    return ExportMetadata(
        name=name,
        age=age,
        sex=sex,
        weight=weight,
        height=height,
        circumference=circumference,
        last_menstruation=last_menstruation,
    )


def _with_markers(
    frames: Iterable[str], controller: SessionController, mark_at: set[int]
) -> Iterator[str]:
    """Yield frames, marking an event after each frame index in ``mark_at``."""
    for index, frame in enumerate(frames, start=1):
        yield frame
        if index in mark_at:
            controller.mark_event()


def _resolve_alarm(
    mode: str | None, threshold: str | None, disable: bool
) -> AlarmConfig:
    alarm = get_alarm_config()
    if disable:
        return alarm.model_copy(update={"enabled": False})
    if mode is None and threshold is None:
        return alarm
    return AlarmConfig(
        enabled=True,
        mode=AlarmMode(mode) if mode else alarm.mode,
        threshold=threshold if threshold is not None else alarm.threshold,
    )


@click.group()
@click.version_option(__version__, prog_name="impmon")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(verbose: bool) -> None:
    """impmon: impedance measurement session monitor"""
    setup_logging(verbose=verbose, console_format="%(levelname)s: %(message)s")


@cli.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--rate", type=float, help="Frames per second (default: as fast as possible)"
)
@click.option(
    "--mark-at",
    type=int,
    multiple=True,
    help="Mark an event after this frame number (repeatable)",
)
@click.option("--alarm-mode", type=click.Choice(MODE_CHOICES), help="Alarm mode")
@click.option("--threshold", help="Alarm threshold (enables the alarm)")
@click.option("--no-alarm", is_flag=True, help="Disable the configured alarm")
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Report directory (default: [export] directory or current directory)",
)
@click.option(
    "--metadata",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="TOML file with subject metadata",
)
@click.option("--ask-metadata", is_flag=True, help="Prompt for subject metadata")
@click.option("--no-export", is_flag=True, help="Do not write a report file")
@click.option("--echo-commands", is_flag=True, help="Print device commands to stdout")
def replay(
    source: TextIO,
    rate: float | None,
    mark_at: tuple[int, ...],
    alarm_mode: str | None,
    threshold: str | None,
    no_alarm: bool,
    output: Path | None,
    metadata: Path | None,
    ask_metadata: bool,
    no_export: bool,
    echo_commands: bool,
) -> None:
    """Replay a recorded stream (one value per line) as a measurement session."""
    if rate is not None and rate <= 0:
        raise click.BadParameter("must be positive", param_hint="--rate")
    if metadata and ask_metadata:
        raise click.UsageError("Use either --metadata or --ask-metadata, not both")

    alarm = _resolve_alarm(alarm_mode, threshold, no_alarm)
    if alarm.enabled and not alarm.is_valid:
        click.echo(
            "⚠️  Alarm threshold is not a number; alarm will not fire", err=True
        )

    transport = StreamWriterTransport(sys.stdout) if echo_commands else None

    with SessionController(
        alarm_config=alarm, transport=transport, refresh_interval=None
    ) as controller:
        controller.register_observer(LoggingObserver())
        controller.register_observer(ConsoleObserver())

        controller.start()
        frames = _with_markers(read_frames(source), controller, set(mark_at))
        delivered = feed_stream(controller, frames, rate_hz=rate)
        controller.pause()

        summary = controller.summary()
        status = controller.status()

    click.echo(f"\n{'=' * 50}")
    click.echo("📊 Session Summary")
    click.echo(f"{'=' * 50}")
    click.echo(f"Frames received:  {delivered}")
    click.echo(f"Samples accepted: {summary.sample_count}")
    click.echo(f"Events marked:    {status.event_count}")
    click.echo(f"Elapsed:          {status.elapsed_display}")
    if summary.sample_count:
        click.echo(f"Initial value:    {summary.initial_value:.2f}")
        click.echo(f"Final value:      {summary.final_value:.2f}")
        click.echo(
            f"Min / Max:        {summary.min_value:.2f} / {summary.max_value:.2f}"
        )
        if summary.drop_percent is not None:
            click.echo(
                f"Drop:             {summary.drop_absolute:.2f} "
                f"({summary.drop_percent:.1f}%)"
            )
    click.echo(f"Alarm:            {'FIRED' if status.alarm_fired else 'not fired'}")

    if no_export:
        return

    meta = None
    if metadata:
        meta = load_metadata_file(metadata)
    elif ask_metadata:
        meta = prompt_metadata()

    directory = output or get_export_directory()
    try:
        path = write_report(controller.export(meta), directory)
    except OSError as e:
        raise click.ClickException(f"Cannot write report to {directory}: {e}") from e
    click.echo(f"✓ Report: {path}")


@cli.command("export-name")
@click.option(
    "--date",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    help="Report date (default: today)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Report directory (default: [export] directory or current directory)",
)
def export_name(day: datetime | None, output: Path | None) -> None:
    """Print the path a report exported on the given day would be written to."""
    directory = output or get_export_directory()
    click.echo(directory / report_filename(day.date() if day else None))


@cli.command()
def serve() -> None:
    """Run the MCP control server on stdio."""
    from impmon.server import server

    logger.info(f"Starting impmon MCP server v{__version__}")
    server.run()


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("show")
def show_config_cmd() -> None:
    """Show all configuration settings."""
    config_path = get_config_path()
    if not config_path.exists():
        click.echo(f"No config file: {config_path}")
        return

    click.echo(f"Config file: {config_path}\n")
    config_data = load_config()
    if not config_data:
        click.echo("Configuration is empty.")
        return

    click.echo("Settings:")
    for section, values in config_data.items():
        if not isinstance(values, dict):
            click.echo(f"  {section} = {values!r}")
            continue
        click.echo(f"  [{section}]")
        for key, value in values.items():
            click.echo(f"    {key} = {value!r}")


@config.command("set-alarm")
@click.option(
    "--mode", type=click.Choice(MODE_CHOICES), required=True, help="Alarm mode"
)
@click.option("--threshold", type=float, required=True, help="Alarm threshold")
@click.option("--disabled", is_flag=True, help="Store the alarm but leave it off")
def set_alarm_cmd(mode: str, threshold: float, disabled: bool) -> None:
    """Store the default alarm configuration."""
    try:
        alarm = AlarmConfig(enabled=not disabled, mode=mode, threshold=threshold)
    except ValidationError as e:
        raise click.ClickException(f"Invalid alarm configuration: {e}") from e
    if not alarm.is_valid:
        raise click.ClickException(f"Threshold must be a finite number: {threshold}")

    set_alarm_config(alarm)
    state = "disabled" if disabled else "enabled"
    click.echo(f"✓ Alarm {state}: {alarm.mode.value} threshold {alarm.threshold}")
    click.echo(f"  Config: {get_config_path()}")


@config.command("clear-alarm")
def clear_alarm_cmd() -> None:
    """Remove the stored alarm configuration."""
    if "alarm" not in load_config():
        click.echo("No alarm was configured.")
        return
    clear_alarm_config()
    click.echo("✓ Removed alarm configuration")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
