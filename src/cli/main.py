"""CLI commands for the stale station finder."""

import logging
import sys
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import NoReturn

import click
import structlog

from src.config.constants import COMPONENT_CLI, DEFAULT_CONFIG_FILE
from src.config.effective import EffectiveConfig
from src.config.error_hints import format_validation_error
from src.config.loader import ConfigLoader
from src.config.schemas.base import Origin, RunMode
from src.config.schemas.search import SearchConfig
from src.config.state_machine import ConfigState
from src.fetch.cache import EtagStore
from src.fetch.client import DumpFetcher
from src.fetch.models import FetchError
from src.filters.errors import ConfigurationError
from src.filters.pipeline import build_pipeline
from src.journal.errors import JournalError
from src.journal.reader import JournalReader
from src.observability.logging import bind_run_context, configure_logging
from src.observability.metrics import collect_metrics
from src.ranker.errors import UnrankableRecord
from src.ranker.ranker import StationRanker
from src.renderer.json_renderer import JsonRenderer
from src.renderer.protocols import ResultRenderer
from src.renderer.text import TextRenderer
from src.searcher.errors import SearchError
from src.searcher.modes import ModeRunner
from src.searcher.searcher import StationSearcher
from src.settings import get_settings
from src.stations.errors import DecodeError
from src.stations.loader import StationLoader
from src.stats.histogram import DayHistogram


logger = structlog.get_logger()

# Errors reported as a one-line message with exit code 1
RUN_ERRORS = (
    ConfigurationError,
    DecodeError,
    FetchError,
    JournalError,
    SearchError,
    UnrankableRecord,
)

OUTPUT_FORMATS = ("text", "json")


def _setup_logging(
    json_logs: bool,
    verbose: bool,
    run_id: str,
    command: str,
) -> structlog.stdlib.BoundLogger:
    """Configure logging and return a logger bound to the command.

    Args:
        json_logs: Use JSON log lines.
        verbose: Enable debug logging.
        run_id: Unique run identifier.
        command: CLI command name.

    Returns:
        Bound logger.
    """
    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, json_format=json_logs)
    bind_run_context(run_id)
    log: structlog.stdlib.BoundLogger = logger.bind(component=COMPONENT_CLI, command=command)
    return log


def _fail(log: structlog.stdlib.BoundLogger, error: Exception) -> NoReturn:
    """Report a run error and exit with status 1."""
    log.error("command_failed", error_type=type(error).__name__, error=str(error))
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _echo_validation_errors(loader: ConfigLoader) -> None:
    click.echo("Configuration validation failed:", err=True)
    for error in loader.validation_errors:
        formatted = format_validation_error(
            location=error["loc"],
            message=error["msg"],
            error_type=error.get("type", "unknown"),
            include_hint=True,
        )
        click.echo(f"  - {formatted}", err=True)


def _load_configuration(
    config_path: Path,
    run_id: str,
    log: structlog.stdlib.BoundLogger,
) -> EffectiveConfig:
    """Load and validate configuration, exiting on failure.

    Args:
        config_path: Path to config.yaml.
        run_id: Run identifier.
        log: Logger instance.

    Returns:
        Validated effective configuration.
    """
    loader = ConfigLoader(run_id=run_id)

    try:
        effective = loader.load(config_path)
    except Exception as e:
        log.warning("config_load_failed", error=str(e), **loader.get_validation_summary())
        _echo_validation_errors(loader)
        sys.exit(1)

    if loader.state != ConfigState.READY:
        log.error("unexpected_state", state=loader.state.name)
        sys.exit(1)

    log.info("config_validated", **effective.summary())
    return effective


def _build_fetcher(search: SearchConfig, data_dir: Path, run_id: str) -> DumpFetcher:
    """Create the dump fetcher with its ETag store in ``data_dir``."""
    etags = EtagStore(data_dir / search.fetch.etag_cache_file)
    return DumpFetcher(search.fetch, etags, run_id)


def _build_renderer(output_format: str) -> ResultRenderer:
    if output_format == "json":
        return JsonRenderer()
    return TextRenderer()


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Find nearby stations whose market data is out of date."""


@cli.command()
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(path_type=Path),
    help="Path to config.yaml.",
)
@click.option(
    "--max-dist",
    type=click.FloatRange(min=0.0, min_open=True),
    default=None,
    help="Maximum distance from the origin in light years.",
)
@click.option(
    "-n",
    "--max-entries",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum rows to show; 0 removes the cap and shows every match.",
)
@click.option(
    "--mode",
    type=click.Choice([m.value for m in RunMode]),
    default=None,
    help="Run mode.",
)
@click.option(
    "--pos-origin",
    type=click.Choice([o.value for o in Origin], case_sensitive=False),
    default=None,
    help="Distance calculation origin.",
)
@click.option(
    "--refresh-coordinates",
    is_flag=True,
    help="Rebuild the system coordinates cache from a fresh dump.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="text",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def run(  # noqa: PLR0913
    config_path: Path,
    max_dist: float | None,
    max_entries: int | None,
    mode: str | None,
    pos_origin: str | None,
    refresh_coordinates: bool,
    output_format: str,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Rank nearby stations by stale days per light year.

    Configuration is validated and the filter pipeline is built before
    any download starts.
    """
    run_id = str(uuid.uuid4())
    log = _setup_logging(json_logs, verbose, run_id, "run")
    effective = _load_configuration(config_path, run_id, log)
    effective = effective.with_search(
        effective.search.with_overrides(
            max_dist=max_dist,
            max_entries=max_entries,
            mode=mode,
            pos_origin=pos_origin,
        )
    )
    search = effective.search
    log.info("run_config", **effective.summary())
    settings = get_settings()

    try:
        pipeline = build_pipeline(search)
        fetcher = _build_fetcher(search, settings.data_dir, run_id)
        stations = StationLoader(fetcher, settings.data_dir, run_id).load(
            refresh_coordinates=refresh_coordinates
        )

        reader = JournalReader(settings.journal_dir)
        observer_source = (
            reader.sol_origin if search.pos_origin == Origin.SOL else reader.load_current
        )
        searcher = StationSearcher(
            stations,
            pipeline,
            search.freshness.policy(),
            StationRanker(run_id=run_id),
        )
        runner = ModeRunner(
            searcher,
            _build_renderer(output_format),
            observer_source,
            search.limit,
        )
        runner.run(search.mode)
    except RUN_ERRORS as e:
        _fail(log, e)
    except KeyboardInterrupt:
        log.info("run_interrupted")
    finally:
        log.debug("run_metrics", metrics=collect_metrics())


@cli.command()
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(path_type=Path),
    help="Path to config.yaml.",
)
@click.option(
    "--output-dir",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the days_<category>.txt files.",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def stats(
    config_path: Path,
    output_dir: Path,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Write per-category histograms of days since the last update."""
    run_id = str(uuid.uuid4())
    log = _setup_logging(json_logs, verbose, run_id, "stats")
    search = _load_configuration(config_path, run_id, log).search
    settings = get_settings()

    try:
        fetcher = _build_fetcher(search, settings.data_dir, run_id)
        loader = StationLoader(fetcher, settings.data_dir, run_id)
        loader.download_stations()
        histogram = DayHistogram.from_stations(
            loader.read_stations(),
            datetime.now(UTC),
            exclude_names=search.filter.exclude_names,
            exclude_systems=search.filter.exclude_systems,
        )
        files = histogram.write(output_dir, run_id)
    except RUN_ERRORS as e:
        _fail(log, e)

    for generated in files:
        click.echo(f"Wrote {generated.path} ({generated.bytes_written} bytes)")


@cli.command()
@click.option(
    "--config",
    "config_path",
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    type=click.Path(path_type=Path),
    help="Path to config.yaml.",
)
def validate(config_path: Path) -> None:
    """Validate the configuration file without downloading anything."""
    run_id = str(uuid.uuid4())
    configure_logging(level=logging.WARNING, json_format=False)
    bind_run_context(run_id)
    log: structlog.stdlib.BoundLogger = logger.bind(component=COMPONENT_CLI, command="validate")

    loader = ConfigLoader(run_id=run_id)
    try:
        effective = loader.load(config_path)
    except Exception:
        _echo_validation_errors(loader)
        sys.exit(1)

    try:
        pipeline = build_pipeline(effective.search)
    except ConfigurationError as e:
        _fail(log, e)

    summary = effective.summary()
    categories = ", ".join(c.value for c in effective.search.freshness.enabled_categories())
    click.echo("Configuration is valid!")
    click.echo(f"  Mode: {summary['mode']}")
    click.echo(f"  Origin: {summary['pos_origin']}")
    click.echo(f"  Categories: {categories}")
    click.echo(f"  Stages: {', '.join(pipeline.stage_names)}")
    click.echo(f"  Checksum: {summary['config_checksum']}")


if __name__ == "__main__":
    cli()
