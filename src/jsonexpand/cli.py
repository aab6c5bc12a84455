"""jsonexpand Command Line Interface.

Entry point for the jsonexpand CLI tool.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import typer
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from jsonexpand import __version__
from jsonexpand.core.config import PipelineSettings, load_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

    from jsonexpand.contracts import Event
    from jsonexpand.engine.pipeline import Pipeline
    from jsonexpand.plugins.manager import PluginManager

__all__ = [
    "app",
    "load_settings",  # Re-exported from config for convenience
]

# Module-level singleton for plugin manager
_plugin_manager_cache: PluginManager | None = None


def _get_plugin_manager() -> PluginManager:
    """Get initialized plugin manager (singleton).

    Returns:
        PluginManager with all built-in plugins registered
    """
    global _plugin_manager_cache

    from jsonexpand.plugins.manager import PluginManager

    if _plugin_manager_cache is None:
        manager = PluginManager()
        manager.register_builtin_plugins()
        _plugin_manager_cache = manager
    return _plugin_manager_cache


@dataclass(frozen=True)
class _GlobalOptions:
    verbose: bool
    json_logs: bool


app = typer.Typer(
    name="jsonexpand",
    help="jsonexpand: expand JSON text fields in event streams.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"jsonexpand version {__version__}")
        raise typer.Exit()


def _load_dotenv(env_file: Path | None = None) -> bool:
    """Load environment variables from .env file.

    Args:
        env_file: Explicit path to .env file. If None, searches for .env
                 in current directory and parent directories.

    Returns:
        True if .env was found and loaded, False otherwise.

    Raises:
        typer.Exit: If explicit env_file path doesn't exist.
    """
    from dotenv import load_dotenv

    if env_file is not None:
        if not env_file.exists():
            typer.secho(
                f"Error: .env file not found: {env_file}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(1)
        return load_dotenv(env_file, override=False)

    return load_dotenv(override=False)  # Don't override existing env vars


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    no_dotenv: bool = typer.Option(
        False,
        "--no-dotenv",
        help="Skip loading .env file.",
    ),
    env_file: Path | None = typer.Option(
        None,
        "--env-file",
        help="Path to .env file (skips automatic search).",
        exists=False,  # Existence is checked by _load_dotenv for a clearer message
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose/debug logging.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Output structured JSON logs (for machine processing).",
    ),
) -> None:
    """jsonexpand: expand JSON text fields in event streams."""
    # Configure logging before any subcommand runs; `run` refines it from settings
    from jsonexpand.core.logging import configure_logging

    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")
    ctx.obj = _GlobalOptions(verbose=verbose, json_logs=json_logs)

    if not no_dotenv:
        _load_dotenv(env_file=env_file)
    elif env_file is not None:
        typer.secho(
            "Warning: --env-file ignored because --no-dotenv is set.",
            fg=typer.colors.YELLOW,
            err=True,
        )


def _load_settings_or_exit(settings: str) -> PipelineSettings:
    """Load settings, printing a readable error and exiting on failure."""
    settings_path = Path(settings).expanduser()
    try:
        return load_settings(settings_path)
    except (YamlParserError, YamlScannerError) as e:
        typer.echo(f"YAML syntax error in {settings}: {e.problem}", err=True)
        raise typer.Exit(1) from None
    except FileNotFoundError:
        typer.echo(f"Error: Settings file not found: {settings}", err=True)
        raise typer.Exit(1) from None
    except ValidationError as e:
        typer.echo("Configuration errors:", err=True)
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(1) from None


def _build_pipeline_or_exit(config: PipelineSettings) -> Pipeline:
    """Instantiate every configured transform, exiting on configuration errors."""
    from jsonexpand.engine.pipeline import Pipeline
    from jsonexpand.plugins.config_base import PluginConfigError

    manager = _get_plugin_manager()
    try:
        transforms = [manager.create_transform(stage) for stage in config.transforms]
    except (PluginConfigError, ValueError) as e:
        typer.echo(f"Error instantiating plugins: {e}", err=True)
        raise typer.Exit(1) from None
    return Pipeline(transforms)


@app.command()
def run(
    ctx: typer.Context,
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    input_file: typer.FileText = typer.Option(
        "-",
        "--input",
        "-i",
        help="JSON Lines input file ('-' for stdin).",
    ),
    output_file: typer.FileTextWrite = typer.Option(
        "-",
        "--output",
        "-o",
        help="JSON Lines output file ('-' for stdout).",
    ),
) -> None:
    """Stream JSON Lines events through the configured pipeline."""
    from jsonexpand.core.logging import configure_logging
    from jsonexpand.engine.io import EventSourceError, read_events, write_events

    config = _load_settings_or_exit(settings)

    options: _GlobalOptions = ctx.obj
    configure_logging(
        json_output=options.json_logs or config.logging.json_output,
        level="DEBUG" if options.verbose else config.logging.level,
    )

    pipeline = _build_pipeline_or_exit(config)

    events_in = 0

    def _counted(events: Iterator[Event]) -> Iterator[Event]:
        nonlocal events_in
        for event in events:
            events_in += 1
            yield event

    try:
        events_out = write_events(pipeline.run(_counted(read_events(input_file))), output_file)
    except EventSourceError as e:
        typer.echo(f"Error reading events: {e}", err=True)
        raise typer.Exit(1) from None
    finally:
        pipeline.close()
        output_file.flush()

    typer.echo(f"events in: {events_in}, events out: {events_out}", err=True)


@app.command()
def validate(
    settings: str = typer.Option(
        ...,
        "--settings",
        "-s",
        help="Path to settings YAML file.",
    ),
    show: bool = typer.Option(
        False,
        "--show",
        help="Print the resolved configuration (file + environment + defaults) as YAML.",
    ),
) -> None:
    """Validate pipeline configuration without running."""
    import yaml

    config = _load_settings_or_exit(settings)
    pipeline = _build_pipeline_or_exit(config)
    pipeline.close()

    typer.secho("Configuration valid.", fg=typer.colors.GREEN)
    for index, stage in enumerate(config.transforms, start=1):
        typer.echo(f"  {index}. {stage.plugin}")

    if show:
        typer.echo(yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False))


@app.command()
def plugins() -> None:
    """List available transform plugins."""
    for spec in _get_plugin_manager().get_plugin_specs():
        typer.echo(f"{spec.name} ({spec.version}): {spec.description}")


if __name__ == "__main__":
    app()
