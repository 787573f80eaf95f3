"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Option
from typing_extensions import Annotated

from boneclone.configuration.env import settings
from boneclone.configuration.exceptions import ConfigurationLoadError
from boneclone.configuration.loader import load_configuration
from boneclone.providers.factory import new_provider
from boneclone.repository.operations import GitPythonOperations
from boneclone.synchronize.driver import run_synchronization
from boneclone.synchronize.processor import new_processor_for_config
from boneclone.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Keep a shared skeleton of files in sync across many repositories.")


@typer_app.callback()
def main_callback() -> None:
    """Run BoneClone."""


@typer_app.command(name="run")
def run_cli(
    config: Annotated[
        Path,
        Option("--config", "-c", envvar="BONECLONE_CONFIG", help="The config file to be used."),
    ] = Path(settings.BONECLONE_CONFIG),
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug logging.")] = settings.DEBUG,
) -> None:
    """Propagate the skeleton files to every opted-in repository.

    Failures for individual providers or repositories are logged and do not
    change the exit code; only an unreadable configuration file does.
    """
    configure_logging(debug=debug)

    try:
        boneclone_config = load_configuration(config)
    except ConfigurationLoadError as exc:
        typer.echo(f"error loading config: {exc}", err=True)
        raise typer.Exit(1) from exc

    processor = new_processor_for_config(boneclone_config, GitPythonOperations(), new_provider)
    results = asyncio.run(run_synchronization(boneclone_config, new_provider, processor))

    typer.echo(
        f"Processed {len(results.results)} repositories: {len(results.failed)} failed, {len(results.skipped_providers)} provider(s) skipped"
    )
