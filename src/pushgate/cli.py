# src/pushgate/cli.py: Command-Line Interface (CLI) entry point.
# Implemented using Typer, this module provides the main entry point for the
# 'pushgate' command. 'pre-receive' is what the git server runs; the other
# subcommands let administrators validate, store and review hook settings.

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import (
    SETTINGS_BRANCHES_PATTERN,
    SETTINGS_EXCLUDE_PATTERN,
    SETTINGS_INCLUDE_PATTERN,
    Config,
    HookSettings,
    get_default_config_path,
    load_config,
    validate_settings,
)
from .hook import PreReceiveHook, read_update
from .settings import YamlSettingsSource, save_repo_settings
from .util.errors import ConfigError, PolicyViolationError, PushgateError, SettingsValidationError
from .util.log import setup_logging

app = typer.Typer(
    help="A git pre-receive hook that rejects pushes containing forbidden file names."
)
console = Console(stderr=True)

ConfigOption = typer.Option(
    None, "--config", "-c", help="Path to the policy.yaml file.", dir_okay=False
)

def version_callback(value: bool):
    """Print the version and exit."""
    if value:
        print(f"pushgate version: {__version__}")
        raise typer.Exit()

@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
):
    """pushgate CLI."""

def get_config(path: Optional[Path], check_settings: bool = True) -> Config:
    """Loads the config and handles errors."""
    try:
        return load_config(path, check_settings=check_settings)
    except PushgateError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

@app.command("pre-receive")
def pre_receive(
    repo: Optional[str] = typer.Option(
        None, "--repo", help="Repository name used to look up settings. [default: git directory name]"
    ),
    git_dir: Path = typer.Option(
        Path("."), "--git-dir", help="The receiving repository.", file_okay=False
    ),
    config_path: Optional[Path] = ConfigOption,
):
    """Check the ref updates on stdin. Exits non-zero to refuse the push."""
    config = get_config(config_path)
    setup_logging(config.logging)

    hook = PreReceiveHook(YamlSettingsSource(config), git_dir)
    try:
        update = read_update(sys.stdin, repo or hook.repository_name())
        hook.check(update)
    except PolicyViolationError as e:
        console.print(e.verdict.summary, markup=False, highlight=False, soft_wrap=True)
        for message in e.verdict.messages:
            console.print(message, markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(e.exit_code)
    except PushgateError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)

@app.command()
def validate(config_path: Optional[Path] = ConfigOption):
    """Validate the patterns of every settings block in the policy file."""
    config = get_config(config_path, check_settings=False)

    table = Table("Settings", "Field", "Error")
    for name, settings in config.settings_blocks():
        for field, message in validate_settings(settings):
            table.add_row(escape(name), field, message)

    if table.row_count:
        console.print(table)
        raise typer.Exit(ConfigError.exit_code)
    console.print("[bold green]All hook settings are valid.[/bold green]")

@app.command("set")
def set_settings(
    repo: str = typer.Argument(..., help="The repository the settings apply to."),
    pattern: str = typer.Option(..., "--pattern", help="Forbidden file name pattern."),
    exclude: Optional[str] = typer.Option(None, "--exclude", help="Exempted file name pattern."),
    branches: Optional[str] = typer.Option(None, "--branches", help="Full ref name pattern the hook applies to."),
    config_path: Optional[Path] = ConfigOption,
):
    """Validate and store the hook settings of a repository."""
    settings = HookSettings(include=pattern, exclude=exclude, branches=branches)
    try:
        path = save_repo_settings(repo, settings, config_path)
    except SettingsValidationError as e:
        for field, messages in e.field_errors.items():
            for message in messages:
                console.print(f"[bold red]{field}:[/bold red] {message}")
        raise typer.Exit(e.exit_code)
    except PushgateError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(e.exit_code)
    console.print(f"Settings for [bold cyan]{escape(repo)}[/bold cyan] saved to {path}")

@app.command()
def status(config_path: Optional[Path] = ConfigOption):
    """Show the configured file name policies."""
    config = get_config(config_path)
    console.print(f"Policy file: {config_path or get_default_config_path()}")

    table = Table("Settings", SETTINGS_INCLUDE_PATTERN, SETTINGS_EXCLUDE_PATTERN, SETTINGS_BRANCHES_PATTERN)
    for name, settings in config.settings_blocks():
        table.add_row(
            escape(name),
            escape(settings.include or ""),
            escape(settings.exclude or ""),
            escape(settings.branches or ""),
        )
    console.print(table)

if __name__ == "__main__":
    app()
