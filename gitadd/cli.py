"""
Command line interface using Typer with Rich integration.
"""

import json
import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.markup import escape
from loguru import logger

from .core import GitAdd, GitAddError
from .config.settings import Settings
from .git_ops.repository import GitRepositoryError


# Create Typer app
app = typer.Typer(
    name="gitadd",
    help="Interactive add/reset for the files in a git working tree",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=False  # Allow default command
)

# Global consoles for output and error handling
console = Console()
err_console = Console(stderr=True)


def setup_logging(log_level: str = "WARNING", log_file: Optional[Path] = None, to_console: bool = True):
    """Setup logging configuration."""
    logger.remove()  # Remove default handler

    # Console logging with colors; the interactive screen owns the terminal
    if to_console:
        logger.add(
            sys.stderr,
            level=log_level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            colorize=True
        )

    # File logging
    if log_file:
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            err_console.print(f"[yellow]Warning:[/yellow] cannot create log directory: {e}")
            return
        logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="1 MB",
            retention="7 days"
        )


def _load_settings(config_file: Optional[Path]) -> Settings:
    if config_file:
        return Settings.from_file(config_file)
    return Settings()


def _log_level(settings: Settings, verbose: bool, debug: bool) -> str:
    # debug overrides verbose
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    return settings.ui.log_level


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    repo_path: Optional[Path] = typer.Option(
        None, "--repo", "-r",
        help="Git repository path (default: current directory)"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", "-c",
        help="Path to configuration file"
    ),
    filter_text: Optional[str] = typer.Option(
        None, "--filter", "-f",
        help="Only show paths containing this text"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v",
        help="Enable verbose logging"
    ),
    debug: bool = typer.Option(
        False, "--debug", "-d",
        help="Enable debug logging (includes verbose)"
    ),
    version: bool = typer.Option(
        False, "--version",
        help="Show version information"
    )
):
    """
    Interactive add/reset for the files in a git working tree.

    [bold blue]Keys:[/bold blue]

    [green]↑/↓[/green] move   [green]→[/green] stage   [green]←[/green] unstage   [green]a[/green] stage all   [green]u[/green] unstage all
    [green]/[/green] filter   [green]r[/green] refresh   [green]q[/green] quit

    [bold blue]Examples:[/bold blue]

    [green]gitadd[/green]                       # Interactive session
    [green]gitadd --filter src/[/green]         # Only paths containing "src/"
    [green]gitadd list[/green]                  # Print the file list once
    [green]gitadd config --show[/green]         # Show configuration
    """
    if version:
        from . import __version__
        console.print(f"[bold blue]gitadd[/bold blue] version [green]{__version__}[/green]")
        return

    ctx.obj = {
        "repo_path": repo_path,
        "config_file": config_file,
        "filter_text": filter_text,
        "verbose": verbose,
        "debug": debug,
    }

    # If no subcommand was called, run the interactive session
    if ctx.invoked_subcommand is None:
        _run_interactive(repo_path, config_file, filter_text, verbose, debug)


@app.command("list")
def list_changes(
    ctx: typer.Context,
    filter_text: Optional[str] = typer.Option(
        None, "--filter", "-f",
        help="Only show paths containing this text"
    )
):
    """Print the reconciled file list once and exit."""
    options = ctx.obj or {}
    try:
        settings = _load_settings(options.get("config_file"))
        setup_logging(_log_level(settings, options.get("verbose"), options.get("debug")), settings.log_file)

        gitadd = GitAdd(settings, options.get("repo_path"))
        text = filter_text if filter_text is not None else options.get("filter_text")
        gitadd.show(text if text is not None else settings.ui.initial_filter)

    except (GitRepositoryError, GitAddError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ValueError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False, "--show", "-s",
        help="Show current configuration"
    ),
    save: bool = typer.Option(
        False, "--save",
        help="Write the effective configuration to the default config file"
    )
):
    """
    Manage gitadd configuration.

    [bold blue]Examples:[/bold blue]

    [green]gitadd config --show[/green]         # Show current config
    [green]gitadd config --save[/green]         # Persist current config
    """
    options = ctx.obj or {}
    try:
        settings = _load_settings(options.get("config_file"))
    except ValueError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if show:
        typer.echo(json.dumps(settings.model_dump(mode="json"), indent=2))
        typer.echo(f"config file: {settings.config_dir / 'config.json'}")
        typer.echo(f"log file: {settings.log_file}")

    if save:
        config_path = settings.config_dir / "config.json"
        settings.save_to_file(config_path)
        console.print(f"[green]Configuration saved to:[/green] {config_path}")

    if not show and not save:
        console.print("Use [green]--show[/green] to see current configuration")


def _run_interactive(
    repo_path: Optional[Path],
    config_file: Optional[Path],
    filter_text: Optional[str],
    verbose: bool,
    debug: bool
):
    """Run the interactive session."""
    try:
        settings = _load_settings(config_file)
        setup_logging(_log_level(settings, verbose, debug), settings.log_file, to_console=False)

        gitadd = GitAdd(settings, repo_path)
        gitadd.run(filter_text)

    except (GitRepositoryError, GitAddError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except ValueError as e:
        err_console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except KeyboardInterrupt:
        raise typer.Exit(130)
    except Exception as e:
        logger.exception("Unexpected error occurred")
        err_console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
