"""
Command-line interface for gover.

Provides the save, list and run commands. Global options build a single
GoverConfig that is handed to each command through the click context.
"""

import click
from pathlib import Path
from rich.console import Console
from rich.markup import escape

from gover import __version__
from gover.config import GoverConfig
from gover.errors import ConfigError
from gover.logger import configure_logging


console = Console(stderr=True, highlight=False)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name='gover')
@click.option(
    '-v', '--verbose',
    is_flag=True,
    help='Print each file copied while saving',
)
@click.option(
    '--dir', 'store_dir',
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help='Directory of saved Go roots (default: $XDG_CACHE_HOME/gover or ~/.cache/gover)',
)
@click.option(
    '--goroot',
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help='Go checkout to save (default: $GOROOT or `go env GOROOT`)',
)
@click.option(
    '--config', 'config_path',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Path to a YAML configuration file',
)
@click.option(
    '--log-level',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default='WARNING',
    help='Logging level (default: WARNING)',
)
@click.pass_context
def cli(ctx, verbose, store_dir, goroot, config_path, log_level):
    """
    Save, list and run builds of a Go toolchain.

    \b
    Usage:
      gover [flags] save [name]
      gover [flags] list
      gover [flags] run name command...
    """
    configure_logging(log_level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help(), err=True)
        ctx.exit(2)

    overrides = {
        'store_dir': str(store_dir) if store_dir else None,
        'goroot': str(goroot) if goroot else None,
        'verbose': verbose or None,
    }
    try:
        config = GoverConfig(config_path=config_path, overrides=overrides)
    except ConfigError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        ctx.exit(1)

    # Copies are logged at INFO, so verbose needs at least that level
    if config.verbose and log_level.upper() in ('WARNING', 'ERROR', 'CRITICAL'):
        configure_logging('INFO')
    ctx.obj = config


def main():
    """Main entry point for the CLI."""
    # Import commands to register them
    from gover.cli.commands import save, listing, run

    cli()


if __name__ == '__main__':
    main()
