"""
List command for showing saved toolchains.
"""

import click
from rich.markup import escape

from gover.catalog import format_entry, list_snapshots
from gover.cli import cli, console
from gover.errors import CommitParseError, StoreError


@cli.command('list')
@click.pass_obj
def list_command(config):
    """
    List saved toolchains, oldest commit first.

    Each line shows the identity, the commit's author time, any alias
    names and the commit summary.
    """
    try:
        entries = list_snapshots(config.store_dir)
    except (StoreError, CommitParseError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        click.get_current_context().exit(1)

    for entry in entries:
        click.echo(format_entry(entry))
