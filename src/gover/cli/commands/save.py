"""
Save command for snapshotting the current Go toolchain.
"""

import click
from rich.markup import escape

from gover.cli import cli, console
from gover.errors import ConfigError, GitError, StoreError
from gover.git import GitRepo, resolve_identity
from gover.logger import get_default_logger
from gover.store import SnapshotStore


logger = get_default_logger()


@cli.command()
@click.argument('name', required=False)
@click.pass_obj
def save(config, name):
    """
    Save the current toolchain, optionally under NAME.

    The snapshot is keyed by the checkout's short revision, plus a digest
    of uncommitted changes when there are any. NAME becomes an alias for
    that snapshot.

    Examples:
        # Save under the revision only
        gover save

        # Save and alias as "before-gc-change"
        gover save before-gc-change
    """
    try:
        repo = GitRepo(config.goroot)
        identity = resolve_identity(repo)
        save_path = SnapshotStore(config, repo).save(identity, name)

    except (ConfigError, GitError, StoreError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        logger.debug("Save failed", exc_info=True)
        click.get_current_context().exit(1)

    if name and name != identity.name:
        console.print(f"Saved [cyan]{escape(identity.name)}[/cyan] as [cyan]{escape(name)}[/cyan]")
    else:
        console.print(f"Saved [cyan]{escape(identity.name)}[/cyan]")
    logger.info(f"Snapshot written to {save_path}")
