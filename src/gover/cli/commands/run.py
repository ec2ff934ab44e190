"""
Run command for invoking a saved toolchain's binaries.
"""

import click
from rich.markup import escape

from gover.cli import cli, console
from gover.errors import RunError
from gover.runner import run_snapshot


@cli.command(
    context_settings={
        'ignore_unknown_options': True,
        'allow_interspersed_args': False,
    }
)
@click.argument('name')
@click.argument('command', nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_obj
def run(config, name, command):
    """
    Run COMMAND using the toolchain saved as NAME.

    COMMAND[0] is looked up in the snapshot's bin directory and runs with
    GOROOT set to the snapshot. NAME may be an identity or an alias.

    Examples:
        gover run go1.5 go version
        gover run 1a2b3c4 go test -short ./...
    """
    ctx = click.get_current_context()
    try:
        returncode = run_snapshot(config, name, list(command))
    except RunError as e:
        console.print(f"command failed: {escape(str(e))}")
        ctx.exit(1)

    if returncode != 0:
        console.print(f"command failed: exit status {returncode}")
        ctx.exit(returncode if returncode > 0 else 1)
