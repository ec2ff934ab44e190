"""
Running commands with a saved toolchain.
"""

import os
import subprocess
from pathlib import Path
from typing import Sequence

from gover.config import GoverConfig
from gover.errors import RunError
from gover.logger import get_default_logger


logger = get_default_logger()


def snapshot_root(config: GoverConfig, name: str) -> Path:
    """
    Toolchain root for a snapshot identity or alias.

    Aliases are symlinks, so the path resolves through the filesystem.
    """
    return config.store_dir / name


def run_snapshot(config: GoverConfig, name: str, command: Sequence[str]) -> int:
    """
    Run <root>/bin/<command[0]> with GOROOT pointing at the saved toolchain.

    The child inherits the caller's environment and standard streams.

    Args:
        config: GoverConfig instance
        name: Snapshot identity or alias
        command: Executable name followed by its arguments

    Returns:
        Exit status of the command

    Raises:
        RunError: If the snapshot does not exist or the command cannot start
    """
    if not command:
        raise RunError("no command given")

    root = snapshot_root(config, name)
    if not root.is_dir():
        raise RunError(f"no saved toolchain named {name!r} in {config.store_dir}")

    binary = root / "bin" / command[0]
    env = dict(os.environ)
    env["GOROOT"] = str(root)

    logger.info(f"Running {binary} with GOROOT={root}")
    try:
        result = subprocess.run([str(binary), *command[1:]], env=env)
    except OSError as e:
        raise RunError(str(e)) from e

    return result.returncode
