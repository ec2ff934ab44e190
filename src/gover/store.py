"""
Snapshot store: saving toolchain snapshots and aliases.

A snapshot is a minimal GOROOT at <store>/<identity> holding the selected
binaries, compiled packages and tools, the include directory and the full
source tree, plus the uncommitted diff (if any) and the raw commit object.
Aliases are relative symlinks <store>/<name> -> <identity>.
"""

import os
import shutil
from pathlib import Path
from typing import Optional

from gover.config import GoverConfig
from gover.errors import StoreError
from gover.git import GitRepo, Identity
from gover.logger import get_default_logger


logger = get_default_logger()

DIFF_FILE = "diff"
COMMIT_FILE = "commit"


class SnapshotStore:
    """
    Saves snapshots of a toolchain checkout into the store directory.

    Saves are sequential and unsynchronized; an aborted save leaves the
    partially copied snapshot directory in place.
    """

    def __init__(self, config: GoverConfig, repo: Optional[GitRepo] = None):
        """
        Initialize the store.

        Args:
            config: GoverConfig instance
            repo: Git checkout being saved (defaults to config.goroot)
        """
        self.config = config
        self.store_dir = config.store_dir
        self.repo = repo if repo is not None else GitRepo(config.goroot)

    @property
    def goroot(self) -> Path:
        return self.repo.root

    def snapshot_path(self, identity: str) -> Path:
        return self.store_dir / identity

    def save(self, identity: Identity, name: Optional[str] = None) -> Path:
        """
        Save the current toolchain under its identity.

        Args:
            identity: Identity from resolve_identity()
            name: Optional alias to create for the snapshot

        Returns:
            Path to the snapshot directory

        Raises:
            StoreError: If any file operation fails
            GitError: If the commit object cannot be read
        """
        save_path = self.snapshot_path(identity.name)
        goos, goarch = self.config.platform_pair()
        os_arch = f"{goos}_{goarch}"

        logger.info(f"Saving {self.goroot} to {save_path} ({os_arch})")

        try:
            for tool in self.config.bin_tools:
                src = self.goroot / "bin" / tool
                if src.exists():
                    self.copy_file(src, save_path / "bin" / tool)

            for rel in (
                Path("pkg") / os_arch,
                Path("pkg") / "tool" / os_arch,
                Path("pkg") / "include",
                Path("src"),
            ):
                self.copy_tree(self.goroot / rel, save_path / rel)

            if identity.diff is not None:
                write_bytes(save_path / DIFF_FILE, identity.diff)

            write_bytes(save_path / COMMIT_FILE, self.repo.commit_object())

        except StoreError:
            logger.error(f"Save aborted; {save_path} is incomplete")
            raise

        if name and name != identity.name:
            self.create_alias(identity.name, name)

        return save_path

    def create_alias(self, identity: str, name: str) -> Path:
        """
        Point <store>/<name> at the snapshot named identity.

        An existing alias already pointing at the same identity is left
        alone.

        Raises:
            StoreError: If the link cannot be created
        """
        link = self.store_dir / name
        if link.is_symlink() and os.readlink(link) == identity:
            logger.info(f"Alias {name} already points to {identity}")
            return link

        try:
            os.symlink(identity, link)
        except OSError as e:
            raise StoreError(f"Cannot create alias {name} -> {identity}: {e}") from e

        logger.info(f"Created alias {name} -> {identity}")
        return link

    def copy_tree(self, src: Path, dst: Path) -> int:
        """
        Recursively copy regular files from src to dst.

        Files matching the configured exclusions (by default named "core" or
        ending in ".test") are skipped. A missing src is skipped with a
        warning.

        Returns:
            Number of files copied
        """
        if not src.is_dir():
            logger.warning(f"Skipping missing directory: {src}")
            return 0

        copied = 0
        for dirpath, _dirnames, filenames in os.walk(src, onerror=_raise_walk_error):
            rel_dir = Path(dirpath).relative_to(src)
            for file_name in filenames:
                if self.config.is_excluded(file_name):
                    continue
                self.copy_file(Path(dirpath) / file_name, dst / rel_dir / file_name)
                copied += 1

        logger.debug(f"Copied {copied} files from {src}")
        return copied

    def copy_file(self, src: Path, dst: Path) -> None:
        """
        Copy one file, preserving permission bits and modification time.

        Raises:
            StoreError: If the copy fails
        """
        if self.config.verbose:
            logger.info(f"cp {src} {dst}")

        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(src, dst)
        except (IOError, OSError) as e:
            raise StoreError(f"Failed to copy {src} -> {dst}: {e}") from e


def write_bytes(path: Path, data: bytes) -> None:
    """Write a metadata file into a snapshot directory."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except (IOError, OSError) as e:
        raise StoreError(f"Failed to write {path}: {e}") from e


def _raise_walk_error(error: OSError) -> None:
    raise StoreError(f"Cannot read directory {error.filename}: {error}") from error
