"""
Catalog of saved snapshots.

Reconstructs each snapshot's commit metadata and alias names by scanning the
store directory, and renders the sorted listing.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from gover.commit import CommitInfo, parse_commit
from gover.errors import StoreError
from gover.logger import get_default_logger
from gover.store import COMMIT_FILE


logger = get_default_logger()

TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


@dataclass
class CatalogEntry:
    """A saved snapshot as seen at list time."""

    identity: str
    commit: CommitInfo = field(default_factory=CommitInfo)
    names: List[str] = field(default_factory=list)

    def sort_key(self) -> float:
        # Unset timestamps sort before every real one
        if self.commit.author_date is None:
            return float("-inf")
        return self.commit.author_date.timestamp()


def list_snapshots(store_dir: Path) -> List[CatalogEntry]:
    """
    Scan the store directory for snapshots and their aliases.

    Every real subdirectory is a snapshot; its ``commit`` file is parsed when
    present. Every symlink whose target names a snapshot is recorded as one
    of its aliases; other symlinks are ignored.

    Args:
        store_dir: Store directory to scan

    Returns:
        Entries sorted by author time, oldest first. Entries without a
        timestamp come first, in name order.

    Raises:
        StoreError: If the store directory exists but cannot be read
        CommitParseError: If a commit file has a malformed author line
    """
    try:
        children = sorted(store_dir.iterdir(), key=lambda p: p.name)
    except FileNotFoundError:
        logger.debug(f"Store directory does not exist: {store_dir}")
        return []
    except OSError as e:
        raise StoreError(f"Cannot read store directory {store_dir}: {e}") from e

    entries: List[CatalogEntry] = []
    by_identity: Dict[str, CatalogEntry] = {}

    for child in children:
        if child.is_symlink() or not child.is_dir():
            continue
        entry = CatalogEntry(identity=child.name)
        try:
            entry.commit = parse_commit((child / COMMIT_FILE).read_bytes())
        except FileNotFoundError:
            logger.debug(f"No commit file in {child}")
        except OSError as e:
            raise StoreError(f"Cannot read {child / COMMIT_FILE}: {e}") from e
        entries.append(entry)
        by_identity[entry.identity] = entry

    for child in children:
        if not child.is_symlink():
            continue
        try:
            target = os.readlink(child)
        except OSError:
            continue
        entry = by_identity.get(target)
        if entry is not None:
            entry.names.append(child.name)

    return sorted(entries, key=CatalogEntry.sort_key)


def format_entry(entry: CatalogEntry) -> str:
    """
    Render one listing line.

    Fields are the identity, the local author time, the alias names in
    brackets and the summary line; empty fields are left out.

    Example:
        >>> format_entry(CatalogEntry("abc1234", names=["go1.5"]))
        'abc1234 [go1.5]'
    """
    parts = [entry.identity]
    if entry.commit.author_date is not None:
        parts.append(entry.commit.author_date.astimezone().strftime(TIME_FORMAT))
    if entry.names:
        parts.append("[" + " ".join(entry.names) + "]")
    if entry.commit.summary:
        parts.append(entry.commit.summary)
    return " ".join(parts)
