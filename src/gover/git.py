"""
Git access and snapshot identity resolution.

All interaction with the ``git`` binary goes through :func:`subprocess.run`.
Failures surface as :class:`GitError` so callers never see raw subprocess
exceptions. git's own stderr is passed through to the user.
"""

import hashlib
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from gover.errors import GitError
from gover.logger import get_default_logger


logger = get_default_logger()

DIGEST_LENGTH = 10


@dataclass(frozen=True)
class Identity:
    """
    Content-based key of a toolchain state.

    Attributes:
        name: Short revision, or "<rev>+<digest>" when uncommitted changes exist
        diff: Raw uncommitted diff, or None for a clean checkout
    """

    name: str
    diff: Optional[bytes] = None

    def __str__(self) -> str:
        return self.name


class GitRepo:
    """Runs git queries against a single checkout."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def _run(self, *args: str) -> bytes:
        cmd = ["git", "-C", str(self.root), *args]
        logger.debug(f"Running: {' '.join(cmd)}")
        try:
            result = subprocess.run(cmd, stdout=subprocess.PIPE, check=True)
        except subprocess.CalledProcessError as e:
            raise GitError(
                f"error executing git {' '.join(args)}: exit status {e.returncode}"
            ) from e
        except OSError as e:
            raise GitError(f"error executing git {' '.join(args)}: {e}") from e
        return result.stdout

    def short_revision(self) -> str:
        """Short hash of HEAD."""
        return self._run("rev-parse", "--short", "HEAD").decode("utf-8").strip()

    def diff(self) -> bytes:
        """Working tree changes against HEAD."""
        return self._run("diff", "HEAD")

    def commit_object(self) -> bytes:
        """Raw serialized commit object for HEAD."""
        return self._run("cat-file", "commit", "HEAD")


def diff_digest(diff: bytes) -> str:
    """
    Digest used to tell uncommitted states apart.

    Example:
        >>> len(diff_digest(b"diff --git a/x b/x"))
        10
    """
    return hashlib.sha1(diff).hexdigest()[:DIGEST_LENGTH]


def resolve_identity(repo: GitRepo) -> Identity:
    """
    Derive the identity of the checkout's current state.

    A clean checkout is identified by its short revision. With uncommitted
    changes the identity becomes "<rev>+<digest>" and the diff is returned
    alongside it so it can be saved.

    Raises:
        GitError: If any git query fails
    """
    rev = repo.short_revision()
    diff = repo.diff()

    if diff.strip():
        identity = Identity(f"{rev}+{diff_digest(diff)}", diff)
    else:
        identity = Identity(rev)

    logger.debug(f"Resolved identity {identity.name} for {repo.root}")
    return identity
