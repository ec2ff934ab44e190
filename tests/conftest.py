"""
Shared fixtures: a fake Go checkout under git and a store configuration.
"""

import os
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from gover.config import GoverConfig


AUTHOR_TIME = 1577836800  # 2020-01-01T00:00:00Z
COMMIT_MESSAGE = "runtime: make the fake toolchain"

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
requires_posix = pytest.mark.skipif(sys.platform == "win32", reason="needs POSIX symlinks and shebangs")

# (relative path, contents, mode)
GOROOT_FILES = [
    ("bin/go", "#!/bin/sh\necho go\n", 0o755),
    ("bin/gofmt", "#!/bin/sh\necho gofmt\n", 0o755),
    ("pkg/linux_amd64/fmt.a", "archive", 0o644),
    ("pkg/linux_amd64/net/http.a", "archive", 0o644),
    ("pkg/tool/linux_amd64/compile", "#!/bin/sh\n", 0o755),
    ("pkg/include/textflag.h", "#define NOSPLIT 4\n", 0o600),
    ("src/fmt/print.go", "package fmt\n", 0o644),
    ("src/fmt/fmt.test", "test binary", 0o755),
    ("src/runtime/core", "core dump", 0o600),
    ("src/runtime/core.go", "package runtime\n", 0o644),
    ("src/make.bash", "#!/bin/sh\n", 0o755),
]

FILE_MTIME = 1500000000


def git(root: Path, *args: str, when: int = AUTHOR_TIME) -> bytes:
    """Run git in root with a fixed identity and timestamps."""
    env = dict(os.environ)
    env.update(
        GIT_AUTHOR_NAME="Gopher",
        GIT_AUTHOR_EMAIL="gopher@example.com",
        GIT_COMMITTER_NAME="Gopher",
        GIT_COMMITTER_EMAIL="gopher@example.com",
        GIT_AUTHOR_DATE=f"{when} +0000",
        GIT_COMMITTER_DATE=f"{when} +0000",
    )
    result = subprocess.run(
        ["git", "-C", str(root), "-c", "commit.gpgsign=false", *args],
        check=True,
        capture_output=True,
        env=env,
    )
    return result.stdout


def make_goroot(root: Path) -> Path:
    """Lay out a minimal Go tree with fixed modes and mtimes."""
    for rel, contents, mode in GOROOT_FILES:
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(contents)
        os.chmod(path, mode)
        os.utime(path, (FILE_MTIME, FILE_MTIME))
    return root


@pytest.fixture
def fake_goroot(tmp_path):
    """A Go tree that is not under version control."""
    return make_goroot(tmp_path / "goroot")


@pytest.fixture
def goroot_repo(fake_goroot):
    """The fake Go tree committed into a fresh git repository."""
    git(fake_goroot, "init", "-q")
    git(fake_goroot, "add", "-A")
    git(fake_goroot, "commit", "-q", "-m", COMMIT_MESSAGE)
    return fake_goroot


@pytest.fixture
def store_dir(tmp_path):
    return tmp_path / "store"


@pytest.fixture
def config(store_dir, fake_goroot):
    """Configuration saving fake_goroot for linux/amd64 into store_dir."""
    return GoverConfig(
        overrides={
            "store_dir": str(store_dir),
            "goroot": str(fake_goroot),
            "goos": "linux",
            "goarch": "amd64",
        }
    )
