"""
Exception types raised by gover components.

Library code raises these; the CLI turns them into messages and exit codes.
"""


class GoverError(Exception):
    """Base class for all gover errors."""


class ConfigError(GoverError):
    """Raised when configuration cannot be loaded or resolved."""


class GitError(GoverError):
    """Raised when a git command fails or git cannot be executed."""


class CommitParseError(GoverError, ValueError):
    """Raised when a raw commit object has a malformed author line."""


class StoreError(GoverError, IOError):
    """Raised when reading or writing the snapshot store fails."""


class RunError(GoverError):
    """Raised when a saved toolchain binary cannot be launched."""
