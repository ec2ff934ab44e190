"""
Configuration management for gover.

Handles configuration loading, store directory resolution, GOROOT discovery
and target platform resolution. A GoverConfig is built once at startup and
passed explicitly to every component.
"""

import os
import platform
import re
import subprocess
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from gover.errors import ConfigError
from gover.logger import get_default_logger


logger = get_default_logger()


# Default configuration values
DEFAULT_CONFIG = {
    "store_dir": "${XDG_CACHE_HOME:-~/.cache}/gover",
    "goroot": None,
    "goos": None,
    "goarch": None,
    "bin_tools": ["go", "godoc", "gofmt"],
    "exclude_names": ["core"],
    "exclude_suffixes": [".test"],
    "verbose": False,
}

# Matches ${VAR_NAME} and ${VAR_NAME:-default}
ENV_PATTERN = re.compile(r"\$\{([^:}]+)(?::-)?(.*?)\}")

# Python platform names mapped to Go's GOOS / GOARCH names
GOOS_NAMES = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "windows",
    "cygwin": "windows",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "netbsd": "netbsd",
    "dragonfly": "dragonfly",
    "sunos": "solaris",
    "aix": "aix",
}

GOARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv6l": "arm",
    "armv7l": "arm",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "mips64": "mips64",
    "loongarch64": "loong64",
}


class GoverConfig:
    """
    Configuration for gover operations.

    Loads configuration from a YAML file or uses defaults, then applies
    overrides (typically from command-line flags).

    Attributes:
        store_dir: Resolved directory holding snapshots and aliases
        goroot_setting: GOROOT given in config or flags, if any
        goos: Explicit target operating system, if any
        goarch: Explicit target architecture, if any
        bin_tools: Executable names copied from $GOROOT/bin
        exclude_names: File names skipped when copying trees
        exclude_suffixes: File name suffixes skipped when copying trees
        verbose: Whether each file copy is reported
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize configuration.

        Args:
            config_path: Path to a YAML configuration file (optional)
            overrides: Dictionary of configuration overrides (optional)

        Raises:
            ConfigError: If the configuration file cannot be read or parsed

        Example:
            >>> config = GoverConfig(overrides={"store_dir": "/tmp/gover"})
            >>> config.store_dir
            PosixPath('/tmp/gover')
        """
        if config_path:
            config = merge_config(DEFAULT_CONFIG, load_config_file(Path(config_path)))
        else:
            logger.debug("Using default gover configuration")
            config = DEFAULT_CONFIG.copy()

        if overrides:
            config = merge_config(
                config, {k: v for k, v in overrides.items() if v is not None}
            )

        self.store_dir: Path = resolve_store_dir(str(config["store_dir"]))
        self.goroot_setting: Optional[str] = config.get("goroot")
        self.goos: Optional[str] = config.get("goos")
        self.goarch: Optional[str] = config.get("goarch")
        self.bin_tools: List[str] = list(config.get("bin_tools") or [])
        self.exclude_names: List[str] = list(config.get("exclude_names") or [])
        self.exclude_suffixes: List[str] = list(config.get("exclude_suffixes") or [])
        self.verbose: bool = bool(config.get("verbose", False))

        logger.debug(f"Config initialized: store_dir={self.store_dir}")

    @property
    def goroot(self) -> Path:
        """Toolchain checkout to snapshot (resolved on first use)."""
        if not hasattr(self, "_goroot"):
            self._goroot = resolve_goroot(self.goroot_setting)
        return self._goroot

    def platform_pair(self) -> Tuple[str, str]:
        """Return the (goos, goarch) pair snapshots are taken for."""
        return resolve_platform(self.goos, self.goarch)

    def is_excluded(self, file_name: str) -> bool:
        """Whether a file with this base name is left out of copied trees."""
        if file_name in self.exclude_names:
            return True
        return any(file_name.endswith(suffix) for suffix in self.exclude_suffixes)


def merge_config(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two configuration dictionaries, with override taking precedence.

    Args:
        base: Base configuration
        override: Override configuration

    Returns:
        Merged configuration dictionary
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_config(result[key], value)
        else:
            result[key] = value
    return result


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        config_path: Path to YAML file

    Returns:
        Dictionary with the file contents (empty if the file is empty)

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping
    """
    logger.info(f"Loading gover config from {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load configuration file {config_path}: {e}") from e

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(
            f"Configuration file {config_path} must contain a mapping, "
            f"got {type(loaded).__name__}"
        )
    return loaded


def expand_env(template: str) -> str:
    """
    Expand ${VAR_NAME} and ${VAR_NAME:-default} references in a template.

    An unset or empty variable takes the default (empty if none is given).

    Example:
        >>> expand_env("${NO_SUCH_VAR:-~/.cache}/gover")
        '~/.cache/gover'
    """

    def replace_env(match):
        var_name = match.group(1)
        value = os.environ.get(var_name) or match.group(2)
        logger.debug(f"Resolved ${{{var_name}}} to: {value}")
        return value

    return ENV_PATTERN.sub(replace_env, template)


def resolve_store_dir(template: str) -> Path:
    """
    Resolve the store directory from a configured template.

    The default template uses $XDG_CACHE_HOME when set and otherwise falls
    back to ~/.cache under the user's home directory.

    Args:
        template: Path template, e.g. "${XDG_CACHE_HOME:-~/.cache}/gover"

    Returns:
        Absolute store directory path (not required to exist)
    """
    resolved = Path(expand_env(template)).expanduser().absolute()
    logger.debug(f"Resolved store directory: {resolved}")
    return resolved


def resolve_goroot(setting: Optional[str] = None) -> Path:
    """
    Find the Go toolchain checkout to snapshot.

    Uses the explicit setting when given, else $GOROOT, else asks
    `go env GOROOT`.

    Raises:
        ConfigError: If no GOROOT can be determined
    """
    if setting:
        return Path(setting).expanduser().absolute()

    env_goroot = os.environ.get("GOROOT")
    if env_goroot:
        return Path(env_goroot).expanduser().absolute()

    try:
        result = subprocess.run(
            ["go", "env", "GOROOT"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise ConfigError(
            f"Cannot determine GOROOT: set $GOROOT or pass --goroot ({e})"
        ) from e

    goroot = result.stdout.strip()
    if not goroot:
        raise ConfigError("`go env GOROOT` returned an empty path")
    logger.debug(f"GOROOT from go env: {goroot}")
    return Path(goroot)


def host_platform() -> Tuple[str, str]:
    """Return the running host as a Go (goos, goarch) pair."""
    goos = GOOS_NAMES.get(sys.platform)
    if goos is None:
        goos = GOOS_NAMES.get(sys.platform.rstrip("0123456789"), sys.platform)
    machine = platform.machine().lower()
    goarch = GOARCH_NAMES.get(machine, machine)
    return goos, goarch


def resolve_platform(
    goos: Optional[str] = None, goarch: Optional[str] = None
) -> Tuple[str, str]:
    """
    Resolve the target platform pair.

    Each half comes from the explicit value, else the GOOS / GOARCH
    environment variables, else the running host.
    """
    host_os, host_arch = host_platform()
    goos = goos or os.environ.get("GOOS") or host_os
    goarch = goarch or os.environ.get("GOARCH") or host_arch
    return goos, goarch
