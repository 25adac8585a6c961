"""Typed configuration loading and access.

Projects may carry a ``vcheck.toml`` at their root. Every key is optional;
a missing file yields the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table

__all__ = [
    "Config",
    "ConfigError",
    "GitConfig",
    "PathsConfig",
    "CONFIG_FILENAME",
    "DEFAULT_BASE_REFS",
    "DEFAULT_VERSIONS_DIR",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILENAME = "vcheck.toml"

# Tried in order; the first ref git can resolve a merge base against wins.
DEFAULT_BASE_REFS: tuple[str, ...] = (
    "master",
    "origin/master",
    "upstream/master",
    "main",
    "origin/main",
    "upstream/main",
)

DEFAULT_VERSIONS_DIR = ".vcheck/versions"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Where the current branch is compared from."""

    base_refs: tuple[str, ...] = DEFAULT_BASE_REFS


@dataclass(frozen=True, slots=True)
class PathsConfig:
    """Paths relative to the project root.

    ``ignore`` holds glob patterns; changed files matching any of them never
    turn a workspace into a release root.
    """

    versions_dir: str = DEFAULT_VERSIONS_DIR
    ignore: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    git: GitConfig = field(default_factory=GitConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        git: StrDict = get_table(data, "git") or {}
        paths: StrDict = get_table(data, "paths") or {}

        base_refs = get_str_list(git, "base_refs")
        if base_refs is not None and not base_refs:
            raise ValueError("git.base_refs must list at least one ref")

        return cls(
            git=GitConfig(
                base_refs=tuple(base_refs) if base_refs else DEFAULT_BASE_REFS,
            ),
            paths=PathsConfig(
                versions_dir=get_str(paths, "versions_dir") or DEFAULT_VERSIONS_DIR,
                ignore=tuple(get_str_list(paths, "ignore") or ()),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to vcheck.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(project_root: Path) -> Result[Config, ConfigError]:
    """Load ``vcheck.toml`` from the project root, defaulting when absent.

    A present but broken file is still an error.
    """
    path = project_root / CONFIG_FILENAME
    if not path.exists():
        return Ok(Config())
    return load_config(path)
