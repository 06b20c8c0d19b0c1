from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Optional

import yaml

from single_include.core.model import DEFAULT_MAX_DEPTH


KNOWN_KEYS: set[str] = {"include_paths", "include_all", "all_matches", "max_depth"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RunConfig:
    include_paths: list[str] = field(default_factory=list)
    include_all: bool = False
    all_matches: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH


def load_config_file(path: str | Path) -> RunConfig:
    """Load run options from a YAML file.

    Format:
      include_paths: [dir, ...]   # relative entries are taken from the file's directory
      include_all: bool
      all_matches: bool
      max_depth: int

    Raises FileNotFoundError for a missing file and ConfigError for a bad one.
    """
    p = Path(path)
    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML: {e}") from e
    if raw is None:
        return RunConfig()
    if not isinstance(raw, dict):
        raise ConfigError("config file must be a mapping")

    unknown = sorted(str(k) for k in raw if k not in KNOWN_KEYS)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}")

    base = p.resolve().parent
    include_paths: list[str] = []
    raw_paths = raw.get("include_paths", [])
    if not isinstance(raw_paths, list):
        raise ConfigError("include_paths must be a list of directories")
    for item in raw_paths:
        if not isinstance(item, str) or not item.strip():
            raise ConfigError("include_paths items must be non-empty strings")
        include_paths.append(str(base / item.strip()))

    return RunConfig(
        include_paths=include_paths,
        include_all=_bool(raw, "include_all"),
        all_matches=_bool(raw, "all_matches"),
        max_depth=_max_depth(raw.get("max_depth", DEFAULT_MAX_DEPTH)),
    )


def _bool(raw: dict[str, Any], key: str) -> bool:
    v = raw.get(key, False)
    if not isinstance(v, bool):
        raise ConfigError(f"{key} must be true or false")
    return v


def _max_depth(v: Any) -> int:
    # bool is an int subclass; `max_depth: true` is still a mistake.
    if isinstance(v, bool) or not isinstance(v, int) or v < 1:
        raise ConfigError("max_depth must be a positive integer")
    return v


def merge_options(
    config: RunConfig,
    *,
    include_paths: Optional[list[str]] = None,
    include_all: bool = False,
    all_matches: bool = False,
    max_depth: Optional[int] = None,
) -> RunConfig:
    """Overlay command-line values on a config.

    Command-line directories are searched before config ones; flags can only
    switch a mode on.
    """
    return replace(
        config,
        include_paths=list(include_paths or []) + list(config.include_paths),
        include_all=include_all or config.include_all,
        all_matches=all_matches or config.all_matches,
        max_depth=_max_depth(max_depth) if max_depth is not None else config.max_depth,
    )


def load_and_merge(config_file: str | None, **options: Any) -> RunConfig:
    config = load_config_file(config_file) if config_file else RunConfig()
    return merge_options(config, **options)
