from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal


IncludeStatus = Literal["expanded", "already_included", "not_found"]

STATUS_LABELS: dict[str, str] = {
    "expanded": "expanded",
    "already_included": "already included",
    "not_found": "not found",
}

DEFAULT_MAX_DEPTH = 200


def delimit(name: str, is_angle: bool) -> str:
    return f"<{name}>" if is_angle else f'"{name}"'


@dataclass
class FileNode:
    """One file visited during expansion.

    `path` is the canonical path once resolved, or the raw token for
    includes that were not found. Only `children` changes after creation.
    """

    path: str
    status: IncludeStatus = "expanded"
    is_angle: bool = False
    children: list[FileNode] = field(default_factory=list)

    def display_name(self) -> str:
        return delimit(self.path, self.is_angle)


@dataclass
class ExpansionState:
    search_paths: list[Path]
    included_files: set[Path] = field(default_factory=set)
    include_all: bool = False
    all_matches: bool = False
    max_depth: int = DEFAULT_MAX_DEPTH


@dataclass(frozen=True)
class ExpansionResult:
    text: str
    root: FileNode
    search_paths: list[Path]
    included_files: list[Path]
