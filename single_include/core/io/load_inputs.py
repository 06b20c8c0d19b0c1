from __future__ import annotations

from pathlib import Path
from typing import Iterable

from single_include.core.errors import IncludeInputError


def resolve_root_file(path: str) -> Path:
    """Canonical path of the file to expand; it must be a regular file."""
    p = Path(path)
    if not p.is_file():
        raise IncludeInputError(
            code="E_FILE_NOT_EXIST",
            message="file doesn't exist",
            file=str(p),
        )
    return p.resolve()


def resolve_search_dirs(paths: Iterable[str]) -> list[Path]:
    """Canonical search directories, in the order given."""
    out: list[Path] = []
    for raw in paths:
        p = Path(raw)
        if not p.is_dir():
            raise IncludeInputError(
                code="E_DIR_NOT_EXIST",
                message="directory doesn't exist",
                file=str(p),
                path="include_paths",
            )
        out.append(p.resolve())
    return out
