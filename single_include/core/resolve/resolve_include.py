from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from single_include.core.scan.scan_directive import Directive


logger = logging.getLogger(__name__)


def candidate_dirs(
    directive: Directive, including_dir: Path, search_paths: Iterable[Path]
) -> list[Path]:
    """Directories to probe, in order.

    Quoted includes look next to the including file first; angle includes
    only use the configured search paths.
    """
    dirs = list(search_paths)
    if not directive.is_angle:
        logger.debug("Add current path to search: %s", including_dir)
        dirs.insert(0, including_dir)
    return dirs


def resolve_include(
    directive: Directive,
    including_dir: Path,
    search_paths: Iterable[Path],
    *,
    all_matches: bool = False,
) -> list[Path]:
    """Return canonical paths of regular files matching the directive.

    By default the first match wins and the list has at most one entry.
    With `all_matches`, every candidate directory holding the file
    contributes a match, in probe order.
    """
    matches: list[Path] = []
    for d in candidate_dirs(directive, including_dir, search_paths):
        candidate = d / directive.name
        try:
            if not candidate.is_file():
                continue
        except OSError as e:
            # e.g. ENAMETOOLONG or EACCES: the directory cannot hold a match
            logger.debug("Cannot probe %s: %s", candidate, e.strerror or e)
            continue
        resolved = candidate.resolve()
        logger.debug("Include file %s resolves to %s", directive.display_name(), resolved)
        matches.append(resolved)
        if not all_matches:
            break
    return matches
