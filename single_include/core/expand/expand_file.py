from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from single_include.core.errors import FileOpenError, RecursionLimitError
from single_include.core.model import (
    DEFAULT_MAX_DEPTH,
    ExpansionResult,
    ExpansionState,
    FileNode,
)
from single_include.core.resolve.resolve_include import resolve_include
from single_include.core.scan.scan_directive import Directive, parse_directive


logger = logging.getLogger(__name__)

_LINE_END_RE = re.compile(r"(?<=\n)")

BANNER = (
    "// This file is generated automatically by single-include\n"
    "// It's suggested not to edit anything below\n"
)


def expand_file(
    root: str | Path,
    search_paths: Iterable[str | Path] = (),
    *,
    include_all: bool = False,
    all_matches: bool = False,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ExpansionResult:
    """Expand `root` into one self-contained text.

    Search paths are used as given (callers canonicalize them). The root
    counts as included before its body is scanned, so a cycle back to it
    ends as `already_included`. Raises FileOpenError or RecursionLimitError;
    either way nothing of the partial text is returned.
    """
    root_path = Path(root).resolve()
    state = ExpansionState(
        search_paths=[Path(p) for p in search_paths],
        include_all=include_all,
        all_matches=all_matches,
        max_depth=max_depth,
    )

    root_node = FileNode(path=str(root_path))
    state.included_files.add(root_path)
    try:
        body = _expand(root_path, root_node, state, depth=0)
    except RecursionError as e:
        # max_depth above what the interpreter stack allows
        raise RecursionLimitError(
            code="E_RECURSION_LIMIT",
            message=f"include nesting exhausted the interpreter stack before max_depth={max_depth}",
            file=str(root_path),
        ) from e

    return ExpansionResult(
        text=BANNER + body,
        root=root_node,
        search_paths=list(state.search_paths),
        included_files=sorted(state.included_files),
    )


def _read_lines(path: Path) -> list[str]:
    try:
        with path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            text = f.read()
    except OSError as e:
        raise FileOpenError(
            code="E_FILE_OPEN",
            message=f"cannot open file: {e.strerror or e}",
            file=str(path),
        ) from e

    # Lines end only at "\n"; a lone "\r" stays inside its line.
    lines = _LINE_END_RE.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def _terminated(line: str) -> str:
    return line if line.endswith("\n") else line + "\n"


def _expand(path: Path, node: FileNode, state: ExpansionState, depth: int) -> str:
    if depth > state.max_depth:
        raise RecursionLimitError(
            code="E_RECURSION_LIMIT",
            message=f"include nesting deeper than {state.max_depth} levels (include cycle?)",
            file=str(path),
        )

    out: list[str] = []
    for line in _read_lines(path):
        directive = parse_directive(line)
        if directive is None:
            out.append(_terminated(line))
            continue

        logger.debug("Found include file %s in %s", directive.display_name(), path)
        matches = resolve_include(
            directive, path.parent, state.search_paths, all_matches=state.all_matches
        )
        if not matches:
            logger.debug(
                "Ignore include file %s because of not found (may be system header)",
                directive.display_name(),
            )
            node.children.append(
                FileNode(path=directive.name, status="not_found", is_angle=directive.is_angle)
            )
            out.append(_terminated(line))
            continue

        for match in matches:
            out.append(_include(match, directive, line, node, state, depth))

    return "".join(out)


def _include(
    match: Path,
    directive: Directive,
    line: str,
    parent: FileNode,
    state: ExpansionState,
    depth: int,
) -> str:
    directive_text = line.rstrip("\r\n")

    if not state.include_all and match in state.included_files:
        logger.debug("Include file %s already expanded, omit", match)
        parent.children.append(
            FileNode(path=str(match), status="already_included", is_angle=directive.is_angle)
        )
        return f"// {directive_text} (omitted because it has been expanded)\n"

    # Recorded before the body is scanned: this is what stops include cycles.
    state.included_files.add(match)
    child = FileNode(path=str(match), status="expanded", is_angle=directive.is_angle)
    parent.children.append(child)
    body = _expand(match, child, state, depth + 1)
    return f"// {directive_text}\n{body}// End {directive_text}\n"
