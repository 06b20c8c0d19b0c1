from __future__ import annotations

from typing import Any

from single_include.core.model import STATUS_LABELS, ExpansionResult, FileNode


def render_tree(node: FileNode, depth: int = 0) -> list[str]:
    """Pre-order lines, two spaces of indent per level: `<name> (<status>)`."""
    lines = [f"{'  ' * depth}{node.display_name()} ({STATUS_LABELS[node.status]})"]
    for child in node.children:
        lines.extend(render_tree(child, depth + 1))
    return lines


def render_report(result: ExpansionResult) -> list[str]:
    """Full verbose report: target, search paths, included files, tree."""
    lines = [f"Target name: {result.root.path}", "Include paths:"]
    lines.extend(f"\t{p}" for p in result.search_paths)
    lines.append("All included files:")
    lines.extend(f"\t{p}" for p in result.included_files)
    lines.append("Tree view:")
    lines.extend(render_tree(result.root))
    return lines


def tree_to_dict(node: FileNode) -> dict[str, Any]:
    return {
        "path": node.path,
        "status": node.status,
        "is_angle": node.is_angle,
        "children": [tree_to_dict(c) for c in node.children],
    }
