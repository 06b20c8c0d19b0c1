from __future__ import annotations

import json
import logging
from typing import Any, NoReturn

import typer

from single_include.core.errors import IncludeError, IncludeInputError
from single_include.core.expand.expand_file import expand_file
from single_include.core.io.load_config import ConfigError, load_and_merge
from single_include.core.io.load_inputs import resolve_root_file, resolve_search_dirs
from single_include.core.io.write_output import write_output
from single_include.core.model import ExpansionResult
from single_include.core.tree.render_tree import render_report, render_tree, tree_to_dict

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.callback()
def _callback() -> None:
    """single-include: inline local #include files into one self-contained file."""
    return


@app.command("expand")
def expand(
    path: str = typer.Argument(..., help="Source file to expand"),
    include: list[str] | None = typer.Option(
        None, "--include", "-I", help="Add DIR to include paths (repeatable)"
    ),
    out: str | None = typer.Option(
        None, "--out", "-o", help="Write the result to FILE (default: stdout)"
    ),
    include_all: bool = typer.Option(
        False,
        "--all",
        "-a",
        help="Expand every file found, even if it was expanded before. "
        "Useful when macros choose which file to include.",
    ),
    dry: bool = typer.Option(False, "--dry", "-d", help="Dry run: do not output the result"),
    tree: bool = typer.Option(False, "--tree", "-t", help="Print the dependency tree"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log resolution decisions to stderr and print the full report (implies --tree)",
    ),
    all_matches: bool = typer.Option(
        False,
        "--all-matches",
        help="Use every include directory holding the file, not just the first",
    ),
    max_depth: int | None = typer.Option(
        None, "--max-depth", min=1, help="Maximum include nesting (default: 200)"
    ),
    config: str | None = typer.Option(None, "--config", help="Optional YAML options file"),
) -> None:
    """Inline every locally resolvable #include of FILE."""
    _configure_logging(verbose)
    try:
        result = _run(
            path,
            config_file=config,
            include=include,
            include_all=include_all,
            all_matches=all_matches,
            max_depth=max_depth,
        )
        if not dry:
            if out:
                write_output(out, result.text)
                typer.echo(f"OK: wrote {out}")
            else:
                typer.echo(_raw(result.text), nl=False)
    except IncludeError as e:
        _fail(e)

    if verbose:
        _echo_lines(render_report(result))
    elif tree:
        _echo_lines(render_tree(result.root))


@app.command("tree")
def tree_cmd(
    path: str = typer.Argument(..., help="Source file to analyze"),
    include: list[str] | None = typer.Option(
        None, "--include", "-I", help="Add DIR to include paths (repeatable)"
    ),
    include_all: bool = typer.Option(
        False, "--all", "-a", help="Expand every file found, even if it was expanded before"
    ),
    all_matches: bool = typer.Option(
        False,
        "--all-matches",
        help="Use every include directory holding the file, not just the first",
    ),
    max_depth: int | None = typer.Option(
        None, "--max-depth", min=1, help="Maximum include nesting (default: 200)"
    ),
    config: str | None = typer.Option(None, "--config", help="Optional YAML options file"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
) -> None:
    """Print the include dependency tree of FILE without writing any output."""
    _configure_logging(False)
    if format not in ("text", "json"):
        _fail(
            IncludeInputError(
                code="E_UNKNOWN_FORMAT",
                message=f"unknown format: {format} (choose one of: text, json)",
                path="format",
            )
        )

    def _emit_json(payload: dict[str, Any], exit_code: int) -> NoReturn:
        typer.echo(json.dumps({"tool": "single-include", "command": "tree", **payload}, indent=2))
        raise typer.Exit(code=exit_code)

    try:
        result = _run(
            path,
            config_file=config,
            include=include,
            include_all=include_all,
            all_matches=all_matches,
            max_depth=max_depth,
        )
    except IncludeError as e:
        if format == "json":
            _emit_json(
                {
                    "ok": False,
                    "errors": [
                        {"code": e.code, "message": e.message, "file": e.file, "path": e.path}
                    ],
                },
                _exit_code(e),
            )
        _fail(e)

    if format == "text":
        _echo_lines(render_tree(result.root))
        return

    _emit_json(
        {
            "ok": True,
            "target": result.root.path,
            "include_paths": [str(p) for p in result.search_paths],
            "included_files": [str(p) for p in result.included_files],
            "tree": tree_to_dict(result.root),
        },
        0,
    )


def _run(
    path: str,
    *,
    config_file: str | None,
    include: list[str] | None,
    include_all: bool,
    all_matches: bool,
    max_depth: int | None,
) -> ExpansionResult:
    try:
        options = load_and_merge(
            config_file,
            include_paths=include,
            include_all=include_all,
            all_matches=all_matches,
            max_depth=max_depth,
        )
    except FileNotFoundError as e:
        raise IncludeInputError(
            code="E_CONFIG_NOT_FOUND",
            message=f"config file not found: {config_file}",
            path="config",
        ) from e
    except ConfigError as e:
        raise IncludeInputError(
            code="E_CONFIG_INVALID",
            message=str(e),
            file=config_file,
            path="config",
        ) from e

    root = resolve_root_file(path)
    search_paths = resolve_search_dirs(options.include_paths)
    return expand_file(
        root,
        search_paths,
        include_all=options.include_all,
        all_matches=options.all_matches,
        max_depth=options.max_depth,
    )


class _EchoHandler(logging.Handler):
    """Send log records to stderr through typer so they follow the active stream."""

    def emit(self, record: logging.LogRecord) -> None:
        typer.echo(_raw(self.format(record)), err=True)


def _configure_logging(verbose: bool) -> None:
    handler = _EchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    logger = logging.getLogger("single_include")
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def _exit_code(e: IncludeError) -> int:
    if isinstance(e, IncludeInputError) and e.code not in ("E_FILE_NOT_EXIST", "E_CONFIG_NOT_FOUND"):
        return 2
    return 1


def _fail(e: IncludeError) -> NoReturn:
    _print_errors([e])
    raise typer.Exit(code=_exit_code(e))


def _print_errors(errors: list[IncludeError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(_raw(str(e)), err=True)


def _echo_lines(lines: list[str]) -> None:
    for line in lines:
        typer.echo(_raw(line))


def _raw(text: str) -> bytes:
    # Undecodable source bytes and path names come back as they were read.
    return text.encode("utf-8", errors="surrogateescape")


def main() -> None:
    app(prog_name="single-include")


cli = typer.main.get_command(app)

if __name__ == "__main__":
    main()
