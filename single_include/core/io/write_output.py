from __future__ import annotations

from pathlib import Path

from single_include.core.errors import OutputWriteError


def write_output(path: str, text: str) -> None:
    p = Path(path)
    try:
        if str(p.parent) not in (".", ""):
            p.parent.mkdir(parents=True, exist_ok=True)
        with p.open("w", encoding="utf-8", errors="surrogateescape", newline="") as f:
            f.write(text)
    except OSError as e:
        raise OutputWriteError(
            code="E_OUTPUT_WRITE",
            message=f"cannot open output file: {e.strerror or e}",
            file=str(p),
        ) from e
