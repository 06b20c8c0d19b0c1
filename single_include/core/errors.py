from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncludeError(Exception):
    """Base error envelope. Every failure aborts the run; no partial output is valid.

    `file` names the source, config or output file involved. A `path` of
    `include_paths`, `config` or `format` marks a rejected command-line or
    config input rather than a failure during expansion.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<input>"
        return f"{loc}: {self.code}: {self.message}"


class IncludeInputError(IncludeError):
    pass


class FileOpenError(IncludeError):
    pass


class RecursionLimitError(IncludeError):
    pass


class OutputWriteError(IncludeError):
    pass
