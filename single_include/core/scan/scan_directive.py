from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from single_include.core.model import delimit


# Line-oriented on purpose: directives inside comments or string literals are
# detected too, and macros / conditionals are never evaluated.
INCLUDE_RE = re.compile(r'\s*#\s*include\s*(<.*>|".*")\s*')
_TOKEN_RE = re.compile(r'[^\s>"]*')


@dataclass(frozen=True)
class Directive:
    name: str
    is_angle: bool

    def display_name(self) -> str:
        return delimit(self.name, self.is_angle)


def parse_directive(line: str) -> Optional[Directive]:
    """Return the include directive on `line`, or None for any other line.

    The whole line must be the directive; anything else on it (a trailing
    comment, a second statement) makes it a plain line.
    """
    m = INCLUDE_RE.fullmatch(line)
    if m is None:
        return None

    delimited = m.group(1)
    is_angle = delimited.startswith("<")
    token = _TOKEN_RE.match(delimited[1:].lstrip())
    assert token is not None
    return Directive(name=token.group(0), is_angle=is_angle)
