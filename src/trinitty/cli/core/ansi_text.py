"""ANSI text helpers - measuring and fitting strings that carry SGR codes."""

from __future__ import annotations

import re

# SGR and cursor sequences; only these appear in widget output
_ANSI_ESCAPE = re.compile(r'\x1b\[[0-9;?]*[A-Za-z~]')


def visible_len(s: str) -> int:
    """Get visible length of string (excluding ANSI escape codes)."""
    return len(_ANSI_ESCAPE.sub('', s))


def fit_to_width(s: str, width: int) -> str:
    """
    Clip or pad an ANSI-escaped string to exactly `width` visible columns.

    Escape sequences are copied through untouched. A reset is appended
    whenever the string was clipped so colors don't bleed past the region.
    """
    if width <= 0:
        return ""

    out: list[str] = []
    shown = 0
    pos = 0
    while pos < len(s) and shown < width:
        match = _ANSI_ESCAPE.match(s, pos)
        if match:
            out.append(match.group())
            pos = match.end()
            continue
        out.append(s[pos])
        shown += 1
        pos += 1

    if pos < len(s):
        out.append('\x1b[0m')
    elif shown < width:
        out.append(' ' * (width - shown))
    return ''.join(out)
