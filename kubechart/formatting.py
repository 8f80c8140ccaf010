"""Text clean-up helpers for generated templates."""

from __future__ import annotations

import re

# Go's \s class: ASCII whitespace only; "$" means end of text.
_TRAILING_WHITESPACE = re.compile(r"([\t\n\f\r ]+)(\n|\Z)")


def fix_unterminated_quotes(text: str) -> str:
    """Join lines that a YAML encoder split inside a double-quoted template string."""
    lines = text.split("\n")
    last = len(lines) - 1
    parts: list[str] = []
    unterminated = False
    for index, line in enumerate(lines):
        if unterminated:
            line = " " + line.strip()
            unterminated = False
        else:
            unterminated = line.count('"') % 2 != 0
        parts.append(line)
        if not unterminated and index != last:
            parts.append("\n")
    return "".join(parts)


def remove_trailing_whitespaces(text: str) -> str:
    """Strip whitespace at the end of every line and of the text."""
    return _TRAILING_WHITESPACE.sub(r"\2", text)