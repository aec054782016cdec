"""
Line-scanning primitives shared by every PBS parser.

PBS files are line oriented: blank lines and full-line comments starting
with ``#`` or ``;`` carry no data. Inline comments are kept as part of the
value; only the encounter header grammar gives ``#`` a meaning mid-line.
"""

import re
from typing import Iterator, List, Optional, Tuple

BOM = "\ufeff"
COMMENT_PREFIXES = ("#", ";")

LINE_BREAK_RE = re.compile(r"\r?\n")
SECTION_RE = re.compile(r"^\[(.+)\]$")
DIGITS_RE = re.compile(r"^[0-9]+$")


def iter_content_lines(text: str) -> Iterator[str]:
    """Yield trimmed lines that are neither blank nor full-line comments."""
    if text.startswith(BOM):
        text = text[len(BOM):]
    for raw_line in LINE_BREAK_RE.split(text):
        line = raw_line.strip()
        if not line or line.startswith(COMMENT_PREFIXES):
            continue
        yield line


def match_section(line: str) -> Optional[str]:
    """Return the trimmed name of a ``[section]`` header line, else None."""
    m = SECTION_RE.match(line)
    if not m:
        return None
    return m.group(1).strip()


def split_key_value(line: str) -> Tuple[Optional[str], Optional[str]]:
    """Split ``Key = Value`` on the first ``=``; (None, None) without one."""
    if "=" not in line:
        return None, None
    key, value = line.split("=", 1)
    return key.strip(), value.strip()


def split_csv(value: str) -> List[str]:
    """Split a comma list keeping empty items (positions matter)."""
    return [part.strip() for part in value.split(",")]


def split_list(value: str) -> List[str]:
    """Split a comma list and drop empty items."""
    if not value:
        return []
    return [part for part in split_csv(value) if part]


def is_digits(value: str) -> bool:
    return bool(DIGITS_RE.match(value.strip()))
