"""
normalize.py: Character canonicalization for extracted slide text.

PowerPoint likes typographic punctuation and a zoo of Unicode spaces. The
report is meant to be grep-able and archivable, so these are folded onto
plain ASCII equivalents:

- ellipsis -> three periods
- en dash -> hyphen-minus
- grave/acute accents and curly single quotes -> apostrophe
- curly double quotes -> straight double quote
- vertical tab (PowerPoint soft line break) -> newline
- every Unicode space separator -> ASCII space

Nothing else is touched. Source characters never appear in any target, so
normalize_text(normalize_text(s)) == normalize_text(s).
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

_APOSTROPHE_CHARS = (
    "`"  # grave accent
    "\u00b4"  # acute accent
    "\u2018"  # left single quotation mark
    "\u2019"  # right single quotation mark
)
_DOUBLE_QUOTE_CHARS = "\u201c\u201d"

# Unicode space separators (Zs) other than U+0020 itself.
_SPACE_CHARS = (
    "\u00a0"  # no-break space
    "\u1680"  # ogham space mark
    "\u180e"  # mongolian vowel separator
    "\u2000\u2001"  # en/em quad
    "\u2002\u2003"  # en/em space
    "\u2004\u2005\u2006"  # three-, four-, six-per-em space
    "\u2007\u2008\u2009\u200a"  # figure, punctuation, thin, hair space
    "\u202f"  # narrow no-break space
    "\u205f"  # medium mathematical space
    "\u3000"  # ideographic space
)


def _build_table() -> Mapping[int, str]:
    table: dict[int, str] = {
        0x2026: "...",  # ellipsis
        0x2013: "-",  # en dash
        0x0B: "\n",  # vertical tab
    }
    for ch in _APOSTROPHE_CHARS:
        table[ord(ch)] = "'"
    for ch in _DOUBLE_QUOTE_CHARS:
        table[ord(ch)] = '"'
    for ch in _SPACE_CHARS:
        table[ord(ch)] = " "
    return MappingProxyType(table)


# Built once at import; str.translate() accepts any Mapping[int, str].
SUBSTITUTIONS: Mapping[int, str] = _build_table()


def normalize_text(text: str) -> str:
    """Replace non-portable characters using SUBSTITUTIONS."""
    return text.translate(SUBSTITUTIONS)
