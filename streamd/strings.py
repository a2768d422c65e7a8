"""String helpers: tokenizing, trimming, case mapping and replacement."""

from __future__ import annotations

import re
import string

WHITESPACE = " \t\r\n"

_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)
_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def tokenize(text: str, delimiters: str) -> list[str]:
    """Split ``text`` into runs of non-delimiter characters.

    Empty runs are skipped, except that a token followed by a delimiter in the
    last position of ``text`` is followed by one empty token.
    """
    if not delimiters:
        return [text] if text else []
    pattern = re.compile(f"[^{re.escape(delimiters)}]+")
    last = len(text) - 1
    tokens: list[str] = []
    for match in pattern.finditer(text):
        tokens.append(match.group())
        if match.end() == last:
            tokens.append("")
    return tokens


def trim_left(text: str, chars: str = WHITESPACE) -> str:
    return text.lstrip(chars)


def trim_right(text: str, chars: str = WHITESPACE) -> str:
    return text.rstrip(chars)


def trim(text: str, chars: str = WHITESPACE) -> str:
    return text.strip(chars)


def to_upper(text: str) -> str:
    """Upper-case ASCII letters only."""
    return text.translate(_UPPER)


def to_lower(text: str) -> str:
    """Lower-case ASCII letters only."""
    return text.translate(_LOWER)


def replace(source: str, target: str, replacement: str) -> str:
    """Replace every occurrence of ``target``; an empty target changes nothing."""
    if not target:
        return source
    return source.replace(target, replacement)


def copy_limited(src: str, max_len: int = 0) -> str:
    """Return ``src``, cut to ``max_len`` characters when ``max_len`` is positive."""
    if src is None:
        raise ValueError("source string is required")
    if 0 < max_len < len(src):
        return src[:max_len]
    return src