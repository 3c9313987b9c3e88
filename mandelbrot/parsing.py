"""Parsing of the ``WIDTHxHEIGHT`` and ``RE,IM`` strings taken on the command line."""

from __future__ import annotations

from typing import Callable, Optional, TypeVar

T = TypeVar("T")


def _convert(text: str, cast: Callable[[str], T]) -> Optional[T]:
    # int() and float() tolerate padding and digit separators; the pair syntax does not.
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return cast(text)
    except ValueError:
        return None


def parse_pair(s: str, separator: str, cast: Callable[[str], T] = int) -> Optional[tuple[T, T]]:
    """Parse ``"<left><separator><right>"`` into a pair of ``cast`` values.

    The string is split at the first ``separator``. Returns ``None`` when the
    separator is missing or either side fails to convert.

    >>> parse_pair("400x600", "x")
    (400, 600)
    >>> parse_pair("0.5x1.5", "x", float)
    (0.5, 1.5)
    >>> parse_pair("10,20xy", ",") is None
    True
    """

    index = s.find(separator)
    if index < 0:
        return None
    left = _convert(s[:index], cast)
    right = _convert(s[index + len(separator):], cast)
    if left is None or right is None:
        return None
    return left, right


def parse_complex(s: str) -> Optional[complex]:
    """Parse ``"re,im"`` into a complex number, or ``None``."""

    pair = parse_pair(s, ",", float)
    if pair is None:
        return None
    re, im = pair
    return complex(re, im)
