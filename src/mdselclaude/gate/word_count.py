"""Mechanical word counting for the reminder gate."""

from __future__ import annotations


def count_words(content: str) -> int:
    """Count whitespace-delimited tokens, like `wc -w`.

    Runs of spaces, tabs and newlines count as one separator; leading and
    trailing whitespace is ignored. No tokenizer, no language handling.

    Examples:
        >>> count_words("one two three")
        3
        >>> count_words("a  b\\tc\\nd")
        4
        >>> count_words("   ")
        0
    """
    return len(content.split())
