"""
Capitalization strategies for window class names.
"""
import re
from typing import List

from .Models import CapitalizeMode

_DELIMITERS = re.compile(r"[\s_\-]+")


def capitalize_first(value: str) -> str:
    """Upper-case the first character only; the rest is left unchanged."""
    return value[:1].upper() + value[1:]


def _is_boundary(prev: str, cur: str, nxt: str) -> bool:
    """Whether a new word starts at ``cur``."""
    if prev.islower() and cur.isupper():
        return True
    # "HTTPServer": the last upper-case letter before a lower-case one opens a word
    if prev.isupper() and cur.isupper() and nxt.islower():
        return True
    if prev.isalpha() and cur.isdigit():
        return True
    if prev.isdigit() and cur.isalpha():
        return True
    return False


def split_words(value: str) -> List[str]:
    """
    Split a string into words.

    Words are separated by whitespace, underscores and hyphens, by
    lower-to-upper case transitions, by the end of an acronym and by
    letter/digit transitions.
    """
    words = []
    for chunk in _DELIMITERS.split(value):
        if not chunk:
            continue
        start = 0
        for i in range(1, len(chunk)):
            nxt = chunk[i + 1] if i + 1 < len(chunk) else ""
            if _is_boundary(chunk[i - 1], chunk[i], nxt):
                words.append(chunk[start:i])
                start = i
        words.append(chunk[start:])
    return words


def title_case(value: str) -> str:
    """Title-case every word and join them with single spaces."""
    return " ".join(word[:1].upper() + word[1:].lower() for word in split_words(value))


def capitalize(mode: CapitalizeMode, value: str) -> str:
    """
    Apply a capitalization mode to a value.

    :param mode: FIRST_LETTER or ALL_WORDS
    :param value: Any string, including the empty string
    :return: The capitalized string
    """
    if mode is CapitalizeMode.ALL_WORDS:
        return title_case(value)
    return capitalize_first(value)
