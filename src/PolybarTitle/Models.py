"""
Data models for the active window title module.

This module contains the value types shared by the resolver, the X11 query
adapter and the configuration loader. Parsing helpers accept the plain
values produced by the YAML loader and raise ValueError on bad input.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

KIND_ALIASES = {
    "wm_class": "wm_class",
    "wmc": "wm_class",
    "wc": "wm_class",
    "c": "wm_class",
    "cls": "wm_class",
    "wcls": "wm_class",
    "class": "wm_class",
    "wm_name": "wm_name",
    "wmn": "wm_name",
    "wn": "wm_name",
    "n": "wm_name",
    "name": "wm_name",
}


class WindowIdentifierKind(Enum):
    """Window property a rule is keyed on."""
    CLASS = "wm_class"
    NAME = "wm_name"

    @classmethod
    def from_string(cls, text: str) -> "WindowIdentifierKind":
        """
        Resolve a kind from any of its accepted spellings (case-insensitive).

        :raises ValueError: If the spelling is unknown
        """
        canonical = KIND_ALIASES.get(text.lower())
        if canonical is None:
            raise ValueError(f"unknown window identifier kind: '{text}'")
        return cls(canonical)


@dataclass(frozen=True)
class WindowIdentifier:
    """
    A (kind, value) pair used as a rule table key.

    Attributes:
        kind: Which window property the value refers to
        value: Exact property value to match
    """
    kind: WindowIdentifierKind
    value: str

    @classmethod
    def parse(cls, text: str) -> "WindowIdentifier":
        """
        Parse the ``kind=value`` form, splitting on the first '='.

        :raises ValueError: If there is no '=' or the kind is unknown
        """
        discriminant, sep, value = text.partition("=")
        if not sep:
            raise ValueError(f"no '=' in window identifier: '{text}'")
        return cls(WindowIdentifierKind.from_string(discriminant), value)

    def __str__(self) -> str:
        return f"{self.kind.value}={self.value}"


class CapitalizeMode(Enum):
    """How a window class is capitalized."""
    FIRST_LETTER = "first_letter"
    ALL_WORDS = "all_words"

    @classmethod
    def default(cls) -> "CapitalizeMode":
        return cls.FIRST_LETTER


@dataclass(frozen=True)
class Options:
    """
    Transformations applied to the original window class.

    Attributes:
        capitalize: Capitalization to apply, None leaves the value untouched
    """
    capitalize: Optional[CapitalizeMode] = None

    @classmethod
    def from_config(cls, data: Any) -> "Options":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError("options must be a mapping")

        unknown = set(data) - {"capitalize"}
        if unknown:
            raise ValueError(f"unknown option(s): {', '.join(sorted(map(str, unknown)))}")

        capitalize = data.get("capitalize")
        if capitalize is None:
            return cls()
        try:
            return cls(capitalize=CapitalizeMode(capitalize))
        except ValueError:
            valid = ", ".join(mode.value for mode in CapitalizeMode)
            raise ValueError(f"capitalize must be one of: {valid}") from None


@dataclass(frozen=True)
class OptionsFilter:
    """Filter that transforms the original value with the given options."""
    options: Options


@dataclass(frozen=True)
class NewNameFilter:
    """Filter that replaces the original value outright."""
    name: str


Filter = Union[OptionsFilter, NewNameFilter]


def filter_from_config(data: Any) -> Filter:
    """
    Build a filter from its ``{filter: <tag>, value: <content>}`` form.

    :raises ValueError: If the mapping is malformed or the tag is unknown
    """
    if not isinstance(data, dict):
        raise ValueError("filter must be a mapping with 'filter' and 'value' keys")
    if "filter" not in data:
        raise ValueError("filter is missing the 'filter' tag")

    tag = data["filter"]
    value = data.get("value")

    if tag == "options":
        return OptionsFilter(Options.from_config(value))
    if tag == "new_name":
        if not isinstance(value, str):
            raise ValueError("new_name filter requires a string 'value'")
        return NewNameFilter(value)

    raise ValueError(f"unknown filter '{tag}', expected 'options' or 'new_name'")


@dataclass(frozen=True)
class PropertyNotify:
    """
    A property change notification received from the X server.

    Attributes:
        window: Id of the window whose property changed
        atom: Atom of the changed property
    """
    window: int
    atom: int
