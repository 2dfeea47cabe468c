"""
Filter resolution: maps a window's class and name to its display label.

Lookups are tried in a fixed order and the first hit wins:

1. a filter keyed on the window class
2. a filter keyed on the window name
3. the global options, as an implicit options filter
4. the window class unchanged
"""
import logging
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Tuple

from .capitalize import capitalize
from .Models import (
    CapitalizeMode,
    Filter,
    NewNameFilter,
    Options,
    OptionsFilter,
    WindowIdentifier,
    WindowIdentifierKind,
)

DEFAULT_OPTIONS = Options(capitalize=CapitalizeMode.default())
DEFAULT_DESKTOP_NAME = "Desktop"


def apply_options(options: Options, value: str) -> str:
    """Apply the transformations in ``options`` to ``value``."""
    if options.capitalize is not None:
        return capitalize(options.capitalize, value)
    return value


def apply_filter(window_filter: Filter, value: str) -> str:
    """
    Resolve a value through a single filter.

    :param window_filter: Options or new name filter
    :param value: The original window class
    :return: The transformed value or the configured new name
    """
    if isinstance(window_filter, NewNameFilter):
        return window_filter.name
    return apply_options(window_filter.options, value)


class Resolver:
    """
    Immutable rule table for window labels.

    The filters mapping is copied and exposed read-only, so a resolver can be
    shared by the watch loop for the whole process lifetime.
    """

    def __init__(
        self,
        global_options: Optional[Options] = DEFAULT_OPTIONS,
        desktop_name: Optional[str] = DEFAULT_DESKTOP_NAME,
        filters: Optional[Mapping[WindowIdentifier, Filter]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self._global_options = global_options
        self._desktop_name = desktop_name
        self._filters = MappingProxyType(dict(filters or {}))

    @property
    def global_options(self) -> Optional[Options]:
        return self._global_options

    @property
    def desktop_name(self) -> Optional[str]:
        return self._desktop_name

    @property
    def filters(self) -> Mapping[WindowIdentifier, Filter]:
        return self._filters

    def _global_filter(self) -> Optional[Filter]:
        if self._global_options is None:
            return None
        return OptionsFilter(self._global_options)

    def _lookup_chain(self, class_value: str, name_value: str) -> List[Tuple[str, Callable[[], Optional[Filter]]]]:
        class_key = WindowIdentifier(WindowIdentifierKind.CLASS, class_value)
        name_key = WindowIdentifier(WindowIdentifierKind.NAME, name_value)
        return [
            ("WM_CLASS filter", lambda: self._filters.get(class_key)),
            ("WM_NAME filter", lambda: self._filters.get(name_key)),
            ("global options", lambda: self._global_filter()),
        ]

    def find_filter(self, class_value: str, name_value: str) -> Optional[Filter]:
        """
        Return the first filter that applies to the window, or None.

        :param class_value: The window's WM_CLASS class
        :param name_value: The window's WM_NAME
        """
        for description, lookup in self._lookup_chain(class_value, name_value):
            self.logger.debug(f"Looking up {description}")
            window_filter = lookup()
            if window_filter is not None:
                self.logger.debug(f"Using {description}: {window_filter}")
                return window_filter
        return None

    def resolve(self, class_value: str, name_value: str) -> str:
        """
        Resolve the display label for a window.

        :param class_value: The window's WM_CLASS class
        :param name_value: The window's WM_NAME
        :return: The label to render
        """
        window_filter = self.find_filter(class_value, name_value)
        if window_filter is None:
            self.logger.debug("No filter found, leaving WM_CLASS as is")
            return class_value
        return apply_filter(window_filter, class_value)

    def resolve_desktop(self) -> str:
        """Label used when no window is focused."""
        return self._desktop_name or ""

    def resolve_window(self, adapter, handle: int) -> str:
        """
        Query a window through ``adapter`` and resolve its label.

        A handle of 0 means the desktop has focus; no queries are made.

        :raises TitleModuleError: If any query fails
        """
        if not handle:
            self.logger.debug("Window was 0, assuming it's the desktop")
            return self.resolve_desktop()

        class_value = adapter.query_class_name(handle)
        self.logger.debug(f"WM_CLASS of window {handle:#x}: {class_value!r}")
        name_value = adapter.query_display_name(handle)
        self.logger.debug(f"WM_NAME of window {handle:#x}: {name_value!r}")

        return self.resolve(class_value, name_value)

    def __repr__(self) -> str:
        return (
            f"Resolver(global_options={self._global_options!r}, "
            f"desktop_name={self._desktop_name!r}, filters={dict(self._filters)!r})"
        )
