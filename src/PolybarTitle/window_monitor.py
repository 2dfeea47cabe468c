"""
Event driven watch loop for the active window.

The loop subscribes to property changes on the root window, and for every
change of _NET_ACTIVE_WINDOW resolves and prints the label of the newly
focused window. It is strictly sequential: one event is processed fully
before the next one is awaited. Any error stops the loop.
"""
import logging
import sys
from enum import Enum
from typing import Any, Callable, Optional, TextIO

from .Models import PropertyNotify
from .renderer import TemplateRenderer
from .resolver import Resolver

ACTIVE_WINDOW_ATOM = "_NET_ACTIVE_WINDOW"


class WatchState(Enum):
    CONNECTING = "connecting"
    SUBSCRIBED = "subscribed"
    WAITING = "waiting_for_event"
    PROCESSING = "processing_event"
    FAILED = "failed"


class WindowMonitor:
    """
    Watch the active window and emit one rendered line per focus change.
    """

    def __init__(
        self,
        connection,
        resolver: Resolver,
        renderer: TemplateRenderer,
        output: Optional[TextIO] = None,
        connect: Optional[Callable[[], Any]] = None,
    ):
        """
        Initialize the window monitor.

        Either an open connection or a ``connect`` factory must be given; the
        factory is called when the monitor starts running.

        :param connection: Open X11Connection (or any object with the same queries), or None
        :param resolver: Rule table used to label windows
        :param renderer: Renderer for the resolved label
        :param output: Stream lines are written to, defaults to stdout
        :param connect: Callable returning a new connection, used when connection is None
        """
        if connection is None and connect is None:
            raise ValueError("either a connection or a connect factory is required")
        self.logger = logging.getLogger(__name__)
        self.connection = connection
        self.resolver = resolver
        self.renderer = renderer
        self.output = output
        self.connect = connect
        self.state = WatchState.CONNECTING

    def _set_state(self, state: WatchState) -> None:
        if state is not self.state:
            self.logger.debug(f"Watch state: {self.state.value} -> {state.value}")
        self.state = state

    def _emit(self, line: str) -> None:
        output = self.output or sys.stdout
        output.write(line + "\n")
        output.flush()

    def process_event(self, event) -> Optional[str]:
        """
        Handle a single event.

        :param event: Event returned by the connection
        :return: The rendered line for an active window change, None for
                 events that are not relevant
        :raises TitleModuleError: If a query or the rendering fails
        """
        if not isinstance(event, PropertyNotify):
            self.logger.debug(f"Received other event: {event!r}")
            return None

        self.logger.debug("Got property notify event")
        atom_name = self.connection.query_atom_name(event.atom)
        if atom_name != ACTIVE_WINDOW_ATOM:
            self.logger.debug(f"Other atom name was received: {atom_name}")
            return None

        self.logger.debug(f"Atom name is {ACTIVE_WINDOW_ATOM}, querying window properties")
        window = self.connection.query_changed_property_value(event)
        self.logger.debug(f"Active window: {window:#x}")

        resolved_name = self.resolver.resolve_window(self.connection, window)
        self.logger.debug(f"Rendering resolved name {resolved_name!r}")
        return self.renderer.render({"name": resolved_name})

    def run(self) -> None:
        """
        Connect if needed, subscribe and process events until an error occurs.

        This only returns by raising; the error is left for the caller to
        report.
        """
        try:
            if self.connection is None:
                self.connection = self.connect()
            self.connection.subscribe_root()
            self._set_state(WatchState.SUBSCRIBED)

            while True:
                self._set_state(WatchState.WAITING)
                event = self.connection.wait_for_event()

                self._set_state(WatchState.PROCESSING)
                line = self.process_event(event)
                if line is not None:
                    self._emit(line)
        except Exception:
            self._set_state(WatchState.FAILED)
            raise

    def close(self) -> None:
        """Close the connection, if one was opened."""
        if self.connection is not None:
            self.connection.close()
