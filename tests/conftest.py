import pytest
import sys
import os
from unittest.mock import MagicMock

# Add src to python path so we can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from PolybarTitle.Models import PropertyNotify

ACTIVE_WINDOW_ATOM_ID = 400
OTHER_ATOM_ID = 401


class FakeConnection:
    """
    Scripted stand-in for X11Connection.

    ``windows`` maps window ids to (class, name) pairs and ``events`` is
    the sequence returned by wait_for_event(); once exhausted, ``end_error``
    is raised to stop the watch loop.
    """

    def __init__(self, windows=None, events=None, active_window=0, end_error=None):
        self.windows = windows or {}
        self.events = list(events or [])
        self.active_window = active_window
        self.end_error = end_error
        self.atoms = {ACTIVE_WINDOW_ATOM_ID: "_NET_ACTIVE_WINDOW", OTHER_ATOM_ID: "_NET_CLIENT_LIST"}
        self.queries = []
        self.subscribed = False

    def subscribe_root(self):
        self.subscribed = True

    def wait_for_event(self):
        if self.events:
            return self.events.pop(0)
        raise self.end_error

    def query_atom_name(self, atom):
        self.queries.append(('atom_name', atom))
        return self.atoms[atom]

    def query_changed_property_value(self, event):
        self.queries.append(('property_value', event.atom))
        value = self.active_window
        if callable(value):
            value = value()
        return value

    def query_class_name(self, handle):
        self.queries.append(('class', handle))
        return self.windows[handle][0]

    def query_display_name(self, handle):
        self.queries.append(('name', handle))
        return self.windows[handle][1]


@pytest.fixture
def active_window_event():
    return PropertyNotify(window=0x100, atom=ACTIVE_WINDOW_ATOM_ID)


@pytest.fixture
def other_property_event():
    return PropertyNotify(window=0x100, atom=OTHER_ATOM_ID)


@pytest.fixture
def fake_connection():
    return FakeConnection(windows={0x2a00007: ("firefox", "Mozilla Firefox")}, active_window=0x2a00007)


@pytest.fixture
def mock_renderer():
    """Renderer that returns the name unchanged."""
    renderer = MagicMock()
    renderer.render.side_effect = lambda data: data["name"]
    return renderer
