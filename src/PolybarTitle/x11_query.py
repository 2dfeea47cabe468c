"""
X11 protocol queries used by the watch loop.

Thin wrapper around a python-xlib Display. Every method performs one or two
round trips to the X server and translates python-xlib failures into the
module's error types. Nothing is cached or retried.
"""
import logging
from typing import Optional

from Xlib import X, Xatom, display, error

from .errors import DisplayConnectionError, EncodingError, MissingValueError, ProtocolError
from .Models import PropertyNotify

# GetProperty lengths are in 32-bit units
PROPERTY_READ_LENGTH = 1024


def _decode(data, what: str) -> str:
    if isinstance(data, str):
        return data
    try:
        return bytes(data).decode("utf-8")
    except UnicodeDecodeError as e:
        raise EncodingError(f"{what} contains invalid utf-8: {e}") from e


class X11Connection:
    """Connection to an X server and the queries made against it."""

    def __init__(self, xdisplay):
        """
        :param xdisplay: An open ``Xlib.display.Display``
        """
        self.logger = logging.getLogger(__name__)
        self.display = xdisplay
        self.root = xdisplay.screen().root

    @classmethod
    def connect(cls, display_name: Optional[str] = None) -> "X11Connection":
        """
        Open a connection to the X server.

        :param display_name: Display to connect to, defaults to $DISPLAY
        :raises DisplayConnectionError: If the display cannot be opened
        """
        logger = logging.getLogger(__name__)
        logger.info(f"Establishing a connection to the X server ({display_name or '$DISPLAY'})")
        try:
            xdisplay = display.Display(display_name)
        except (error.DisplayError, error.ConnectionClosedError, OSError) as e:
            raise DisplayConnectionError(f"failed to establish a connection to the X server: {e}") from e
        return cls(xdisplay)

    def subscribe_root(self) -> None:
        """
        Ask for property change notifications on the root window.

        :raises ProtocolError: If the server rejects the request
        """
        self.logger.info("Setting up events")
        catcher = error.CatchError()
        try:
            self.root.change_attributes(onerror=catcher, event_mask=X.PropertyChangeMask)
            self.display.sync()
        except (error.XError, error.ConnectionClosedError) as e:
            raise ProtocolError(f"ChangeWindowAttributes failed: {e}") from e
        if catcher.get_error():
            raise ProtocolError(f"ChangeWindowAttributes response failed: {catcher.get_error()}")

    def wait_for_event(self):
        """
        Block until the next event arrives.

        :return: A PropertyNotify for property changes, the raw event otherwise
        :raises DisplayConnectionError: If the connection is lost
        """
        try:
            event = self.display.next_event()
        except error.ConnectionClosedError as e:
            raise DisplayConnectionError(f"could not wait for event: {e}") from e

        if event.type == X.PropertyNotify:
            return PropertyNotify(window=getattr(event.window, "id", event.window), atom=event.atom)
        return event

    def _get_property(self, window_id: int, atom: int, property_type: int, length: int, what: str):
        window = self.display.create_resource_object("window", window_id)
        try:
            return window.get_property(atom, property_type, 0, length)
        except (error.XError, error.ConnectionClosedError) as e:
            raise ProtocolError(f"GetProperty for {what} of window {window_id:#x} failed: {e}") from e

    def query_class_name(self, handle: int) -> str:
        """
        Read the class part of a window's WM_CLASS.

        WM_CLASS holds two NUL-terminated strings, instance then class.
        A window without WM_CLASS, or one holding only the instance part,
        yields an empty string.

        :raises ProtocolError: If the request fails
        :raises EncodingError: If the class is not valid UTF-8
        """
        prop = self._get_property(handle, Xatom.WM_CLASS, Xatom.STRING, PROPERTY_READ_LENGTH, "WM_CLASS")
        if prop is None or not prop.value:
            return ""

        raw = bytes(prop.value)
        _instance, sep, wm_class = raw.partition(b"\0")
        if not sep:
            self.logger.debug(f"WM_CLASS of window {handle:#x} has no class part: {raw!r}")
            return ""
        if wm_class.endswith(b"\0"):
            wm_class = wm_class[:-1]
        return _decode(wm_class, "WM_CLASS")

    def query_display_name(self, handle: int) -> str:
        """
        Read a window's WM_NAME.

        :raises ProtocolError: If the request fails
        :raises EncodingError: If the name is not valid UTF-8
        """
        prop = self._get_property(handle, Xatom.WM_NAME, Xatom.STRING, PROPERTY_READ_LENGTH, "WM_NAME")
        if prop is None or not prop.value:
            return ""
        return _decode(prop.value, "WM_NAME")

    def query_changed_property_value(self, event: PropertyNotify) -> int:
        """
        Read the first 32-bit value of the property a notification refers to.

        :raises ProtocolError: If the request fails
        :raises MissingValueError: If the property has no 32-bit value
        """
        prop = self._get_property(event.window, event.atom, Xatom.WINDOW, 4, f"atom {event.atom}")
        if prop is None or prop.format != 32:
            raise MissingValueError(f"failed to get u32 value from atom {event.atom}")
        if len(prop.value) == 0:
            raise MissingValueError(f"missing u32 value from atom {event.atom}")
        return int(prop.value[0])

    def query_atom_name(self, atom: int) -> str:
        """
        Resolve an atom to its name.

        :raises ProtocolError: If the request fails
        :raises EncodingError: If the name is not valid UTF-8
        """
        try:
            name = self.display.get_atom_name(atom)
        except (error.XError, error.ConnectionClosedError) as e:
            raise ProtocolError(f"GetAtomName for atom {atom} failed: {e}") from e
        return _decode(name, "atom name")

    def close(self) -> None:
        self.logger.debug("Closing X server connection")
        self.display.close()
