"""
Error types raised while watching the active window.

None of these are recovered inside the watch loop; they propagate to the
entry point, which reports the crash and exits.
"""


class TitleModuleError(Exception):
    """Base class for all runtime errors of the title module."""


class DisplayConnectionError(TitleModuleError):
    """The X server connection could not be established or was lost."""


class ProtocolError(TitleModuleError):
    """A request/response round trip to the X server failed."""


class EncodingError(TitleModuleError):
    """Property bytes returned by the X server are not valid UTF-8."""


class MissingValueError(TitleModuleError):
    """An expected property value is absent or has the wrong format."""


class RenderError(TitleModuleError):
    """The output template could not be compiled or rendered."""
