from __future__ import annotations

from enum import Enum
from typing import Optional


class ImagesToDocxError(Exception):
    """Base class for every error raised by the conversion pipeline."""


class DecodeErrorKind(str, Enum):
    NO_FRAMES = "no_frames"
    RENDER_FAILURE = "render_failure"
    CORRUPT = "corrupt"


class DecodeError(ImagesToDocxError):
    """Specialized codec could not produce a frame.

    Never leaves the codec gateway: it is turned into a ``NeedsFallback`` result.
    """

    def __init__(self, kind: DecodeErrorKind, message: str = ""):
        self.kind = kind
        super().__init__(f"{kind.value}: {message}" if message else kind.value)


class RenderError(ImagesToDocxError):
    """No decode path could rasterize the file. Fatal to the whole batch."""

    def __init__(self, file_name: str, reason: Optional[str] = None):
        self.file_name = file_name
        self.reason = reason
        msg = f"Failed to load image {file_name!r}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class AssemblyError(ImagesToDocxError):
    """The document container could not be built or serialized."""
