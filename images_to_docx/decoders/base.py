from typing import Protocol

from PIL import Image


class FrameDecoder(Protocol):
    """Protocol describing a specialized codec decoder.

    ``decode`` returns the primary frame as a Pillow image or raises
    ``DecodeError`` with the matching ``DecodeErrorKind``.
    """

    def decode(self, data: bytes) -> Image.Image:
        ...
