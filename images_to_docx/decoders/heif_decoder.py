"""HEIC/HEIF decoder backed by pillow-heif."""
from __future__ import annotations

import io
from typing import Any, Optional

import pillow_heif
from PIL import Image

from ..errors import DecodeError, DecodeErrorKind


class HeifDecoder:
    """Decode the primary frame of a HEIF container into a Pillow image.

    ``opener`` can be injected to ease testing; it defaults to
    ``pillow_heif.open_heif``.
    """

    def __init__(self, opener: Optional[Any] = None):
        self._open = opener or pillow_heif.open_heif

    def decode(self, data: bytes) -> Image.Image:
        buf = io.BytesIO(data)
        try:
            try:
                heif_file = self._open(buf, convert_hdr_to_8bit=True)
            except Exception as e:
                raise DecodeError(DecodeErrorKind.CORRUPT, str(e)) from e
            if len(heif_file) == 0:
                raise DecodeError(DecodeErrorKind.NO_FRAMES)
            frame = heif_file[getattr(heif_file, "primary_index", 0)]
            try:
                pixels = frame.data
                if not pixels:
                    raise DecodeError(DecodeErrorKind.RENDER_FAILURE, "decoder returned no pixel data")
                # the frame's own width/height and stride describe the buffer
                return Image.frombytes(frame.mode, frame.size, bytes(pixels), "raw", frame.mode, frame.stride)
            except DecodeError:
                raise
            except Exception as e:
                raise DecodeError(DecodeErrorKind.RENDER_FAILURE, str(e)) from e
        finally:
            buf.close()
