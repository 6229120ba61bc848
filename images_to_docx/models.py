from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from PIL import Image, ImageOps

from .errors import DecodeError

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass(frozen=True)
class Footprint:
    """Fixed display size (pixels) stamped on every normalized image."""

    width: int
    height: int

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"footprint must be positive, got {self.width}x{self.height}")


@dataclass(frozen=True)
class RawImageInput:
    name: str
    mime_type: str
    data: bytes = field(repr=False)


class RasterSource:
    """A renderable image for one input file.

    Either wraps a frame already decoded by the specialized codec, or the
    original bytes for Pillow to open natively. Native bytes are only checked
    when :meth:`rasterize` is called. Use as a context manager so the
    in-memory handles are released on both exit paths.
    """

    NATIVE = "native"
    DECODED = "decoded"

    def __init__(self, name: str, data: Optional[bytes] = None, image: Optional[Image.Image] = None):
        if (data is None) == (image is None):
            raise ValueError("RasterSource needs exactly one of data or image")
        self.name = name
        self.origin = self.DECODED if image is not None else self.NATIVE
        self._buffer = io.BytesIO(data) if data is not None else None
        self._image = image
        self.closed = False

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        return self._image.size if self._image is not None else None

    def rasterize(self) -> Image.Image:
        """Return the pixels with EXIF orientation applied. Raises OSError/ValueError on bad data."""
        if self.closed:
            raise ValueError(f"raster source {self.name!r} already released")
        if self._image is None:
            self._buffer.seek(0)
            im = Image.open(self._buffer)
            try:
                im.load()
                transposed = ImageOps.exif_transpose(im)
            except Exception:
                im.close()
                raise
            if transposed is not im:
                im.close()
            self._image = transposed
        return self._image

    def close(self) -> None:
        if self.closed:
            return
        if self._image is not None:
            self._image.close()
            self._image = None
        if self._buffer is not None:
            self._buffer.close()
            self._buffer = None
        self.closed = True

    def __enter__(self) -> "RasterSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


@dataclass(frozen=True)
class Decoded:
    source: RasterSource


@dataclass(frozen=True)
class NeedsFallback:
    error: DecodeError


DecodeOutcome = Union[Decoded, NeedsFallback]


@dataclass(frozen=True)
class NormalizedImage:
    data: bytes = field(repr=False)
    encoding: str
    display_width: int
    display_height: int
    name: str = ""


@dataclass(frozen=True)
class GridCell:
    """Occupied when ``image`` is set, Empty otherwise."""

    image: Optional[NormalizedImage] = None

    @property
    def is_empty(self) -> bool:
        return self.image is None

    @classmethod
    def occupied(cls, image: NormalizedImage) -> "GridCell":
        return cls(image)

    @classmethod
    def empty(cls) -> "GridCell":
        return cls(None)


@dataclass(frozen=True)
class GridRow:
    cells: Tuple[GridCell, ...]

    @property
    def occupied_count(self) -> int:
        return sum(1 for c in self.cells if not c.is_empty)


@dataclass(frozen=True)
class DocumentArtifact:
    filename: str
    data: bytes = field(repr=False)
    content_type: str = DOCX_CONTENT_TYPE


@dataclass(frozen=True)
class ProgressState:
    current: int = 0
    total: int = 0


Grid = List[GridRow]
