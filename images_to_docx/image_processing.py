from __future__ import annotations

import io
from typing import Tuple

from PIL import Image

from .errors import RenderError
from .models import Footprint, NormalizedImage, RasterSource

ENCODING = "jpg"
DEFAULT_MAX_SIZE = 800
DEFAULT_QUALITY = 0.7


def compute_resize(width: int, height: int, max_size: int = DEFAULT_MAX_SIZE) -> Tuple[int, int]:
    """Bound the longer side to ``max_size`` keeping the aspect ratio.

    Images that already fit are left alone; the shorter side is rounded half up.
    """
    if width <= max_size and height <= max_size:
        return width, height
    if width > height:
        return max_size, max(1, int(height * max_size / width + 0.5))
    return max(1, int(width * max_size / height + 0.5)), max_size


def jpeg_quality(quality: float) -> int:
    # 0..1 scale to Pillow's 1..95
    return max(1, min(95, int(round(quality * 100))))


def _flatten(im: Image.Image) -> Image.Image:
    if im.mode in ("RGBA", "LA") or (im.mode == "P" and "transparency" in im.info):
        rgba = im.convert("RGBA")
        canvas = Image.new("RGBA", rgba.size, "white")
        return Image.alpha_composite(canvas, rgba).convert("RGB")
    return im.convert("RGB")


def encode_jpeg(im: Image.Image, quality: float) -> bytes:
    q = jpeg_quality(quality)
    buf = io.BytesIO()
    try:
        im.save(buf, format="JPEG", quality=q, optimize=True)
    except OSError:
        # optimize=True can overflow the encoder buffer on some builds
        buf = io.BytesIO()
        im.save(buf, format="JPEG", quality=q, optimize=False)
    out = buf.getvalue()
    if not out:
        raise RuntimeError("re-encode resulted in empty bytes")
    return out


def normalize(
    source: RasterSource,
    footprint: Footprint,
    max_size: int = DEFAULT_MAX_SIZE,
    quality: float = DEFAULT_QUALITY,
) -> NormalizedImage:
    """Resize ``source`` for compactness and re-encode it as JPEG.

    The pixel size only controls the byte size; the returned display size is
    always ``footprint``.
    """
    try:
        im = source.rasterize()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        raise RenderError(source.name, str(e)) from e

    try:
        w, h = im.size
        new_size = compute_resize(w, h, max_size)
        rgb = _flatten(im)
        if new_size != (w, h):
            rgb = rgb.resize(new_size, Image.LANCZOS)
        data = encode_jpeg(rgb, quality)
    except (OSError, ValueError, RuntimeError) as e:
        raise RenderError(source.name, str(e)) from e

    return NormalizedImage(
        data=data,
        encoding=ENCODING,
        display_width=footprint.width,
        display_height=footprint.height,
        name=source.name,
    )
