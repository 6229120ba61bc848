"""Codec gateway: turn raw input files into renderable raster sources."""
from __future__ import annotations

import glob
import mimetypes
import os
from typing import List, Optional, Sequence

from .decoders import FrameDecoder, HeifDecoder
from .errors import DecodeError
from .logs import debug, log
from .models import Decoded, DecodeOutcome, NeedsFallback, RasterSource, RawImageInput

HIGH_EFFICIENCY_MIME_TYPES = ("image/heic", "image/heif")
HIGH_EFFICIENCY_EXTENSIONS = (".heic", ".heif")


def is_high_efficiency(file: RawImageInput) -> bool:
    mime = (file.mime_type or "").lower()
    if mime in HIGH_EFFICIENCY_MIME_TYPES:
        return True
    return (file.name or "").lower().endswith(HIGH_EFFICIENCY_EXTENSIONS)


def is_accepted(file: RawImageInput) -> bool:
    """Inputs the file picker would offer: any image/* type plus HEIC/HEIF by extension."""
    return (file.mime_type or "").lower().startswith("image/") or is_high_efficiency(file)


class CodecGateway:
    """Routes each input either through the specialized decoder or to Pillow directly.

    A failed specialized decode is not an error for the caller: the original
    bytes are handed to the native path, which may still be able to open them.
    """

    def __init__(self, decoder: Optional[FrameDecoder] = None, quiet: bool = False, debug: bool = False):
        self._decoder = decoder
        self.quiet = quiet
        self.show_debug = debug

    @property
    def decoder(self) -> FrameDecoder:
        if self._decoder is None:
            self._decoder = HeifDecoder()
        return self._decoder

    def try_decode(self, file: RawImageInput) -> DecodeOutcome:
        try:
            image = self.decoder.decode(file.data)
        except DecodeError as e:
            return NeedsFallback(e)
        return Decoded(RasterSource(file.name, image=image))

    def resolve(self, file: RawImageInput) -> RasterSource:
        if not is_high_efficiency(file):
            debug("CODEC_DEBUG", f"{file.name}: native path ({file.mime_type or 'unknown type'})", force=self.show_debug)
            return RasterSource(file.name, data=file.data)

        outcome = self.try_decode(file)
        if isinstance(outcome, Decoded):
            debug("CODEC_DEBUG", f"{file.name}: decoded {outcome.source.size} via {type(self.decoder).__name__}", force=self.show_debug)
            return outcome.source
        log(f"{file.name}: specialized decode failed ({outcome.error}), trying native rendering", self.quiet)
        return RasterSource(file.name, data=file.data)


def load_input(path: str) -> RawImageInput:
    mime, _ = mimetypes.guess_type(path)
    if mime is None and path.lower().endswith(HIGH_EFFICIENCY_EXTENSIONS):
        mime = "image/heic"
    with open(path, "rb") as f:
        data = f.read()
    return RawImageInput(name=os.path.basename(path), mime_type=mime or "", data=data)


def expand_image_patterns(patterns: Sequence[str]) -> List[str]:
    """Expand glob masks; literal paths are kept so missing files fail loudly later."""
    result: List[str] = []
    for p in patterns:
        expanded = glob.glob(p)
        if expanded:
            result.extend(sorted(expanded))
        else:
            result.append(p)
    # drop duplicates, keep order
    seen = set()
    uniq: List[str] = []
    for p in result:
        if p not in seen:
            seen.add(p)
            uniq.append(p)
    return uniq
