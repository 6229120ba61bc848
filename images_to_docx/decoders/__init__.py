"""Decoders for image codecs Pillow cannot open on its own (e.g. HEIC)."""
from .base import FrameDecoder
from .heif_decoder import HeifDecoder

__all__ = ["FrameDecoder", "HeifDecoder"]
