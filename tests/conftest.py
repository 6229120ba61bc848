import io
import os
import sys

import pytest
from PIL import Image

# Ensure project root is importable during tests
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from images_to_docx import RawImageInput


def make_image_bytes(w=200, h=150, color=(100, 150, 200), fmt="JPEG", mode="RGB"):
    img = Image.new(mode, (w, h), color=color)
    b = io.BytesIO()
    img.save(b, format=fmt)
    return b.getvalue()


@pytest.fixture
def jpeg_input():
    def _make(name="photo.jpg", w=200, h=150, color=(100, 150, 200)):
        return RawImageInput(name=name, mime_type="image/jpeg", data=make_image_bytes(w, h, color))

    return _make


@pytest.fixture(autouse=True)
def no_debug_env(monkeypatch):
    # keep stderr assertions independent of the developer's shell
    monkeypatch.delenv("DEBUG", raising=False)
    monkeypatch.delenv("IMAGE_DEBUG", raising=False)
    yield
