import base64
import binascii
import os
from typing import List

from .config import load_config_from_env
from .errors import ImagesToDocxError
from .image_io import load_input
from .models import Footprint, RawImageInput

MAX_IMAGES = 200


def handle_json_request(req: dict) -> dict:
    """Convert a JSON-style request into a base64 .docx response.

    Request: ``{"action": "convert", "images": [{"name", "mime_type", "data_b64" | "path"}],
    "width", "height", "columns"}``. Settings not given in the request come from the
    environment.
    """
    action = req.get("action")
    if action != "convert":
        return {"ok": False, "errors": ["unsupported action"]}

    images = req.get("images")
    if not isinstance(images, list):
        return {"ok": False, "errors": ["images must be a list"]}
    if len(images) == 0:
        return {"ok": False, "errors": ["no images provided"]}
    if len(images) > MAX_IMAGES:
        return {"ok": False, "errors": [f"too many images: max {MAX_IMAGES}"]}

    try:
        cfg = load_config_from_env(os.environ)
        footprint = Footprint(
            int(cfg.image_width if req.get("width") is None else req.get("width")),
            int(cfg.image_height if req.get("height") is None else req.get("height")),
        )
        columns = int(cfg.columns if req.get("columns") is None else req.get("columns"))
        if columns < 1:
            raise ValueError(f"columns must be >= 1, got {columns}")
    except (TypeError, ValueError) as e:
        return {"ok": False, "errors": [f"invalid settings: {e}"]}

    files: List[RawImageInput] = []
    for idx, itm in enumerate(images, start=1):
        if not isinstance(itm, dict):
            return {"ok": False, "errors": [f"image {idx} must be an object"]}
        name = itm.get("name") or f"image_{idx}.jpg"
        mime = itm.get("mime_type") or ""
        if itm.get("data_b64") is not None:
            try:
                b = base64.b64decode(itm.get("data_b64"), validate=True)
            except (binascii.Error, ValueError) as e:
                return {"ok": False, "errors": [f"invalid base64 for image {name}: {e}"]}
            files.append(RawImageInput(name=name, mime_type=mime, data=b))
        elif itm.get("path") is not None:
            try:
                loaded = load_input(itm.get("path"))
            except OSError as e:
                return {"ok": False, "errors": [f"failed to load image {name} from path: {e}"]}
            files.append(RawImageInput(name=name, mime_type=mime or loaded.mime_type, data=loaded.data))
        else:
            return {"ok": False, "errors": [f"image {name} missing data_b64 or path"]}

    # resolved at call time so tests can monkeypatch the pipeline class
    from .services import pipeline as _pipeline

    try:
        artifact = _pipeline.ImagePipeline(cfg, quiet=True).run(files, footprint, columns)
    except (ImagesToDocxError, ValueError) as e:
        return {"ok": False, "errors": [str(e)]}

    return {
        "ok": True,
        "filename": artifact.filename,
        "content_type": artifact.content_type,
        "images": len(files),
        "data_b64": base64.b64encode(artifact.data).decode("ascii"),
    }
