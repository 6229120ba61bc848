from dataclasses import dataclass
from typing import Mapping, Optional
import os
import sys

from dotenv import load_dotenv, find_dotenv

from .models import Footprint


@dataclass
class Settings:
    image_width: int = 128  # 4.5cm / 2.54 * 72
    image_height: int = 170  # 6cm / 2.54 * 72
    image_max_size: int = 800
    image_quality: float = 0.7
    columns: int = 3
    output_filename: str = "images.docx"
    debug: bool = False

    def __post_init__(self):
        if self.image_width <= 0 or self.image_height <= 0:
            raise ValueError(f"footprint must be positive, got {self.image_width}x{self.image_height}")
        if self.image_max_size <= 0:
            raise ValueError(f"IMAGE_MAX_SIZE must be positive, got {self.image_max_size}")
        if not 0.0 < self.image_quality <= 1.0:
            raise ValueError(f"IMAGE_QUALITY must be in (0, 1], got {self.image_quality}")
        if self.columns < 1:
            raise ValueError(f"GRID_COLUMNS must be >= 1, got {self.columns}")

    @property
    def footprint(self) -> Footprint:
        return Footprint(self.image_width, self.image_height)


def _find_env_file() -> str:
    # find_dotenv() only looks upwards from the caller; also try cwd and the package dir
    _env = find_dotenv()
    if _env:
        return _env
    for start in (os.getcwd(), os.path.dirname(__file__)):
        p = os.path.abspath(start)
        while True:
            cand = os.path.join(p, ".env")
            if os.path.exists(cand):
                return cand
            parent = os.path.dirname(p)
            if parent == p:
                break
            p = parent
    return ".env"


def _int_env(env: Mapping[str, str], name: str, default: int) -> int:
    v = env.get(name)
    if not v:
        return default
    try:
        return int(v)
    except ValueError:
        print(f"WARNING: invalid {name}={v!r}, using default {default}", file=sys.stderr)
        return default


def _float_env(env: Mapping[str, str], name: str, default: float) -> float:
    v = env.get(name)
    if not v:
        return default
    try:
        return float(v)
    except ValueError:
        print(f"WARNING: invalid {name}={v!r}, using default {default}", file=sys.stderr)
        return default


def load_config_from_env(env: Mapping[str, str]) -> Settings:
    """Build Settings from a plain mapping (os.environ or a request dict)."""
    dbg = env.get("DEBUG", None)
    if dbg is None:
        dbg = env.get("IMAGE_DEBUG", "")
    return Settings(
        image_width=_int_env(env, "IMAGE_WIDTH", 128),
        image_height=_int_env(env, "IMAGE_HEIGHT", 170),
        image_max_size=_int_env(env, "IMAGE_MAX_SIZE", 800),
        image_quality=_float_env(env, "IMAGE_QUALITY", 0.7),
        columns=_int_env(env, "GRID_COLUMNS", 3),
        output_filename=env.get("OUTPUT_FILENAME") or "images.docx",
        debug=str(dbg).lower() in ("1", "true", "yes"),
    )


def load_config(env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file or _find_env_file())
    return load_config_from_env(os.environ)
