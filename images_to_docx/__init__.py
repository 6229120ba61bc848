"""Public API for images_to_docx.

Expose a small, explicit set of helpers used by the CLI, the JSON API and tests.
"""
from importlib.metadata import version, PackageNotFoundError

try:
	__version__ = version("images_to_docx")
except PackageNotFoundError:
	__version__ = "0.0.0"

from .config import Settings, load_config, load_config_from_env
from .errors import ImagesToDocxError, DecodeError, DecodeErrorKind, RenderError, AssemblyError
from .models import (
	Footprint,
	RawImageInput,
	RasterSource,
	NormalizedImage,
	GridCell,
	GridRow,
	DocumentArtifact,
	ProgressState,
	Decoded,
	NeedsFallback,
)
from .image_io import CodecGateway, is_high_efficiency, load_input, expand_image_patterns
from .image_processing import compute_resize, normalize
from .layout import layout
from .document import assemble
from .progress import ProgressTracker
from .services import ImagePipeline
from .json_api import handle_json_request

__all__ = [
	"Settings",
	"load_config",
	"load_config_from_env",
	"ImagesToDocxError",
	"DecodeError",
	"DecodeErrorKind",
	"RenderError",
	"AssemblyError",
	"Footprint",
	"RawImageInput",
	"RasterSource",
	"NormalizedImage",
	"GridCell",
	"GridRow",
	"DocumentArtifact",
	"ProgressState",
	"Decoded",
	"NeedsFallback",
	"CodecGateway",
	"is_high_efficiency",
	"load_input",
	"expand_image_patterns",
	"compute_resize",
	"normalize",
	"layout",
	"assemble",
	"ProgressTracker",
	"ImagePipeline",
	"handle_json_request",
	"__version__",
]
