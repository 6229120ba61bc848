import argparse
import dataclasses
import os
import sys
from typing import List, Optional, Sequence

from .config import load_config
from .errors import ImagesToDocxError
from .image_io import expand_image_patterns, is_accepted, load_input
from .logs import log
from .models import RawImageInput
from .services import ImagePipeline


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="images_to_docx",
        description="Lay out images in a fixed-size grid and save them as a .docx document.",
    )
    parser.add_argument(
        "images",
        nargs="*",
        help="Image file paths (supports glob masks like '*.jpg'). HEIC/HEIF is decoded with pillow-heif.",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output",
        help="Output path or directory (default: OUTPUT_FILENAME from .env, 'images.docx').",
    )
    parser.add_argument("--width", dest="image_width", type=int, help="Override IMAGE_WIDTH (display width, px).")
    parser.add_argument("--height", dest="image_height", type=int, help="Override IMAGE_HEIGHT (display height, px).")
    parser.add_argument(
        "--image-max-size",
        dest="image_max_size",
        type=int,
        help="Override IMAGE_MAX_SIZE (longest side in pixels before re-encoding).",
    )
    parser.add_argument(
        "--image-quality",
        dest="image_quality",
        type=float,
        help="Override IMAGE_QUALITY (JPEG quality, 0..1).",
    )
    parser.add_argument("-c", "--columns", dest="columns", type=int, help="Override GRID_COLUMNS.")
    parser.add_argument("--debug", dest="debug", action="store_true", help="Print debug details to stderr.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress informational logs.")
    return parser.parse_args(argv)


def _output_path(output: Optional[str], filename: str) -> str:
    if not output:
        return filename
    if os.path.isdir(output):
        return os.path.join(output, filename)
    return output


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        cfg = load_config()
        # CLI overrides; replace() re-validates
        overrides = {}
        for name in ("image_width", "image_height", "image_max_size", "image_quality", "columns"):
            value = getattr(args, name, None)
            if value is not None:
                overrides[name] = value
        if args.debug:
            overrides["debug"] = True
        cfg = dataclasses.replace(cfg, **overrides)
    except ValueError as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        sys.exit(2)

    image_paths = expand_image_patterns(args.images)
    log(f"Files received: {len(image_paths)}", args.quiet)

    files: List[RawImageInput] = []
    for p in image_paths:
        try:
            item = load_input(p)
        except OSError as e:
            print(f"Failed to read {p!r}: {e}", file=sys.stderr)
            sys.exit(1)
        if not is_accepted(item):
            log(f"{item.name}: not recognised as an image type, trying anyway", args.quiet)
        files.append(item)

    if not files:
        print("Nothing to do: no images provided.", file=sys.stderr)
        sys.exit(1)

    pipeline = ImagePipeline(cfg, quiet=args.quiet)
    try:
        artifact = pipeline.run(files)
    except ImagesToDocxError as e:
        print(f"Failed to build document: {e}", file=sys.stderr)
        sys.exit(1)

    out_path = _output_path(args.output, artifact.filename)
    try:
        with open(out_path, "wb") as f:
            f.write(artifact.data)
    except OSError as e:
        print(f"Failed to write {out_path!r}: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Saved document to {out_path}")


if __name__ == "__main__":
    main()
