#!/usr/bin/env python3
"""Thin runner for the `images_to_docx` package — delegates to `images_to_docx.cli.main()`.

Kept so `python make_docx.py photos/*.jpg` works from a checkout without installing.
"""
import sys
from images_to_docx.cli import main


def run() -> None:
    try:
        main()
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        sys.exit(130)


if __name__ == "__main__":
    run()
