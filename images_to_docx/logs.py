"""Prefixed stderr logging shared by the CLI and the pipeline."""
import os
import sys

PREFIX = "[images_to_docx]"


def debug_enabled() -> bool:
    # DEBUG wins; IMAGE_DEBUG is still honoured for older .env files
    env_dbg = os.environ.get("DEBUG", None)
    if env_dbg is None:
        env_dbg = os.environ.get("IMAGE_DEBUG", "")
    return str(env_dbg).lower() in ("1", "true", "yes")


def log(msg: str, quiet: bool = False) -> None:
    """One prefixed line on stderr unless quiet."""
    if not quiet:
        print(f"{PREFIX} {msg}", file=sys.stderr)


def debug(tag: str, msg: str, force: bool = False) -> None:
    if force or debug_enabled():
        print(f"[{tag}] {msg}", file=sys.stderr)
