from __future__ import annotations

import os
from pathlib import Path


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def normalize_dir(value: str) -> str:
    """Use the platform separator and end with exactly one separator."""

    value = str(value).replace("/", os.sep)
    return value.rstrip(os.sep) + os.sep


def normalize_file(value: str) -> str:
    return str(value).replace("/", os.sep)


def is_readable_file(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.R_OK)


def is_within(path: str, directory: str) -> bool:
    # Lexical check against the real directory; a symlinked file pointing
    # elsewhere is treated as outside.
    root = os.path.join(os.path.realpath(directory), "")
    return path.startswith(root)
