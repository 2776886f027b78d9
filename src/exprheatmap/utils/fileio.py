"""
Output-file helpers: overwrite guard and atomic replacement.

Exported CSV and JSON files are written to a temporary file next to the
target and moved into place with ``os.replace()``, so an interrupted export
never leaves a truncated matrix or provenance file behind.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import IO, Any, Callable

import numpy as np


def ensure_writable(path: str | os.PathLike, overwrite: bool = False) -> Path:
    """Refuse to clobber an existing file unless ``overwrite`` is set.

    Creates the parent directory when it is missing.

    Raises
    ------
    FileExistsError
        If *path* exists and ``overwrite`` is False.
    """
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def atomic_write(path: str | os.PathLike, write: Callable[[IO[str]], Any]) -> Path:
    """Call ``write(handle)`` on a temp file, then move it onto *path*.

    The temp file is removed if ``write`` raises.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", newline="") as handle:
            write(handle)
        os.replace(tmp, path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise
    return path


def _json_default(value: Any) -> Any:
    # numpy scalars and arrays show up in provenance (domain bounds, labels)
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def atomic_write_json(path: str | os.PathLike, data: Any, *, indent: int = 2) -> Path:
    """Write *data* as JSON (numpy values converted) via :func:`atomic_write`."""
    def _dump(handle: IO[str]) -> None:
        json.dump(data, handle, indent=indent, default=_json_default)
        handle.write("\n")

    return atomic_write(path, _dump)
