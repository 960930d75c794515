"""File helpers shared by the JSON stores."""

from __future__ import annotations

import os
from pathlib import Path


def write_text_atomic(path: str | Path, text: str) -> None:
    """Replace a file's contents so readers see either the old or the new text.

    The text goes to ``<path>.tmp`` first and is moved over the target. The
    temporary file is removed if anything fails before the move completes.

    Raises:
        OSError: If the directory cannot be created or the file written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        tmp_path.write_text(text, encoding="utf-8")
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)
