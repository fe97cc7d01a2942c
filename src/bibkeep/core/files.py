from __future__ import annotations

import os
import tempfile
from pathlib import Path


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def write_text_atomic(dst: Path, text: str, encoding: str = "utf-8") -> None:
    ensure_directory(dst.parent)
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            "w",
            encoding=encoding,
            dir=dst.parent,
            prefix=f".{dst.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            temp_path = Path(handle.name)
            handle.write(text)
        os.replace(temp_path, dst)
    except BaseException:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise
