import itertools
import os
from pathlib import Path
from typing import Callable


def output_name(stem: str, ext: str, counter: int | None = None) -> str:
    if counter is None:
        return f"{stem}.{ext}"
    return f"{stem}-{counter}.{ext}"


def resolve_unique_path(
    directory: str | Path,
    stem: str,
    ext: str,
    exists: Callable[[Path], bool] = os.path.exists,
) -> Path:
    """First of ``stem.ext``, ``stem-1.ext``, ``stem-2.ext``, ... in ``directory``
    for which ``exists`` is false."""
    directory = Path(directory)
    candidate = directory / output_name(stem, ext)
    for counter in itertools.count(1):
        if not exists(candidate):
            return candidate
        candidate = directory / output_name(stem, ext, counter)


def output_path_for(input_path: str | Path, ext: str, directory: str | Path | None = None) -> Path:
    """Non-colliding output path named after ``input_path``, in the working directory by default."""
    if directory is None:
        directory = Path.cwd()
    return resolve_unique_path(directory, Path(input_path).stem, ext)
