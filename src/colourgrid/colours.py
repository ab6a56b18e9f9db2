"""Reading and writing the tabular colour file.

One record per line, no header, three comma separated floats in R, G, B
order. Values are nominally in [0, 1] but the range is not enforced on read.
"""

import csv
import enum
import math
from pathlib import Path

import numpy as np

from colourgrid.errors import ParseError

FIELDS = 3


class Conversion(enum.Enum):
    """How a [0, 1] channel value becomes a byte."""

    TRUNCATE = "truncate"
    ROUND = "round"


def _as_rows(samples) -> np.ndarray:
    arr = np.asarray(samples, dtype=np.float64)
    if arr.size == 0:
        return arr.reshape(0, FIELDS)
    if arr.ndim != 2 or arr.shape[1] != FIELDS:
        raise ValueError(f"Expected samples of shape (n, {FIELDS}), got {arr.shape}")
    return arr


def write_colours(path: str | Path, samples) -> int:
    """Write samples to ``path``, one row each, in order. Returns the row count.

    A file left behind by a failed write is removed before the error propagates.
    """
    rows = _as_rows(samples)
    path = Path(path)
    with path.open("w", newline="", encoding="utf-8") as f:
        try:
            writer = csv.writer(f, lineterminator="\n")
            for r, g, b in rows:
                writer.writerow((repr(float(r)), repr(float(g)), repr(float(b))))
        except BaseException:
            f.close()
            path.unlink(missing_ok=True)
            raise
    return len(rows)


def _parse_record(record: list[str], line: int) -> tuple[float, float, float]:
    if len(record) != FIELDS:
        raise ParseError(f"Line {line}: expected {FIELDS} fields, got {len(record)}")
    values = []
    for field in record:
        try:
            value = float(field)
        except ValueError:
            raise ParseError(f"Line {line}: not a number: {field!r}") from None
        if not math.isfinite(value):
            raise ParseError(f"Line {line}: not a finite number: {field!r}")
        values.append(value)
    return values[0], values[1], values[2]


def read_colour_rows(path: str | Path) -> np.ndarray:
    """Parse every record of a colour file into a float64 array of shape (m, 3).

    Blank lines are skipped. Any malformed record aborts the whole load.
    """
    path = Path(path)
    rows = []
    with path.open(newline="", encoding="utf-8") as f:
        reader = csv.reader(f)
        try:
            for record in reader:
                if not record:
                    continue
                rows.append(_parse_record(record, reader.line_num))
        except (csv.Error, UnicodeDecodeError) as e:
            raise ParseError(f"Cannot read colours from {path}: {e}") from e
    return np.array(rows, dtype=np.float64).reshape(-1, FIELDS)


def to_bytes(values, conversion: Conversion = Conversion.TRUNCATE) -> np.ndarray:
    """Scale [0, 1] channel values to uint8.

    TRUNCATE drops the fractional part of ``value * 255``, ROUND rounds half to
    even. Both saturate: anything below 0 becomes 0 and anything above 255
    becomes 255, so jitter at the byte extremes never wraps around.
    """
    scaled = np.asarray(values, dtype=np.float64) * 255.0
    if conversion is Conversion.TRUNCATE:
        scaled = np.trunc(scaled)
    elif conversion is Conversion.ROUND:
        scaled = np.rint(scaled)
    else:
        raise ValueError(f"Unknown conversion: {conversion!r}")
    return np.clip(scaled, 0, 255).astype(np.uint8)


def read_colours(path: str | Path, conversion: Conversion = Conversion.TRUNCATE) -> np.ndarray:
    """Load a colour file as a uint8 array of shape (m, 3). May be empty."""
    return to_bytes(read_colour_rows(path), conversion)
