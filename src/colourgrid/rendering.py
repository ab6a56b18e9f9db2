from pathlib import Path

import numpy as np
from PIL import Image

from colourgrid.colours import Conversion, read_colours
from colourgrid.errors import EmptyColourSetError, EncodeError

DEFAULT_PIXELS = 800
DEFAULT_CELLS = 20


def cell_edges(pixels: int, cells: int) -> np.ndarray:
    """Pixel offsets of the grid lines along one axis, ``cells + 1`` of them.

    ``edges[i] == floor(i * pixels / cells)``, computed in integers so the last
    edge is exactly ``pixels``. Adjacent cells can differ in size by one pixel.
    """
    if pixels < 1 or cells < 1:
        raise ValueError(f"pixels and cells must be positive, got pixels={pixels}, cells={cells}")
    return (np.arange(cells + 1, dtype=np.int64) * pixels) // cells


def cell_bounds(cx: int, cy: int, pixels: int, cells: int) -> tuple[int, int, int, int]:
    """Half-open box ``(x_min, y_min, x_max, y_max)`` covered by cell (cx, cy)."""
    if not (0 <= cx < cells and 0 <= cy < cells):
        raise IndexError(f"Cell ({cx}, {cy}) outside a {cells}x{cells} grid")
    edges = cell_edges(pixels, cells)
    return int(edges[cx]), int(edges[cy]), int(edges[cx + 1]), int(edges[cy + 1])


def assign_colours(n_colours: int, cells: int, rng: np.random.Generator | None = None) -> np.ndarray:
    """Pick a colour index for every cell, uniformly and with replacement.

    Returns an int array of shape (cells, cells) indexed as ``[cy, cx]``.
    """
    if n_colours < 1:
        raise EmptyColourSetError("No colours to choose from")
    if rng is None:
        rng = np.random.default_rng()
    return rng.integers(0, n_colours, size=(cells, cells))


def render_grid(
    colours: np.ndarray,
    pixels: int = DEFAULT_PIXELS,
    cells: int = DEFAULT_CELLS,
    rng: np.random.Generator | None = None,
) -> Image.Image:
    """Paint a ``pixels x pixels`` canvas split into a ``cells x cells`` grid.

    ``colours`` is a uint8 array of shape (m, 3). Each cell is filled with one
    row of it chosen at random.
    """
    colours = np.asarray(colours)
    if colours.ndim != 2 or colours.shape[1] != 3:
        raise ValueError(f"Expected colours of shape (m, 3), got {colours.shape}")
    if colours.dtype != np.uint8:
        raise ValueError(f"Expected uint8 colours, got {colours.dtype}")

    edges = cell_edges(pixels, cells)
    choice = assign_colours(len(colours), cells, rng)

    # Colour each cell once, then stretch cells to their pixel widths
    widths = np.diff(edges)
    canvas = np.repeat(np.repeat(colours[choice], widths, axis=0), widths, axis=1)
    return Image.fromarray(canvas)


def save_image(image: Image.Image, path: str | Path) -> None:
    """Encode ``image`` in the format implied by the file extension.

    A file left behind by a failed encode is removed.
    """
    path = Path(path)
    Image.init()
    fmt = Image.registered_extensions().get(path.suffix.lower())
    if fmt is None:
        raise EncodeError(f"Unknown image format for {path}")
    if fmt not in Image.SAVE:
        raise EncodeError(f"Cannot write {fmt} images: {path}")
    with path.open("wb") as f:
        try:
            image.save(f, format=fmt)
        except (OSError, ValueError, KeyError) as e:
            f.close()
            path.unlink(missing_ok=True)
            raise EncodeError(f"Cannot encode {path}: {e}") from e


def render(
    colour_file: str | Path,
    output: str | Path,
    pixels: int = DEFAULT_PIXELS,
    cells: int = DEFAULT_CELLS,
    rng: np.random.Generator | None = None,
    conversion: Conversion = Conversion.TRUNCATE,
) -> Image.Image:
    colours = read_colours(colour_file, conversion)
    if len(colours) == 0:
        raise EmptyColourSetError(f"No colours in {colour_file}")
    image = render_grid(colours, pixels, cells, rng)
    save_image(image, output)
    return image
