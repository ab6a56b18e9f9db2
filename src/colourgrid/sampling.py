from pathlib import Path

import numpy as np
from PIL import Image

from colourgrid.colours import write_colours
from colourgrid.errors import DecodeError

DEFAULT_SAMPLES = 20000

# Half-width of the uniform noise added to each 0-255 channel value
JITTER = 0.5


def open_image(path: str | Path) -> Image.Image:
    """Decode an image file into an RGB image held in memory.

    I/O failures (missing file, permissions) propagate unchanged; anything
    Pillow cannot decode raises DecodeError.
    """
    path = Path(path)
    with path.open("rb") as f:
        try:
            with Image.open(f) as img:
                return img.convert("RGB")
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            raise DecodeError(f"Cannot decode image {path}: {e}") from e


def sample_colours(
    image: Image.Image,
    n_samples: int = DEFAULT_SAMPLES,
    rng: np.random.Generator | None = None,
) -> np.ndarray:
    """Draw jittered, normalised colours from random pixels of an image.

    Each sample picks x in [0, width) and y in [0, height) uniformly, reads
    R, G, B (alpha is ignored), adds independent noise in [-JITTER, JITTER]
    to each channel and divides by 255. The noise dithers the 8-bit source
    values so identical bytes do not collapse onto identical floats.

    Returns a float64 array of shape (n_samples, 3) in draw order. The input
    image is not modified.
    """
    if n_samples < 0:
        raise ValueError(f"n_samples must be non-negative, got {n_samples}")
    if rng is None:
        rng = np.random.default_rng()

    pixels = np.asarray(image.convert("RGB"), dtype=np.float64)  # (H, W, 3)
    height, width = pixels.shape[:2]
    if n_samples and (width == 0 or height == 0):
        raise ValueError("Cannot sample from an image with no pixels")

    xs = rng.integers(0, width, size=n_samples)
    ys = rng.integers(0, height, size=n_samples)
    noise = rng.uniform(-JITTER, JITTER, size=(n_samples, 3))
    return (pixels[ys, xs] + noise) / 255.0


def extract(
    image: Image.Image | str | Path,
    output: str | Path,
    n_samples: int = DEFAULT_SAMPLES,
    rng: np.random.Generator | None = None,
) -> int:
    """Sample ``n_samples`` colours from an image and write them to a colour file.

    All samples are drawn before the output is created, so a failure never
    leaves a short file behind. Returns the number of rows written.
    """
    if not isinstance(image, Image.Image):
        image = open_image(image)
    samples = sample_colours(image, n_samples, rng)
    return write_colours(output, samples)
