import numpy as np
import pytest
from PIL import Image

CORNER_COLOURS = [(255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 255)]


def make_corner_image() -> Image.Image:
    """2x2 RGB image with a different colour in each pixel."""
    img = Image.new("RGB", (2, 2))
    pixels = img.load()
    for i, colour in enumerate(CORNER_COLOURS):
        pixels[i % 2, i // 2] = colour
    return img


def write_csv(path, text: str):
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
