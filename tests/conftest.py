import io

import numpy as np
import pytest
from PIL import Image


def make_rgb(gray: np.ndarray) -> np.ndarray:
    """Stack a uint8 grayscale image into RGB."""
    return np.repeat(gray[:, :, None], 3, axis=2).astype(np.uint8)


def png_bytes(image: np.ndarray) -> bytes:
    buffer = io.BytesIO()
    Image.fromarray(image).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def square_image():
    """100x100 black RGB image with a 10x10 white square in the middle."""
    gray = np.zeros((100, 100), dtype=np.uint8)
    gray[45:55, 45:55] = 255
    return make_rgb(gray)


@pytest.fixture
def black_image():
    return np.zeros((50, 60, 3), dtype=np.uint8)


@pytest.fixture
def three_squares_mask():
    """Binary mask with three disjoint 3x3 squares (area 9 each)."""
    mask = np.zeros((40, 40), dtype=np.uint8)
    mask[2:5, 2:5] = 255
    mask[10:13, 20:23] = 255
    mask[30:33, 5:8] = 255
    return mask


@pytest.fixture
def three_squares_image(three_squares_mask):
    return make_rgb(three_squares_mask)


@pytest.fixture
def dark_dots_image(three_squares_mask):
    """White background with three black 3x3 dots."""
    return make_rgb(255 - three_squares_mask)
