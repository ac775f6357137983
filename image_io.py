"""Image I/O and grayscale conversion."""

import io
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from errors import ImageLoadError

# ITU-R 601 luma weights, as used by PIL's "L" conversion.
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def _pil_to_array(img: Image.Image) -> np.ndarray:
    if img.mode == "L":
        return np.array(img)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    return np.array(img)


def load_image(path: Union[str, Path]) -> np.ndarray:
    """Load an image file into a uint8 array.

    Args:
        path: Path to image file

    Returns:
        HxW (grayscale), HxWx3 (RGB) or HxWx4 (RGBA) uint8 numpy array

    Raises:
        ImageLoadError: If the file does not exist or is not an image
    """
    path = Path(path)
    if not path.is_file():
        raise ImageLoadError(f"Image not found: {path}")
    try:
        with Image.open(path) as img:
            img.load()
            return _pil_to_array(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError(f"Failed to load image: {path}") from exc


def load_image_bytes(data: bytes) -> np.ndarray:
    """Decode an in-memory image (e.g. an upload) into a uint8 array."""
    if not data:
        raise ImageLoadError("No image data received.")
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return _pil_to_array(img)
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageLoadError("Uploaded file is not a readable image.") from exc


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert an RGB/RGBA buffer to float intensities L = 0.299R + 0.587G + 0.114B.

    A 2D buffer is already grayscale and is returned as float64 unchanged, so
    the conversion can be applied repeatedly. Alpha is ignored.
    """
    arr = np.asarray(image)
    if arr.ndim == 2:
        return arr.astype(np.float64, copy=False)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ImageLoadError(f"Unsupported pixel buffer shape: {arr.shape}")
    return arr[:, :, :3].astype(np.float64) @ LUMA_WEIGHTS


def to_grayscale_u8(image: np.ndarray) -> np.ndarray:
    """Grayscale conversion rounded to uint8 for OpenCV stages."""
    arr = np.asarray(image)
    if arr.ndim == 2 and arr.dtype == np.uint8:
        return arr
    gray = to_grayscale(arr)
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def to_rgb_image(image: np.ndarray) -> Image.Image:
    """Return an RGB PIL copy of a pixel buffer, for drawing overlays."""
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        arr = np.clip(np.rint(arr), 0, 255).astype(np.uint8)
    return Image.fromarray(arr).convert("RGB")
