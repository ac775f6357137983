"""Segmentation of an image into a binary dot mask."""

import logging
import math
from dataclasses import dataclass

import cv2
import numpy as np

from config import BINARY_THRESHOLD
from image_io import to_grayscale_u8
from models import AnalysisConfig, ThresholdMode

logger = logging.getLogger(__name__)


@dataclass
class SegmentationResult:
    """Binary mask (uint8, 0 or 255) and the threshold that produced it."""
    mask: np.ndarray
    threshold: float


def effective_blur_kernel(blur_kernel: float) -> int:
    """Gaussian kernel size for a requested blur; 0 means no blur.

    The size is floored and forced odd by adding one to even values.
    """
    if blur_kernel is None or blur_kernel <= 0:
        return 0
    ksize = int(math.floor(blur_kernel))
    if ksize <= 0:
        return 0
    if ksize % 2 == 0:
        ksize += 1
    return ksize


def apply_threshold(gray: np.ndarray, mode: ThresholdMode, value: int = BINARY_THRESHOLD):
    """Binarize a uint8 grayscale image.

    Args:
        gray: uint8 grayscale image
        mode: Otsu (automatic), binary (fixed 127) or custom (`value`)
        value: Threshold used in custom mode

    Returns:
        Tuple of (threshold, mask) where mask is 255 for pixels above threshold
    """
    if mode is ThresholdMode.OTSU:
        threshold, mask = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    elif mode is ThresholdMode.BINARY:
        threshold, mask = cv2.threshold(gray, BINARY_THRESHOLD, 255, cv2.THRESH_BINARY)
    else:
        threshold, mask = cv2.threshold(gray, int(value), 255, cv2.THRESH_BINARY)
    return float(threshold), mask


def segment(image: np.ndarray, config: AnalysisConfig) -> SegmentationResult:
    """Grayscale, optional blur, threshold and optional inversion.

    Args:
        image: RGB/RGBA or grayscale pixel buffer
        config: Analysis parameters (blur_kernel, threshold_mode,
            threshold_value, invert are used)

    Returns:
        SegmentationResult with a mask of the same height and width as the input
    """
    gray = to_grayscale_u8(image)

    ksize = effective_blur_kernel(config.blur_kernel)
    if ksize > 0:
        gray = cv2.GaussianBlur(gray, (ksize, ksize), 0)

    threshold, mask = apply_threshold(gray, config.threshold_mode, config.threshold_value)

    if config.invert:
        # Dark dots on a light background.
        mask = cv2.bitwise_not(mask)

    logger.debug(
        "Segmentation: blur=%d mode=%s threshold=%.1f invert=%s foreground=%d px",
        ksize, config.threshold_mode.value, threshold, config.invert, int(np.count_nonzero(mask)),
    )
    return SegmentationResult(mask=mask, threshold=threshold)
