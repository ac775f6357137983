"""Overlay rendering for analysis results."""

import math
from typing import List, Tuple

import numpy as np
from PIL import Image, ImageDraw

from image_io import to_rgb_image
from models import CountResult, D86Result, EllipseOverlay

CENTER_COLOR = (0, 255, 0)
OUTLINE_COLOR = (255, 0, 0)
LINE_WIDTH = 2
CENTER_RADIUS = 3


def ellipse_points(overlay: EllipseOverlay, segments: int = 180) -> List[Tuple[float, float]]:
    """Polygon approximation of a rotated ellipse in image coordinates."""
    cx, cy = overlay.center
    cos_a = math.cos(overlay.angle_rad)
    sin_a = math.sin(overlay.angle_rad)
    points = []
    for i in range(segments):
        t = 2.0 * math.pi * i / segments
        ex = overlay.radius_x_px * math.cos(t)
        ey = overlay.radius_y_px * math.sin(t)
        points.append((cx + ex * cos_a - ey * sin_a, cy + ex * sin_a + ey * cos_a))
    return points


def annotate_d86(image: np.ndarray, result: D86Result) -> Image.Image:
    """Draw the centroid and the D86 ellipse on a copy of the image."""
    annotated = to_rgb_image(image)
    draw = ImageDraw.Draw(annotated)

    cx, cy = result.center_px
    draw.ellipse(
        [cx - CENTER_RADIUS, cy - CENTER_RADIUS, cx + CENTER_RADIUS, cy + CENTER_RADIUS],
        fill=CENTER_COLOR,
    )
    points = ellipse_points(result.overlay)
    draw.line(points + points[:1], fill=OUTLINE_COLOR, width=LINE_WIDTH)
    return annotated


def annotate_count(image: np.ndarray, result: CountResult) -> Image.Image:
    """Draw a bounding box around every counted region on a copy of the image."""
    annotated = to_rgb_image(image)
    draw = ImageDraw.Draw(annotated)
    for region in result.regions:
        x, y, w, h = region.bbox
        draw.rectangle([x, y, x + w, y + h], outline=OUTLINE_COLOR, width=LINE_WIDTH)
    return annotated


def annotate(image: np.ndarray, result) -> Image.Image:
    if isinstance(result, D86Result):
        return annotate_d86(image, result)
    return annotate_count(image, result)
