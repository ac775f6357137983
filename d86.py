"""D86 analysis: the ellipse containing a given share of the image energy."""

import logging
import math

import numpy as np

from config import CIRCLE_TOLERANCE
from energy import energy_in_gamma, search_gamma
from image_io import to_grayscale
from models import AnalysisConfig, D86Result, EllipseOverlay, Shape
from moments import compute_moments, eigen_2x2, project_to_principal_axes

logger = logging.getLogger(__name__)


def classify_shape(a_real: float, b_real: float, tolerance: float = CIRCLE_TOLERANCE) -> Shape:
    """Circle when the semi-axes differ by less than `tolerance` relative to the larger."""
    largest = max(a_real, b_real)
    if largest <= 0:
        return Shape.CIRCLE
    if abs(a_real - b_real) / largest < tolerance:
        return Shape.CIRCLE
    return Shape.ELLIPSE


def analyze_d86(image: np.ndarray, config: AnalysisConfig) -> D86Result:
    """Fit the energy-bounded ellipse around the bright pixels of an image.

    Args:
        image: RGB/RGBA or grayscale pixel buffer
        config: Analysis parameters (hx, hy, energy_ratio are used)

    Returns:
        D86Result with physical and pixel axes plus an overlay directive

    Raises:
        EmptyImageError: If the image has no energy
        ConvergenceError: If the containment search fails
    """
    gray = to_grayscale(image)
    moments = compute_moments(gray, config.hx, config.hy)
    eigen = eigen_2x2(moments.cov_xx, moments.cov_xy, moments.cov_yy)
    u2, v2 = project_to_principal_axes(moments, eigen)

    gamma = search_gamma(
        moments.values, u2, v2, eigen.lambda1, eigen.lambda2, config.energy_ratio / 100.0
    )

    s_x, s_y = moments.scale
    a_real = gamma * math.sqrt(eigen.lambda1)
    b_real = gamma * math.sqrt(eigen.lambda2)
    a_px = a_real / s_x
    b_px = b_real / s_y

    shape = classify_shape(a_real, b_real)
    angle_deg = math.degrees(eigen.theta_rad) % 180.0

    if shape is Shape.CIRCLE:
        # Circular in physical units, drawn with per-axis pixel radii.
        overlay = EllipseOverlay(
            shape=shape,
            center=moments.centroid,
            radius_x_px=a_real / s_x,
            radius_y_px=a_real / s_y,
            angle_rad=0.0,
        )
    else:
        overlay = EllipseOverlay(
            shape=shape,
            center=moments.centroid,
            radius_x_px=a_px,
            radius_y_px=b_px,
            angle_rad=eigen.theta_rad,
        )

    result = D86Result(
        gamma=gamma,
        shape=shape,
        major_axis=2.0 * max(a_real, b_real),
        minor_axis=2.0 * min(a_real, b_real),
        major_axis_px=2.0 * max(a_px, b_px),
        minor_axis_px=2.0 * min(a_px, b_px),
        angle_deg=angle_deg,
        center_px=moments.centroid,
        energy_ratio=config.energy_ratio,
        total_energy=moments.total_energy,
        overlay=overlay,
    )
    if logger.isEnabledFor(logging.DEBUG):
        contained = energy_in_gamma(gamma, moments.values, u2, v2, eigen.lambda1, eigen.lambda2)
        logger.debug(
            "D86: shape=%s gamma=%.6f major=%.6f minor=%.6f angle=%.2f contained=%.4f",
            shape.value, gamma, result.major_axis, result.minor_axis, angle_deg,
            contained / moments.total_energy,
        )
    return result
