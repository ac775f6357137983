"""Energy-weighted moments and the 2x2 eigen decomposition behind D86."""

import logging
import math
from typing import Tuple

import numpy as np

from config import AXIS_ALIGNED_EPS
from errors import EmptyImageError
from models import CovarianceResult, EigenResult

logger = logging.getLogger(__name__)


def compute_moments(gray: np.ndarray, hx: float, hy: float) -> CovarianceResult:
    """Compute total energy, weighted centroid and covariance of an intensity grid.

    Pixel brightness is treated as energy density. Only pixels with a
    positive value carry mass. Offsets from the centroid are scaled to
    physical units with s_x = hx / width and s_y = hy / height before the
    second moments are taken.

    Args:
        gray: 2D intensity grid
        hx: Physical width of the whole image
        hy: Physical height of the whole image

    Returns:
        CovarianceResult with the non-zero pixels retained

    Raises:
        EmptyImageError: If total energy is not positive
    """
    gray = np.asarray(gray, dtype=np.float64)
    height, width = gray.shape

    ys, xs = np.nonzero(gray > 0)
    values = gray[ys, xs]
    total_energy = float(values.sum())
    if total_energy <= 0:
        raise EmptyImageError("Total energy is zero. Please provide a non-black image.")

    cx = float(values @ xs) / total_energy
    cy = float(values @ ys) / total_energy

    s_x = hx / width
    s_y = hy / height
    dx = (xs - cx) * s_x
    dy = (ys - cy) * s_y

    cov_xx = float(values @ (dx * dx)) / total_energy
    cov_yy = float(values @ (dy * dy)) / total_energy
    cov_xy = float(values @ (dx * dy)) / total_energy

    logger.debug(
        "Moments: E=%.3f centroid=(%.3f, %.3f) cov=(%.6g, %.6g, %.6g) from %d pixels",
        total_energy, cx, cy, cov_xx, cov_yy, cov_xy, values.size,
    )
    return CovarianceResult(
        total_energy=total_energy,
        centroid=(cx, cy),
        cov_xx=cov_xx,
        cov_yy=cov_yy,
        cov_xy=cov_xy,
        scale=(s_x, s_y),
        values=values,
        dx=dx,
        dy=dy,
    )


def eigen_2x2(a: float, b: float, c: float) -> EigenResult:
    """Closed-form eigen decomposition of the symmetric matrix [[a, b], [b, c]].

    Returns the larger eigenvalue first and the angle of its eigenvector
    normalized into [0, pi).
    """
    trace = a + c
    det = a * c - b * b
    # Non-negative for symmetric input up to rounding.
    delta = math.sqrt(max(trace * trace - 4.0 * det, 0.0))
    lambda1 = (trace + delta) / 2.0
    lambda2 = max((trace - delta) / 2.0, 0.0)

    if abs(b) > AXIS_ALIGNED_EPS:
        # Eigenvector of lambda1 is (b, lambda1 - a).
        theta = math.atan2(lambda1 - a, b)
    else:
        theta = 0.0 if a >= c else math.pi / 2.0
    theta = theta % math.pi

    return EigenResult(lambda1=lambda1, lambda2=lambda2, theta_rad=theta)


def project_to_principal_axes(
    moments: CovarianceResult,
    eigen: EigenResult,
) -> Tuple[np.ndarray, np.ndarray]:
    """Rotate pixel offsets into the principal-axis frame.

    Returns:
        Tuple of (u^2, v^2) arrays, aligned with moments.values
    """
    cos_t = math.cos(eigen.theta_rad)
    sin_t = math.sin(eigen.theta_rad)
    u = moments.dx * cos_t + moments.dy * sin_t
    v = -moments.dx * sin_t + moments.dy * cos_t
    return u * u, v * v
