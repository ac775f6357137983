"""Energy-containment search for the D86 ellipse scale factor."""

import logging

import numpy as np

from config import BISECTION_ITERATIONS, DEGENERATE_AXIS_EPS, GAMMA_SAFETY_BOUND
from errors import ConvergenceError, InvalidConfigError

logger = logging.getLogger(__name__)


def _axis_term(d2: np.ndarray, lam: float, lam_ref: float, offset_tol: float) -> np.ndarray:
    if lam > DEGENERATE_AXIS_EPS * lam_ref:
        return d2 / lam
    # Zero-variance axis: offsets at rounding level lie on it, anything else is outside.
    return np.where(d2 <= offset_tol, 0.0, np.inf)


def normalized_radius_sq(
    u2: np.ndarray,
    v2: np.ndarray,
    lambda1: float,
    lambda2: float,
) -> np.ndarray:
    """Squared Mahalanobis-style radius u^2/lambda1 + v^2/lambda2 of each pixel.

    A pixel lies inside the ellipse scaled by gamma exactly when this value
    is <= gamma^2. An eigenvalue that is zero relative to the larger one marks
    a zero-variance axis: offsets along it that are rounding noise next to the
    overall spread contribute 0, any other offset puts the pixel at infinity.
    If both eigenvalues are zero all energy sits on the centroid.
    """
    u2 = np.asarray(u2, dtype=np.float64)
    v2 = np.asarray(v2, dtype=np.float64)
    lam_ref = max(lambda1, lambda2)
    if lam_ref <= 0:
        return np.zeros_like(u2)

    offset_tol = DEGENERATE_AXIS_EPS * float((u2 + v2).max()) if u2.size else 0.0
    return _axis_term(u2, lambda1, lam_ref, offset_tol) + _axis_term(v2, lambda2, lam_ref, offset_tol)


def contained_energy(gamma: float, values: np.ndarray, r2: np.ndarray) -> float:
    """Energy of the pixels whose normalized radius r2 is within gamma^2."""
    return float(values[r2 <= gamma * gamma].sum())


def energy_in_gamma(
    gamma: float,
    values: np.ndarray,
    u2: np.ndarray,
    v2: np.ndarray,
    lambda1: float,
    lambda2: float,
) -> float:
    """Energy of the pixels inside the ellipse u^2/(g^2 l1) + v^2/(g^2 l2) <= 1."""
    r2 = normalized_radius_sq(u2, v2, lambda1, lambda2)
    return contained_energy(gamma, np.asarray(values, dtype=np.float64), r2)


def search_gamma(
    values: np.ndarray,
    u2: np.ndarray,
    v2: np.ndarray,
    lambda1: float,
    lambda2: float,
    ratio: float,
) -> float:
    """Find the smallest gamma whose ellipse holds `ratio` of the total energy.

    The upper bound starts at 1 and doubles until it contains the target
    energy; a fixed number of bisection steps then narrows [0, gamma_hi].

    Args:
        values: Pixel energies
        u2, v2: Squared principal-axis offsets of each pixel
        lambda1, lambda2: Eigenvalues of the covariance matrix
        ratio: Target energy fraction in (0, 1]

    Returns:
        gamma (upper end of the final bisection interval, always > 0)

    Raises:
        InvalidConfigError: If ratio is outside (0, 1]
        ConvergenceError: If the target cannot be bracketed below the safety bound
    """
    if not (0 < ratio <= 1):
        raise InvalidConfigError(f"Energy fraction must be in (0, 1], got {ratio}")

    values = np.asarray(values, dtype=np.float64)
    r2 = normalized_radius_sq(u2, v2, lambda1, lambda2)
    threshold = ratio * float(values.sum())

    gamma_lo = 0.0
    gamma_hi = 1.0
    while contained_energy(gamma_hi, values, r2) < threshold:
        gamma_hi *= 2.0
        if gamma_hi > GAMMA_SAFETY_BOUND:
            raise ConvergenceError(
                f"Could not contain {ratio * 100:.2f}% of the energy "
                f"within gamma <= {GAMMA_SAFETY_BOUND:g}."
            )

    for _ in range(BISECTION_ITERATIONS):
        gamma_mid = (gamma_lo + gamma_hi) / 2.0
        if contained_energy(gamma_mid, values, r2) >= threshold:
            gamma_hi = gamma_mid
        else:
            gamma_lo = gamma_mid

    logger.debug("Gamma search: ratio=%.4f threshold=%.3f gamma=%.9f", ratio, threshold, gamma_hi)
    return gamma_hi
