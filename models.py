"""Data models for dot analysis."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from errors import InvalidConfigError


class AnalysisMode(str, Enum):
    D86 = "d86"
    COUNT = "count"


class ThresholdMode(str, Enum):
    OTSU = "otsu"
    BINARY = "binary"  # fixed threshold at 127
    CUSTOM = "custom"


class Shape(str, Enum):
    CIRCLE = "Circle"
    ELLIPSE = "Ellipse"


@dataclass(frozen=True)
class AnalysisConfig:
    """Parameters of one analysis run.

    hx/hy are the physical width/height of the whole image; energy_ratio is a
    percentage. Ranges are checked on construction.
    """
    hx: float = 1.0
    hy: float = 1.0
    energy_ratio: float = 86.0
    min_area: int = 5
    blur_kernel: int = 0
    threshold_mode: ThresholdMode = ThresholdMode.OTSU
    threshold_value: int = 127  # only used with ThresholdMode.CUSTOM
    invert: bool = False

    def __post_init__(self):
        if not isinstance(self.threshold_mode, ThresholdMode):
            try:
                object.__setattr__(self, "threshold_mode", ThresholdMode(self.threshold_mode))
            except ValueError as exc:
                raise InvalidConfigError(
                    f"Unknown threshold mode: {self.threshold_mode!r}"
                ) from exc
        for name in ("hx", "hy"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0:
                raise InvalidConfigError(f"{name} must be a positive number, got {value}")
        if not math.isfinite(self.energy_ratio) or not (0 < self.energy_ratio <= 100):
            raise InvalidConfigError(
                f"energy_ratio must be in (0, 100], got {self.energy_ratio}"
            )
        if self.min_area < 0:
            raise InvalidConfigError(f"min_area must be >= 0, got {self.min_area}")
        if self.blur_kernel < 0:
            raise InvalidConfigError(f"blur_kernel must be >= 0, got {self.blur_kernel}")
        if not (0 <= self.threshold_value <= 255):
            raise InvalidConfigError(
                f"threshold_value must be in [0, 255], got {self.threshold_value}"
            )


@dataclass
class CovarianceResult:
    """Energy-weighted moments of an intensity grid.

    Offsets and covariance are in physical units; the centroid is in pixels.
    values/dx/dy hold the non-zero pixels for the containment search.
    """
    total_energy: float
    centroid: Tuple[float, float]
    cov_xx: float
    cov_yy: float
    cov_xy: float
    scale: Tuple[float, float]  # (s_x, s_y) physical units per pixel
    values: np.ndarray = field(repr=False)
    dx: np.ndarray = field(repr=False)
    dy: np.ndarray = field(repr=False)


@dataclass(frozen=True)
class EigenResult:
    lambda1: float
    lambda2: float
    theta_rad: float  # principal axis angle in [0, pi)


@dataclass(frozen=True)
class EllipseOverlay:
    """Drawing directive for the D86 overlay, in pixel coordinates."""
    shape: Shape
    center: Tuple[float, float]
    radius_x_px: float
    radius_y_px: float
    angle_rad: float


@dataclass(frozen=True)
class D86Result:
    """Result of a D86 energy-containment analysis."""
    gamma: float
    shape: Shape
    major_axis: float  # physical units
    minor_axis: float
    major_axis_px: float
    minor_axis_px: float
    angle_deg: float
    center_px: Tuple[float, float]
    energy_ratio: float
    total_energy: float
    overlay: EllipseOverlay

    @property
    def diameter(self) -> float:
        """Physical diameter reported when the shape is a circle."""
        return self.major_axis

    @property
    def is_circle(self) -> bool:
        return self.shape is Shape.CIRCLE


@dataclass(frozen=True)
class ConnectedComponent:
    """A labeled foreground region; bbox is (x, y, width, height)."""
    label: int
    area: int
    bbox: Tuple[int, int, int, int]
    centroid: Tuple[float, float] = (0.0, 0.0)


@dataclass(frozen=True)
class CountResult:
    """Result of point counting."""
    count: int
    regions: Tuple[ConnectedComponent, ...]
    threshold_used: Optional[float] = None
