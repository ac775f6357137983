"""Point counting: segment, label, and filter blobs by area."""

import logging
from typing import Iterable, Optional

import numpy as np

from clustering import label_components
from detection import segment
from models import AnalysisConfig, ConnectedComponent, CountResult

logger = logging.getLogger(__name__)


def filter_components(
    components: Iterable[ConnectedComponent],
    min_area: int,
    threshold_used: Optional[float] = None,
) -> CountResult:
    """Keep components with area >= min_area, preserving their order."""
    kept = tuple(c for c in components if c.area >= min_area)
    return CountResult(count=len(kept), regions=kept, threshold_used=threshold_used)


def count_points(image: np.ndarray, config: AnalysisConfig) -> CountResult:
    """Count bright (or, inverted, dark) blobs of at least config.min_area pixels."""
    segmentation = segment(image, config)
    components = label_components(segmentation.mask)
    result = filter_components(components, config.min_area, segmentation.threshold)
    logger.debug(
        "Counted %d of %d component(s) with min_area=%d",
        result.count, len(components), config.min_area,
    )
    return result
