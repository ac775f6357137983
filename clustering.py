"""Connected-component labeling of binary masks."""

import logging
from typing import List

import cv2
import numpy as np

from models import ConnectedComponent

logger = logging.getLogger(__name__)


def label_components(mask: np.ndarray) -> List[ConnectedComponent]:
    """Label 8-connected foreground regions of a binary mask.

    Args:
        mask: Binary mask (uint8, non-zero is foreground)

    Returns:
        List of ConnectedComponent, one per foreground region. The background
        (label 0) is never included. Label numbers carry no meaning beyond
        identifying a region within this call.
    """
    if mask.size == 0:
        return []

    mask = np.ascontiguousarray(mask)
    if mask.dtype != np.uint8:
        mask = (mask != 0).astype(np.uint8) * 255

    num_labels, _, stats, centroids = cv2.connectedComponentsWithStats(mask, connectivity=8)

    components: List[ConnectedComponent] = []
    for i in range(1, num_labels):  # Skip label 0 (background)
        x = int(stats[i, cv2.CC_STAT_LEFT])
        y = int(stats[i, cv2.CC_STAT_TOP])
        w = int(stats[i, cv2.CC_STAT_WIDTH])
        h = int(stats[i, cv2.CC_STAT_HEIGHT])
        components.append(
            ConnectedComponent(
                label=i,
                area=int(stats[i, cv2.CC_STAT_AREA]),
                bbox=(x, y, w, h),
                centroid=(float(centroids[i, 0]), float(centroids[i, 1])),
            )
        )

    logger.debug("Labeled %d component(s)", len(components))
    return components
