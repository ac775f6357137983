"""Core processing pipeline functions."""

import logging
from pathlib import Path
from typing import Any, Dict, Tuple, Union

import numpy as np

from counting import count_points
from d86 import analyze_d86
from errors import AnalysisError, InvalidConfigError
from image_io import load_image
from models import AnalysisConfig, AnalysisMode, CountResult, D86Result
from output import result_to_dict

logger = logging.getLogger(__name__)

AnalysisResult = Union[D86Result, CountResult]


def parse_mode(mode: Union[AnalysisMode, str]) -> AnalysisMode:
    try:
        return AnalysisMode(mode)
    except ValueError as exc:
        raise InvalidConfigError(f"Unknown analysis mode: {mode!r}") from exc


def run_analysis(
    image: np.ndarray,
    config: AnalysisConfig,
    mode: Union[AnalysisMode, str],
) -> AnalysisResult:
    """Run the selected pipeline on a pixel buffer.

    Both pipelines are pure functions of (image, config); the image is not
    modified.
    """
    mode = parse_mode(mode)
    if mode is AnalysisMode.D86:
        return analyze_d86(image, config)
    return count_points(image, config)


def process_image(
    path: Path,
    config: AnalysisConfig,
    mode: Union[AnalysisMode, str],
) -> Tuple[np.ndarray, AnalysisResult]:
    """Load an image file and analyze it.

    Returns:
        Tuple of (pixel_buffer, result); the buffer is returned so the caller
        can draw the overlay on a copy of it.
    """
    image = load_image(path)
    logger.info("Analyzing %s (%dx%d) in %s mode", path, image.shape[1], image.shape[0], parse_mode(mode).value)
    return image, run_analysis(image, config, mode)


def analyze_to_record(
    image: np.ndarray,
    config: AnalysisConfig,
    mode: Union[AnalysisMode, str],
) -> Dict[str, Any]:
    """Run an analysis and report failure as data instead of raising.

    Returns:
        {"ok": True, "result": {...}} or {"ok": False, "error": {"kind", "message"}}
    """
    try:
        result = run_analysis(image, config, mode)
    except AnalysisError as exc:
        logger.warning("Analysis failed: %s: %s", exc.kind, exc.message)
        return {"ok": False, "error": exc.to_dict()}
    return {"ok": True, "result": result_to_dict(result)}
