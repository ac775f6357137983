"""Configuration and constants for dot analysis."""

import json
import logging
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from errors import InvalidConfigError
from models import AnalysisConfig, ThresholdMode

logger = logging.getLogger(__name__)

SUPPORTED_EXTS = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff")

# Fixed policy values.
CIRCLE_TOLERANCE = 0.05  # relative axis difference below which the shape is a circle
BINARY_THRESHOLD = 127
GAMMA_SAFETY_BOUND = 1e6
BISECTION_ITERATIONS = 60
AXIS_ALIGNED_EPS = 1e-9
DEGENERATE_AXIS_EPS = 1e-12  # eigenvalue or offset this small relative to the spread counts as zero

DEFAULT_CONFIG: Dict[str, Any] = {
    "hx": 1.0,
    "hy": 1.0,
    "energy_ratio": 86.0,
    "min_area": 5,
    "blur_kernel": 0,
    "threshold_mode": ThresholdMode.OTSU.value,
    "threshold_value": BINARY_THRESHOLD,
    "invert": False,
}


def _parse_float(value: Any, default: float) -> float:
    """Parse a float the way the form fields did: unparseable or zero -> default."""
    if isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(parsed) or parsed == 0:
        return default
    return parsed


def _parse_int(value: Any, default: int) -> int:
    """Parse an integer, truncating fractional input; unparseable -> default."""
    if isinstance(value, bool):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(parsed):
        return default
    return int(math.floor(parsed)) if parsed >= 0 else int(math.ceil(parsed))


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def coerce_config(raw: Optional[Mapping[str, Any]] = None) -> AnalysisConfig:
    """Build an AnalysisConfig from loosely typed input (form fields, JSON, CLI).

    Missing or unparseable entries fall back to DEFAULT_CONFIG. Zero physical
    sizes and a zero energy ratio also fall back to their defaults. Values that
    parse but are out of range are rejected.

    Args:
        raw: Mapping of config keys to values (strings are accepted)

    Returns:
        Validated AnalysisConfig

    Raises:
        InvalidConfigError: If a parsed value is out of range or the threshold
            mode is unknown
    """
    raw = dict(raw or {})
    unknown = set(raw) - set(DEFAULT_CONFIG)
    if unknown:
        logger.debug("Ignoring unknown config keys: %s", sorted(unknown))

    mode = raw.get("threshold_mode", DEFAULT_CONFIG["threshold_mode"])
    if mode is None or (isinstance(mode, str) and not mode.strip()):
        mode = DEFAULT_CONFIG["threshold_mode"]
    if isinstance(mode, str):
        mode = mode.strip().lower()

    return AnalysisConfig(
        hx=_parse_float(raw.get("hx"), DEFAULT_CONFIG["hx"]),
        hy=_parse_float(raw.get("hy"), DEFAULT_CONFIG["hy"]),
        energy_ratio=_parse_float(raw.get("energy_ratio"), DEFAULT_CONFIG["energy_ratio"]),
        min_area=_parse_int(raw.get("min_area"), DEFAULT_CONFIG["min_area"]),
        blur_kernel=_parse_int(raw.get("blur_kernel"), DEFAULT_CONFIG["blur_kernel"]),
        threshold_mode=mode,
        threshold_value=_parse_int(raw.get("threshold_value"), DEFAULT_CONFIG["threshold_value"]),
        invert=_parse_bool(raw.get("invert", DEFAULT_CONFIG["invert"])),
    )


def load_analysis_config(config_file: Optional[Path] = None) -> AnalysisConfig:
    """Load analysis parameters from a JSON file merged over the defaults.

    Args:
        config_file: Optional path to a JSON object with config keys

    Returns:
        AnalysisConfig (defaults when no file is given or it does not exist)
    """
    if config_file is None or not config_file.exists():
        return coerce_config(DEFAULT_CONFIG)

    try:
        with config_file.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise InvalidConfigError(f"Config file is not valid JSON: {config_file} ({exc})") from exc
    if not isinstance(data, dict):
        raise InvalidConfigError(f"Config file must contain a JSON object: {config_file}")

    merged = DEFAULT_CONFIG.copy()
    merged.update(data)
    return coerce_config(merged)


def save_analysis_config(config: AnalysisConfig, config_file: Path) -> None:
    """Persist a config so a run can be repeated."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    data = {
        "hx": config.hx,
        "hy": config.hy,
        "energy_ratio": config.energy_ratio,
        "min_area": config.min_area,
        "blur_kernel": config.blur_kernel,
        "threshold_mode": config.threshold_mode.value,
        "threshold_value": config.threshold_value,
        "invert": config.invert,
    }
    with config_file.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
