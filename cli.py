"""Command-line interface for dot analysis."""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from annotation import annotate
from config import load_analysis_config, coerce_config
from errors import AnalysisError
from models import AnalysisMode, CountResult
from output import format_report, write_json, write_regions_csv
from processing import process_image

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("image", type=Path, help="Input image file.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Optional JSON file with analysis parameters; command-line values override it.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        help="Write an annotated copy of the image to this path.",
    )
    parser.add_argument(
        "--json",
        type=Path,
        dest="json_path",
        help="Write the result as JSON to this path.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dot-analyzer",
        description="Measure the energy-bounded size of a dot (D86) or count dots in an image.",
    )
    subparsers = parser.add_subparsers(dest="mode", required=True)

    d86 = subparsers.add_parser(
        AnalysisMode.D86.value,
        help="Fit the ellipse containing a share of the image energy.",
    )
    _add_common_arguments(d86)
    d86.add_argument("--hx", type=float, help="Physical width of the image (default: 1.0).")
    d86.add_argument("--hy", type=float, help="Physical height of the image (default: 1.0).")
    d86.add_argument(
        "--energy-ratio",
        type=float,
        help="Percentage of total energy the ellipse must contain (default: 86).",
    )

    count = subparsers.add_parser(
        AnalysisMode.COUNT.value,
        help="Count bright blobs of a minimum area.",
    )
    _add_common_arguments(count)
    count.add_argument("--min-area", type=int, help="Minimum blob area in pixels (default: 5).")
    count.add_argument(
        "--blur",
        type=int,
        dest="blur_kernel",
        help="Gaussian blur kernel size; 0 disables blurring, even sizes are rounded up.",
    )
    count.add_argument(
        "--threshold",
        choices=["otsu", "binary", "custom"],
        dest="threshold_mode",
        help="Threshold mode: otsu (automatic), binary (fixed 127) or custom.",
    )
    count.add_argument(
        "--threshold-value",
        type=int,
        help="Threshold (0-255) used with --threshold custom.",
    )
    count.add_argument(
        "--invert",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Invert the mask to count dark dots on a light background (--no-invert overrides the config file).",
    )
    count.add_argument(
        "--csv",
        type=Path,
        dest="csv_path",
        help="Write the table of counted regions to this CSV file.",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def _config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    keys = (
        "hx",
        "hy",
        "energy_ratio",
        "min_area",
        "blur_kernel",
        "threshold_mode",
        "threshold_value",
        "invert",
    )
    return {key: getattr(args, key) for key in keys if getattr(args, key, None) is not None}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)

    try:
        base = load_analysis_config(args.config)
        raw = dataclasses.asdict(base)
        raw.update(_config_overrides(args))
        config = coerce_config(raw)

        image, result = process_image(args.image, config, args.mode)

        print(format_report(result))

        if args.output:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            annotate(image, result).save(args.output)
            logger.info("Annotated image saved to %s", args.output)
        if args.json_path:
            write_json(args.json_path, result)
            logger.info("Result saved to %s", args.json_path)
        if getattr(args, "csv_path", None) and isinstance(result, CountResult):
            write_regions_csv(args.csv_path, result)
            logger.info("Region table saved to %s", args.csv_path)
    except AnalysisError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
