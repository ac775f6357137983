"""Output generation functions for analysis results."""

import csv
import json
from pathlib import Path
from typing import Any, Dict, Union

from models import CountResult, D86Result


def format_d86_report(result: D86Result) -> str:
    """Text report of a D86 analysis, as shown to the user."""
    lines = [f"Analysis Result ({result.energy_ratio:g}% Energy):"]
    if result.is_circle:
        lines.append("Shape: Circle (Approx)")
        lines.append(f"Diameter (Actual Unit): {result.diameter:.6f}")
    else:
        lines.append("Shape: Ellipse")
        lines.append(f"Major Axis (Actual Unit): {result.major_axis:.6f}")
        lines.append(f"Minor Axis (Actual Unit): {result.minor_axis:.6f}")
        lines.append(f"Angle (Degrees): {result.angle_deg:.2f}")
    lines.append(f"Gamma: {result.gamma:.6f}")
    return "\n".join(lines)


def format_count_report(result: CountResult) -> str:
    return f"Count ≈ {result.count}"


def format_report(result: Union[D86Result, CountResult]) -> str:
    if isinstance(result, D86Result):
        return format_d86_report(result)
    return format_count_report(result)


def result_to_dict(result: Union[D86Result, CountResult]) -> Dict[str, Any]:
    """JSON-ready representation of a result."""
    if isinstance(result, D86Result):
        overlay = result.overlay
        return {
            "type": "d86",
            "shape": result.shape.value,
            "gamma": result.gamma,
            "energy_ratio": result.energy_ratio,
            "total_energy": result.total_energy,
            "major_axis": result.major_axis,
            "minor_axis": result.minor_axis,
            "major_axis_px": result.major_axis_px,
            "minor_axis_px": result.minor_axis_px,
            "angle_deg": result.angle_deg,
            "center_px": list(result.center_px),
            "overlay": {
                "shape": overlay.shape.value,
                "center": list(overlay.center),
                "radius_x_px": overlay.radius_x_px,
                "radius_y_px": overlay.radius_y_px,
                "angle_rad": overlay.angle_rad,
            },
        }
    return {
        "type": "count",
        "count": result.count,
        "threshold_used": result.threshold_used,
        "regions": [
            {
                "label": r.label,
                "area": r.area,
                "bbox": list(r.bbox),
                "centroid": list(r.centroid),
            }
            for r in result.regions
        ],
    }


def write_json(output_json: Path, result: Union[D86Result, CountResult]) -> None:
    output_json.parent.mkdir(parents=True, exist_ok=True)
    with output_json.open("w", encoding="utf-8") as f:
        json.dump(result_to_dict(result), f, indent=2)


def write_regions_csv(output_csv: Path, result: CountResult) -> None:
    """Write one row per counted region followed by a summary section."""
    output_csv.parent.mkdir(parents=True, exist_ok=True)
    with output_csv.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(["Label", "Area_px", "X", "Y", "Width", "Height", "Centroid_X", "Centroid_Y"])
        for region in result.regions:
            x, y, w, h = region.bbox
            writer.writerow(
                [
                    region.label,
                    region.area,
                    x,
                    y,
                    w,
                    h,
                    f"{region.centroid[0]:.2f}",
                    f"{region.centroid[1]:.2f}",
                ]
            )

        writer.writerow([])
        writer.writerow(["Statistic", "Value"])
        writer.writerow(["Count", result.count])
        threshold = result.threshold_used
        writer.writerow(["Threshold", f"{threshold:.2f}" if threshold is not None else ""])
