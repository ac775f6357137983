from pydantic import BaseModel
from typing import List, Optional, Dict, Any

from models import AnalysisMode


class AnalysisParams(BaseModel):
    # Form fields arrive as strings; parsing and defaulting happen in coerce_config.
    hx: Optional[str] = None
    hy: Optional[str] = None
    energy_ratio: Optional[str] = None
    min_area: Optional[str] = None
    blur_kernel: Optional[str] = None
    threshold_mode: Optional[str] = None
    threshold_value: Optional[str] = None
    invert: Optional[str] = None


class ErrorDetail(BaseModel):
    kind: str
    message: str


class ErrorResponse(BaseModel):
    error: ErrorDetail


class AnalysisResponse(BaseModel):
    mode: AnalysisMode
    report: str
    result: Dict[str, Any]
    image: Optional[str] = None  # annotated PNG as a data URL


class HealthResponse(BaseModel):
    status: str
    message: str
    modes: List[AnalysisMode] = [AnalysisMode.D86, AnalysisMode.COUNT]
