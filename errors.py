"""Error types raised by the analysis pipelines."""

from typing import Dict


class AnalysisError(Exception):
    """Base class for failures of a single analysis run.

    Each error carries a short machine-readable ``kind`` and a human-readable
    message that the CLI and the HTTP backend show verbatim.
    """

    kind = "AnalysisError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class EmptyImageError(AnalysisError):
    """Total image energy is zero (all pixels black)."""

    kind = "EmptyImageError"


class InvalidConfigError(AnalysisError):
    """A configuration value is unparseable or out of range."""

    kind = "InvalidConfigError"


class ConvergenceError(AnalysisError):
    """The energy-containment search could not bracket the target energy."""

    kind = "ConvergenceError"


class ImageLoadError(AnalysisError):
    """The input could not be decoded into a pixel buffer."""

    kind = "ImageLoadError"
