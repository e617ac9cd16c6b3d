"""Pydantic models and enums for the vnfontkit pipeline.

These are the data structures passed between the dispatcher, the worker
pool and the collector.  Every model here is treated as immutable once
built: transformations produce copies via ``model_copy``.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel

from vnfontkit.errors import ConversionIssue

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Encoding(str, Enum):
    """Legacy encoding of a text run.

    ``VNI``, ``TCVN3`` and ``UNKNOWN`` are detection results.  ``AUTO`` is
    only meaningful as a configuration value and means "detect per run".
    """

    VNI = "vni"
    TCVN3 = "tcvn3"
    UNKNOWN = "unknown"
    AUTO = "auto"


# ---------------------------------------------------------------------------
# Cell content
# ---------------------------------------------------------------------------


class StyledRun(BaseModel):
    """A contiguous span of cell text sharing one font.

    ``color`` is an opaque string owned by the document backend
    (``"FFRRGGBB"``, ``"theme:<n>[:<tint>]"`` or ``"indexed:<n>"``).
    A run with empty ``text`` is used to describe a cell's style font.
    """

    text: str
    font_name: str = ""
    bold: bool = False
    italic: bool = False
    color: str | None = None
    size: float | None = None
    underline: str | None = None


class CellJob(BaseModel):
    """Unit of work handed from the dispatcher to one worker."""

    sheet_name: str
    cell_address: str
    runs: list[StyledRun]


class ConversionResult(BaseModel):
    """Outcome of converting one ``CellJob``.

    Either ``new_runs`` is populated (one per input run, same order) or
    ``error`` describes why the cell could not be converted.
    """

    job: CellJob
    new_runs: list[StyledRun] = []
    encodings: list[Encoding] = []
    error: ConversionIssue | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def converted(self) -> bool:
        """True when at least one run was decoded from a legacy encoding."""
        return any(enc in (Encoding.VNI, Encoding.TCVN3) for enc in self.encodings)


# ---------------------------------------------------------------------------
# Run summary
# ---------------------------------------------------------------------------


class ProcessingResult(BaseModel):
    """Final result returned after converting a workbook."""

    input_path: str
    output_path: str
    sheets: list[str]

    cells_dispatched: int = 0
    cells_processed: int = 0
    cells_converted: int = 0
    cells_failed: int = 0
    cancelled: bool = False

    errors: list[str] = []
    warnings: list[str] = []
    error_details: list[ConversionIssue] = []

    processing_time_seconds: float = 0.0
