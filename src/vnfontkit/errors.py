"""Error codes and structured error model for the vnfontkit package.

``ErrorCode`` contains every error/warning code a conversion run can
produce.  ``ConversionIssue`` is the structured, per-cell record collected
into a ``ProcessingResult``; ``ConversionError`` is raised for the fatal
conditions that abort a run.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Error codes for workbook conversion.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = error, ``W_`` prefix = warning.
    """

    # Preconditions (fatal)
    E_OPEN_FAILED = "E_OPEN_FAILED"
    E_SHEET_NOT_FOUND = "E_SHEET_NOT_FOUND"

    # Persistence (fatal)
    E_SAVE_FAILED = "E_SAVE_FAILED"

    # Per-cell (recoverable, the cell is skipped)
    E_CELL_ADDRESS = "E_CELL_ADDRESS"
    E_CELL_READ = "E_CELL_READ"
    E_CELL_CONVERT = "E_CELL_CONVERT"
    E_CELL_WRITE = "E_CELL_WRITE"

    # Warnings (non-fatal)
    W_CANCELLED = "W_CANCELLED"
    W_NO_TEXT_CELLS = "W_NO_TEXT_CELLS"


class ConversionIssue(BaseModel):
    """Structured error with sheet and cell location context."""

    code: ErrorCode
    message: str
    sheet_name: str | None = None
    cell_address: str | None = None
    stage: str | None = None
    recoverable: bool = False


class ConversionError(Exception):
    """Raised when a conversion run cannot continue.

    Carries the ``ErrorCode`` so callers can branch on the failure kind
    without parsing the message.
    """

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def to_issue(self) -> ConversionIssue:
        """Return the error as a non-recoverable ``ConversionIssue``."""
        return ConversionIssue(code=self.code, message=self.message)
