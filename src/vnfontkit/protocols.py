"""Document protocols for the vnfontkit pipeline.

Defines the structural-subtyping interface a spreadsheet backend must
satisfy.  The protocol is ``@runtime_checkable`` so callers can optionally
verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from vnfontkit.models import StyledRun


@runtime_checkable
class SpreadsheetDocument(Protocol):
    """Interface for an open workbook (e.g. openpyxl).

    Implementations are not expected to be thread-safe.  The processor
    guarantees that only one thread touches a document at a time.
    """

    def sheet_names(self) -> list[str]:
        """Return worksheet names in workbook order."""
        ...

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        """Yield each row as cell texts in column order, starting at A1.

        Cells that do not hold text (numbers, dates, formulas, blanks)
        yield ``""``.
        """
        ...

    def get_styled_runs(self, sheet_name: str, cell_address: str) -> list[StyledRun] | None:
        """Return the native rich-text runs of a cell, or None for plain cells."""
        ...

    def get_cell_style_font(self, sheet_name: str, cell_address: str) -> StyledRun | None:
        """Return the cell's style font as a run with empty text."""
        ...

    def set_styled_runs(self, sheet_name: str, cell_address: str, runs: list[StyledRun]) -> None:
        """Replace the cell's content with *runs*."""
        ...

    def save_as(self, path: str) -> None:
        """Persist the workbook to *path*."""
        ...

    def close(self) -> None:
        """Release any resources held by the document."""
        ...


DocumentOpener = Callable[[str], SpreadsheetDocument]
"""Callable that opens the workbook at a path."""
