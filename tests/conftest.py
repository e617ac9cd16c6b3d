"""Shared test fixtures for vnfontkit tests."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest
from openpyxl import Workbook
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont
from openpyxl.styles import Font
from openpyxl.utils.cell import column_index_from_string, coordinate_from_string, get_column_letter

from vnfontkit.config import ConverterConfig
from vnfontkit.models import StyledRun

# ---------------------------------------------------------------------------
# In-memory document
# ---------------------------------------------------------------------------


class InMemoryDocument:
    """``SpreadsheetDocument`` over plain dicts.

    A cell value is a ``str`` (plain text), a ``list[StyledRun]`` (rich
    text) or anything else (a non-text value such as a number).  Every call
    is logged in ``events`` and overlapping calls from two threads set
    ``concurrent_access``.
    """

    def __init__(
        self,
        sheets: dict[str, dict[str, object]],
        fonts: dict[tuple[str, str], StyledRun] | None = None,
    ) -> None:
        self.sheets = {name: dict(cells) for name, cells in sheets.items()}
        self.fonts = dict(fonts or {})
        self.events: list[tuple[str, str, str]] = []
        self.written: dict[tuple[str, str], list[StyledRun]] = {}
        self.saved_to: list[str] = []
        self.closed = False
        self.concurrent_access = False
        self.fail_rows: set[str] = set()
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()
        self.fail_save = False
        self._busy = threading.Lock()

    @contextmanager
    def _access(self, op: str, sheet: str, address: str = "") -> Iterator[None]:
        if not self._busy.acquire(blocking=False):
            self.concurrent_access = True
            self._busy.acquire()
        try:
            self.events.append((op, sheet, address))
            yield
        finally:
            self._busy.release()

    # -- reading -------------------------------------------------------

    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        # map() rather than a generator: a row that raises does not end it.
        cells = self.sheets[sheet_name]
        coords = [coordinate_from_string(address) for address in cells]
        max_row = max((row for _, row in coords), default=0)
        max_col = max((column_index_from_string(col) for col, _ in coords), default=0)
        return map(lambda row: self._read_row(sheet_name, row, max_col), range(1, max_row + 1))

    def _read_row(self, sheet_name: str, row: int, max_col: int) -> list[str]:
        with self._access("read", sheet_name, f"row{row}"):
            if f"{sheet_name}!{row}" in self.fail_rows:
                raise RuntimeError(f"unreadable row {row}")
            cells = self.sheets[sheet_name]
            values = []
            for col in range(1, max_col + 1):
                value = cells.get(f"{get_column_letter(col)}{row}")
                if isinstance(value, list):
                    values.append("".join(run.text for run in value))
                elif isinstance(value, str):
                    values.append(value)
                else:
                    values.append("")
            return values

    def get_styled_runs(self, sheet_name: str, cell_address: str) -> list[StyledRun] | None:
        with self._access("read", sheet_name, cell_address):
            if f"{sheet_name}!{cell_address}" in self.fail_reads:
                raise RuntimeError(f"unreadable cell {cell_address}")
            value = self.sheets[sheet_name].get(cell_address)
            return list(value) if isinstance(value, list) else None

    def get_cell_style_font(self, sheet_name: str, cell_address: str) -> StyledRun | None:
        with self._access("read", sheet_name, cell_address):
            return self.fonts.get((sheet_name, cell_address))

    # -- writing -------------------------------------------------------

    def set_styled_runs(self, sheet_name: str, cell_address: str, runs: list[StyledRun]) -> None:
        with self._access("write", sheet_name, cell_address):
            if f"{sheet_name}!{cell_address}" in self.fail_writes:
                raise RuntimeError(f"read-only cell {cell_address}")
            cells = self.sheets[sheet_name]
            self.written[(sheet_name, cell_address)] = list(runs)
            if len(runs) == 1 and not isinstance(cells.get(cell_address), list):
                cells[cell_address] = runs[0].text
                self.fonts[(sheet_name, cell_address)] = runs[0].model_copy(update={"text": ""})
            else:
                cells[cell_address] = list(runs)

    def save_as(self, path: str) -> None:
        if self.fail_save:
            raise OSError("disk full")
        self.saved_to.append(path)

    def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def default_config() -> ConverterConfig:
    """Return a default ConverterConfig."""
    return ConverterConfig()


@pytest.fixture
def small_pool_config() -> ConverterConfig:
    """Config with tiny queues so back-pressure is exercised."""
    return ConverterConfig(worker_count=3, job_queue_size=2, result_queue_size=2)


@pytest.fixture
def legacy_document() -> InMemoryDocument:
    """Two sheets mixing VNI, TCVN3, Unicode, rich text and non-text cells."""
    sheets = {
        "Data": {
            "A1": "ViÖt Nam",
            "B1": "Cöng ty",
            "C1": "Plain ASCII",
            "A2": [
                StyledRun(text="Hello ", font_name="Arial"),
                StyledRun(text="ViÖt", font_name="VNI-Times", bold=True, color="FFFF0000"),
            ],
            "B2": 42,
            "C2": "   ",
        },
        "Notes": {
            "A1": "Tröôøng Ñaïi hoïc",
        },
    }
    fonts = {
        ("Data", "A1"): StyledRun(text="", font_name="VNI-Times", size=12.0),
        ("Data", "B1"): StyledRun(text="", font_name=".VnTime", italic=True),
        ("Data", "C1"): StyledRun(text="", font_name="Calibri"),
        ("Data", "A2"): StyledRun(text="", font_name="Calibri"),
        ("Notes", "A1"): StyledRun(text="", font_name="VNI-Arial"),
    }
    return InMemoryDocument(sheets, fonts)


@pytest.fixture
def legacy_xlsx(tmp_path: Path) -> str:
    """Write a real .xlsx with VNI, TCVN3, rich-text and non-text cells."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"

    ws["A1"] = "ViÖt Nam"
    ws["A1"].font = Font(name="VNI-Times", size=12)

    ws["A2"] = CellRichText(
        [
            TextBlock(InlineFont(rFont="Arial"), "Hello "),
            TextBlock(InlineFont(rFont="VNI-Times", b=True, color="FFFF0000"), "ViÖt"),
        ]
    )

    ws["A3"] = "Cöng ty"
    ws["A3"].font = Font(name=".VnTime")

    ws["B1"] = 42
    ws["B2"] = "=SUM(B1:B1)"
    ws["B3"] = "Plain ASCII"
    ws["B3"].font = Font(name="Calibri")

    notes = wb.create_sheet("Notes")
    notes["A1"] = "Tröôøng Ñaïi hoïc"
    notes["A1"].font = Font(name="VNI-Arial")

    path = tmp_path / "legacy.xlsx"
    wb.save(path)
    return str(path)
