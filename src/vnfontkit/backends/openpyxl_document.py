"""openpyxl-backed ``SpreadsheetDocument``.

Wraps an ``openpyxl.Workbook`` loaded with ``rich_text=True`` so that cells
formatted run by run come back as ``CellRichText`` rather than flattened
strings.  Fonts and colors are translated to and from ``StyledRun`` here
and nowhere else.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from copy import copy

import openpyxl
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont
from openpyxl.styles.colors import Color
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from vnfontkit.models import StyledRun

logger = logging.getLogger("vnfontkit")


class OpenpyxlDocument:
    """A workbook opened through openpyxl.

    Not thread-safe; see ``SpreadsheetDocument``.

    Parameters
    ----------
    workbook:
        A workbook loaded with ``rich_text=True``.
    path:
        Where the workbook came from, used in log messages only.
    """

    def __init__(self, workbook: Workbook, path: str | None = None) -> None:
        self._workbook = workbook
        self._path = path

    @classmethod
    def open(cls, path: str) -> OpenpyxlDocument:
        """Load the workbook at *path* with rich text preserved."""
        workbook = openpyxl.load_workbook(
            path,
            rich_text=True,
            keep_vba=path.lower().endswith(".xlsm"),
        )
        logger.debug(
            "vnfontkit | open | path=%s | sheets=%d", path, len(workbook.worksheets)
        )
        return cls(workbook, path)

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def sheet_names(self) -> list[str]:
        return [ws.title for ws in self._workbook.worksheets]

    def iter_rows(self, sheet_name: str) -> Iterator[list[str]]:
        ws = self._sheet(sheet_name)
        for row in ws.iter_rows():
            yield [_cell_text(cell) for cell in row]

    def get_styled_runs(self, sheet_name: str, cell_address: str) -> list[StyledRun] | None:
        value = self._sheet(sheet_name)[cell_address].value
        if not isinstance(value, CellRichText):
            return None

        runs: list[StyledRun] = []
        for block in value:
            if isinstance(block, TextBlock):
                runs.append(_run_from_inline_font(block.text, block.font))
            else:
                # Bare string segment: no font of its own.
                runs.append(StyledRun(text=block))
        return runs or None

    def get_cell_style_font(self, sheet_name: str, cell_address: str) -> StyledRun | None:
        font = self._sheet(sheet_name)[cell_address].font
        if font is None:
            return None
        return StyledRun(
            text="",
            font_name=font.name or "",
            bold=bool(font.b),
            italic=bool(font.i),
            color=color_to_str(font.color),
            size=font.sz,
            underline=font.u,
        )

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def set_styled_runs(self, sheet_name: str, cell_address: str, runs: list[StyledRun]) -> None:
        cell = self._sheet(sheet_name)[cell_address]

        if len(runs) == 1 and not isinstance(cell.value, CellRichText):
            run = runs[0]
            font = copy(cell.font)
            font.name = run.font_name or None
            font.b = run.bold
            font.i = run.italic
            font.sz = run.size
            font.u = run.underline
            if run.color is not None:
                font.color = color_from_str(run.color)
            cell.value = run.text
            if run.text.startswith("="):
                # openpyxl would otherwise store the text as a formula.
                cell.data_type = "s"
            cell.font = font
            return

        cell.value = CellRichText(
            [TextBlock(_inline_font_from_run(run), run.text) for run in runs]
        )

    def save_as(self, path: str) -> None:
        logger.debug("vnfontkit | save | source=%s | target=%s", self._path, path)
        self._workbook.save(path)

    def close(self) -> None:
        self._workbook.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _sheet(self, sheet_name: str) -> Worksheet:
        ws = self._workbook[sheet_name]
        if not isinstance(ws, Worksheet):
            raise KeyError(f"'{sheet_name}' is not a worksheet")
        return ws


def _cell_text(cell) -> str:
    """Return the text of a string or rich-text cell, else ``""``."""
    value = cell.value
    if isinstance(value, CellRichText):
        return str(value)
    if isinstance(value, str) and cell.data_type != "f":
        return value
    return ""


def _run_from_inline_font(text: str, font: InlineFont | None) -> StyledRun:
    if font is None:
        return StyledRun(text=text)
    return StyledRun(
        text=text,
        font_name=font.rFont or "",
        bold=bool(font.b),
        italic=bool(font.i),
        color=color_to_str(font.color),
        size=font.sz,
        underline=font.u,
    )


def _inline_font_from_run(run: StyledRun) -> InlineFont:
    return InlineFont(
        rFont=run.font_name or None,
        b=run.bold or None,
        i=run.italic or None,
        color=color_from_str(run.color),
        sz=run.size,
        u=run.underline,
    )


def color_to_str(color: Color | None) -> str | None:
    """Encode an openpyxl ``Color`` as the opaque string carried by runs.

    Returns ``"FFRRGGBB"`` for RGB, ``"theme:<n>[:<tint>]"`` for theme
    colors, ``"indexed:<n>"`` for palette colors and ``None`` for automatic
    or missing colors.
    """
    if color is None:
        return None
    if color.type == "rgb":
        return color.rgb
    if color.type == "theme":
        if color.tint:
            return f"theme:{color.theme}:{color.tint}"
        return f"theme:{color.theme}"
    if color.type == "indexed":
        return f"indexed:{color.indexed}"
    return None


def color_from_str(value: str | None) -> Color | None:
    """Inverse of ``color_to_str``."""
    if not value:
        return None
    kind, _, rest = value.partition(":")
    if kind == "theme":
        theme, _, tint = rest.partition(":")
        return Color(theme=int(theme), tint=float(tint) if tint else 0.0)
    if kind == "indexed":
        return Color(indexed=int(rest))
    return Color(rgb=value)
