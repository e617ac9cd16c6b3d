"""Tests for the openpyxl document backend and end-to-end conversion."""

from __future__ import annotations

import os
from pathlib import Path

import openpyxl
import pytest
from openpyxl.cell.rich_text import CellRichText
from openpyxl.styles.colors import Color

from tests.conftest import InMemoryDocument
from vnfontkit.backends import OpenpyxlDocument
from vnfontkit.backends.openpyxl_document import color_from_str, color_to_str
from vnfontkit.errors import ConversionError, ErrorCode
from vnfontkit.models import StyledRun
from vnfontkit.processor import WorkbookProcessor, convert_workbook
from vnfontkit.protocols import SpreadsheetDocument


def _reload(path: str):
    return openpyxl.load_workbook(path, rich_text=True)


# ---------------------------------------------------------------------------
# Protocol conformance
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestProtocolConformance:
    def test_openpyxl_document(self, legacy_xlsx: str) -> None:
        assert isinstance(OpenpyxlDocument.open(legacy_xlsx), SpreadsheetDocument)

    def test_in_memory_document(self) -> None:
        assert isinstance(InMemoryDocument({}), SpreadsheetDocument)

    def test_unrelated_object(self) -> None:
        assert not isinstance(object(), SpreadsheetDocument)


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestReading:
    def test_sheet_names(self, legacy_xlsx: str) -> None:
        assert OpenpyxlDocument.open(legacy_xlsx).sheet_names() == ["Sheet1", "Notes"]

    def test_iter_rows_yields_only_text(self, legacy_xlsx: str) -> None:
        rows = list(OpenpyxlDocument.open(legacy_xlsx).iter_rows("Sheet1"))
        assert rows == [
            ["ViÖt Nam", ""],
            ["Hello ViÖt", ""],
            ["Cöng ty", "Plain ASCII"],
        ]

    def test_plain_cell_has_no_runs(self, legacy_xlsx: str) -> None:
        assert OpenpyxlDocument.open(legacy_xlsx).get_styled_runs("Sheet1", "A1") is None

    def test_rich_cell_runs(self, legacy_xlsx: str) -> None:
        runs = OpenpyxlDocument.open(legacy_xlsx).get_styled_runs("Sheet1", "A2")
        assert [r.text for r in runs] == ["Hello ", "ViÖt"]
        assert [r.font_name for r in runs] == ["Arial", "VNI-Times"]
        assert runs[0].bold is False
        assert runs[1].bold is True
        assert runs[1].color == "FFFF0000"

    def test_cell_style_font(self, legacy_xlsx: str) -> None:
        font = OpenpyxlDocument.open(legacy_xlsx).get_cell_style_font("Sheet1", "A1")
        assert font.text == ""
        assert font.font_name == "VNI-Times"
        assert font.size == 12.0

    def test_unknown_sheet(self, legacy_xlsx: str) -> None:
        with pytest.raises(KeyError):
            list(OpenpyxlDocument.open(legacy_xlsx).iter_rows("Missing"))


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


@pytest.mark.unit
class TestWriting:
    def test_plain_write_updates_font(self, legacy_xlsx: str, tmp_path: Path) -> None:
        doc = OpenpyxlDocument.open(legacy_xlsx)
        doc.set_styled_runs(
            "Sheet1", "A1", [StyledRun(text="Việt Nam", font_name="Times New Roman", size=12.0)]
        )
        target = str(tmp_path / "out.xlsx")
        doc.save_as(target)

        cell = _reload(target)["Sheet1"]["A1"]
        assert cell.value == "Việt Nam"
        assert cell.font.name == "Times New Roman"
        assert cell.font.sz == 12.0

    def test_rich_write_round_trip(self, legacy_xlsx: str, tmp_path: Path) -> None:
        doc = OpenpyxlDocument.open(legacy_xlsx)
        runs = [
            StyledRun(text="Hello ", font_name="Arial"),
            StyledRun(text="Việt", font_name="Times New Roman", bold=True, italic=True, color="FF00FF00"),
        ]
        doc.set_styled_runs("Sheet1", "A2", runs)
        target = str(tmp_path / "out.xlsx")
        doc.save_as(target)

        reopened = OpenpyxlDocument(_reload(target))
        read_back = reopened.get_styled_runs("Sheet1", "A2")
        assert [r.text for r in read_back] == ["Hello ", "Việt"]
        assert read_back[1].font_name == "Times New Roman"
        assert (read_back[1].bold, read_back[1].italic) == (True, True)
        assert read_back[1].color == "FF00FF00"

    def test_text_starting_with_equals_stays_text(self, legacy_xlsx: str) -> None:
        doc = OpenpyxlDocument.open(legacy_xlsx)
        doc.set_styled_runs("Sheet1", "B3", [StyledRun(text="=not a formula", font_name="Arial")])
        assert list(doc.iter_rows("Sheet1"))[2][1] == "=not a formula"


@pytest.mark.unit
class TestColorEncoding:
    def test_rgb(self) -> None:
        assert color_to_str(Color(rgb="FF112233")) == "FF112233"

    def test_theme(self) -> None:
        assert color_to_str(Color(theme=1)) == "theme:1"
        assert color_to_str(Color(theme=4, tint=0.5)) == "theme:4:0.5"

    def test_indexed(self) -> None:
        assert color_to_str(Color(indexed=10)) == "indexed:10"

    def test_none(self) -> None:
        assert color_to_str(None) is None
        assert color_from_str(None) is None
        assert color_from_str("") is None

    def test_theme_round_trip(self) -> None:
        color = color_from_str("theme:4:0.5")
        assert (color.type, color.theme, color.tint) == ("theme", 4, 0.5)

    def test_indexed_round_trip(self) -> None:
        color = color_from_str("indexed:10")
        assert (color.type, color.indexed) == ("indexed", 10)


# ---------------------------------------------------------------------------
# End to end
# ---------------------------------------------------------------------------


@pytest.mark.integration
class TestConvertWorkbook:
    def test_converted_output(self, legacy_xlsx: str) -> None:
        output_path = convert_workbook(legacy_xlsx)

        assert os.path.exists(output_path)
        assert os.path.basename(output_path).startswith("legacy_output_")
        wb = _reload(output_path)
        ws = wb["Sheet1"]

        assert ws["A1"].value == "Việt Nam"
        assert ws["A1"].font.name == "Times New Roman"
        assert ws["A1"].font.sz == 12.0

        rich = ws["A2"].value
        assert isinstance(rich, CellRichText)
        assert len(rich) == 2
        assert rich[1].text == "Việt"
        assert rich[1].font.rFont == "Times New Roman"
        assert rich[1].font.b is True
        assert rich[1].font.color.rgb == "FFFF0000"

        assert ws["A3"].value == "Công ty"
        assert ws["A3"].font.name == "Times New Roman"
        assert wb["Notes"]["A1"].value == "Trường Đại học"
        assert wb["Notes"]["A1"].font.name == "Arial"

    def test_untouched_cells(self, legacy_xlsx: str) -> None:
        ws = _reload(convert_workbook(legacy_xlsx))["Sheet1"]

        assert ws["B1"].value == 42
        assert ws["B2"].value == "=SUM(B1:B1)"
        assert ws["B3"].value == "Plain ASCII"
        assert ws["B3"].font.name == "Calibri"

    def test_input_left_unchanged(self, legacy_xlsx: str) -> None:
        convert_workbook(legacy_xlsx)
        assert _reload(legacy_xlsx)["Sheet1"]["A1"].value == "ViÖt Nam"

    def test_single_sheet(self, legacy_xlsx: str) -> None:
        wb = _reload(convert_workbook(legacy_xlsx, "Notes"))
        assert wb["Notes"]["A1"].value == "Trường Đại học"
        assert wb["Sheet1"]["A1"].value == "ViÖt Nam"

    def test_processing_result(self, legacy_xlsx: str) -> None:
        result = WorkbookProcessor().run(legacy_xlsx)
        assert result.cells_dispatched == 5
        assert result.cells_processed == 5
        assert result.cells_converted == 4

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConversionError) as exc_info:
            convert_workbook(str(tmp_path / "missing.xlsx"))
        assert exc_info.value.code == ErrorCode.E_OPEN_FAILED

    def test_missing_sheet(self, legacy_xlsx: str) -> None:
        with pytest.raises(ConversionError) as exc_info:
            convert_workbook(legacy_xlsx, "Nope")
        assert exc_info.value.code == ErrorCode.E_SHEET_NOT_FOUND
