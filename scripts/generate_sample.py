#!/usr/bin/env python3
"""Write a demo workbook with VNI, TCVN3 and mixed rich-text cells.

Usage:
    python scripts/generate_sample.py
    python scripts/generate_sample.py --output /tmp/sample.xlsx --convert
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from openpyxl import Workbook
from openpyxl.cell.rich_text import CellRichText, TextBlock
from openpyxl.cell.text import InlineFont
from openpyxl.styles import Font

DEFAULT_OUTPUT = os.path.join("samples", "sample_data.xlsx")

HEADERS = ["VNI Content", "TCVN3 Content", "Mixed/Plain"]

# (VNI text, TCVN3 text) for each data row.
ROWS = [
    ("ViÖt Nam", "Cöng ty"),
    ("Tröôøng Ñaïi hoïc", "tr\u00adêng ®¹i häc"),
    ("Haø Noâïi", "hµ néi"),
]


def build_workbook() -> Workbook:
    """Return the sample workbook without saving it."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Sheet1"

    for col, header in enumerate(HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True)

    for row, (vni_text, tcvn3_text) in enumerate(ROWS, start=2):
        vni_cell = ws.cell(row=row, column=1, value=vni_text)
        vni_cell.font = Font(name="VNI-Times", size=12)
        tcvn3_cell = ws.cell(row=row, column=2, value=tcvn3_text)
        tcvn3_cell.font = Font(name=".VnTime", size=12)

    ws["C2"] = CellRichText(
        [
            TextBlock(InlineFont(rFont="Arial"), "Sample "),
            TextBlock(InlineFont(rFont="VNI-Times", b=True, color="FFFF0000"), "ViÖt"),
        ]
    )
    ws["C3"] = "Plain ASCII text"
    ws["C4"] = 2024
    return wb


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample legacy-font workbook")
    parser.add_argument("--output", default=DEFAULT_OUTPUT, help="Path of the .xlsx to write")
    parser.add_argument(
        "--convert",
        action="store_true",
        help="Also run the converter on the generated workbook",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    directory = os.path.dirname(args.output)
    if directory:
        os.makedirs(directory, exist_ok=True)
    build_workbook().save(args.output)
    print(f"Sample file created: {args.output}")

    if args.convert:
        from vnfontkit import ConversionError, convert_workbook

        try:
            output_path = convert_workbook(args.output)
        except ConversionError as exc:
            print(f"Conversion failed [{exc.code.value}]: {exc.message}", file=sys.stderr)
            sys.exit(1)
        print(f"Converted file: {output_path}")


if __name__ == "__main__":
    main()
