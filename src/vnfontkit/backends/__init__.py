"""Concrete ``SpreadsheetDocument`` backends."""

from vnfontkit.backends.openpyxl_document import OpenpyxlDocument

__all__ = ["OpenpyxlDocument"]
