"""vnfontkit -- convert legacy Vietnamese spreadsheet text to Unicode.

Public API exports for models, enums, errors, configuration, decoders,
the run transformer, document protocols and the workbook processor.
"""

from vnfontkit.config import ConverterConfig
from vnfontkit.errors import ConversionError, ConversionIssue, ErrorCode
from vnfontkit.models import (
    CellJob,
    ConversionResult,
    Encoding,
    ProcessingResult,
    StyledRun,
)
from vnfontkit.decoders import Decoder, Tcvn3Decoder, VniDecoder, get_decoder
from vnfontkit.detector import detect_encoding
from vnfontkit.transformer import DEFAULT_FONT, FONT_MAP, RunTransformer
from vnfontkit.protocols import DocumentOpener, SpreadsheetDocument
from vnfontkit.backends import OpenpyxlDocument
from vnfontkit.processor import (
    WorkbookProcessor,
    convert_workbook,
    create_default_processor,
    derive_output_path,
)

__all__ = [
    # Enums
    "Encoding",
    "ErrorCode",
    # Models
    "StyledRun",
    "CellJob",
    "ConversionResult",
    "ProcessingResult",
    # Errors
    "ConversionIssue",
    "ConversionError",
    # Config
    "ConverterConfig",
    # Decoding
    "Decoder",
    "VniDecoder",
    "Tcvn3Decoder",
    "get_decoder",
    "detect_encoding",
    # Transformation
    "RunTransformer",
    "FONT_MAP",
    "DEFAULT_FONT",
    # Protocols
    "SpreadsheetDocument",
    "DocumentOpener",
    # Backends
    "OpenpyxlDocument",
    # Processor
    "WorkbookProcessor",
    "create_default_processor",
    "convert_workbook",
    "derive_output_path",
]
