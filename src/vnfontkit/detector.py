"""Per-run legacy encoding detection.

Font evidence always outranks content evidence: a run in ``VNI-Times`` is
VNI whatever its characters, and only runs in unrecognised fonts fall back
to scanning for code points characteristic of one encoding.
"""

from __future__ import annotations

from vnfontkit.models import Encoding
from vnfontkit.tables import (
    TCVN3_CHARACTERISTIC,
    TCVN3_FONT_PREFIX,
    VNI_CHARACTERISTIC,
    VNI_FONT_PREFIX,
)


def detect_encoding(font_name: str | None, sample_text: str) -> Encoding:
    """Classify a run as VNI, TCVN3 or UNKNOWN.

    Parameters
    ----------
    font_name:
        The run's font name, possibly empty.  Prefixes ``VNI-`` and ``.Vn``
        are matched case-insensitively.
    sample_text:
        The run's text, scanned only when the font is inconclusive.

    Returns
    -------
    Encoding
        Never ``Encoding.AUTO``.
    """
    folded = (font_name or "").strip().casefold()
    if folded.startswith(VNI_FONT_PREFIX):
        return Encoding.VNI
    if folded.startswith(TCVN3_FONT_PREFIX):
        return Encoding.TCVN3

    if not VNI_CHARACTERISTIC.isdisjoint(sample_text):
        return Encoding.VNI
    if not TCVN3_CHARACTERISTIC.isdisjoint(sample_text):
        return Encoding.TCVN3

    return Encoding.UNKNOWN
