"""Format-preserving conversion of styled runs.

``RunTransformer`` decodes each legacy run and swaps its font for a
Unicode-capable one while copying bold, italic, color, size and underline
through untouched.  Runs that are not recognised as legacy text are
returned exactly as they came in.
"""

from __future__ import annotations

import logging

from vnfontkit.config import ConverterConfig
from vnfontkit.decoders import get_decoder
from vnfontkit.detector import detect_encoding
from vnfontkit.models import Encoding, StyledRun
from vnfontkit.tables import TCVN3_FONT_PREFIX

logger = logging.getLogger("vnfontkit")

DEFAULT_FONT = "Arial"

FONT_MAP: dict[str, str] = {
    # VNI-Windows
    "VNI-Times": "Times New Roman",
    "VNI-Arial": "Arial",
    "VNI-Helve": "Helvetica",
    "VNI-Hobo": "Hobo Std",
    "VNI-Courier": "Courier New",
    "VNI-Book": "Book Antiqua",
    # TCVN3 (ABC); the trailing H marks the all-capitals variant
    ".VnTime": "Times New Roman",
    ".VnTimeH": "Times New Roman",
    ".VnArial": "Arial",
    ".VnArialH": "Arial",
    ".VnHelve": "Helvetica",
    ".VnCourier": "Courier New",
    ".VnBook": "Book Antiqua",
}


class RunTransformer:
    """Convert the runs of one cell, preserving their formatting.

    Holds only read-only state after construction, so one instance serves
    every worker thread.

    Parameters
    ----------
    config:
        Converter configuration; ``source_encoding``, ``font_map``,
        ``default_font`` and ``uppercase_tcvn3_h_fonts`` are consulted.
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        self._config = config or ConverterConfig()
        merged = {**FONT_MAP, **self._config.font_map}
        self._font_map = {name.casefold(): target for name, target in merged.items()}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def classify(self, run: StyledRun) -> Encoding:
        """Return the encoding of *run*, honouring a forced source encoding."""
        forced = self._config.source_encoding
        if forced in (Encoding.VNI, Encoding.TCVN3):
            return forced
        return detect_encoding(run.font_name, run.text)

    def map_font(self, font_name: str) -> str:
        """Return the Unicode font replacing legacy *font_name*."""
        return self._font_map.get(font_name.strip().casefold(), self._config.default_font)

    def transform(self, runs: list[StyledRun]) -> list[StyledRun]:
        """Return new runs, one per input run and in the same order."""
        return [run for run, _ in self.transform_detailed(runs)]

    def transform_detailed(self, runs: list[StyledRun]) -> list[tuple[StyledRun, Encoding]]:
        """Like ``transform`` but pair each new run with its detected encoding."""
        return [self._transform_run(run) for run in runs]

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _transform_run(self, run: StyledRun) -> tuple[StyledRun, Encoding]:
        encoding = self.classify(run)
        decoder = get_decoder(encoding)
        if decoder is None:
            return run.model_copy(), encoding

        text = decoder.to_unicode(run.text)
        if encoding is Encoding.TCVN3 and self._config.uppercase_tcvn3_h_fonts:
            if _is_capitals_font(run.font_name):
                text = text.upper()

        new_font = self.map_font(run.font_name)
        logger.debug(
            "vnfontkit | transform | encoding=%s | font=%r -> %r",
            encoding.value,
            run.font_name,
            new_font,
        )
        return run.model_copy(update={"text": text, "font_name": new_font}), encoding


def _is_capitals_font(font_name: str) -> bool:
    name = font_name.strip()
    return name.casefold().startswith(TCVN3_FONT_PREFIX) and name.endswith("H")
