"""TCVN3 (ABC) decoder: a one-to-one code point substitution."""

from __future__ import annotations

from vnfontkit.tables import TCVN3_TABLE

_TRANSLATION = str.maketrans(TCVN3_TABLE)


class Tcvn3Decoder:
    """Decode TCVN3 text to Unicode with ``str.translate``."""

    def to_unicode(self, text: str) -> str:
        return text.translate(_TRANSLATION)
