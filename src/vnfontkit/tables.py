"""Static tone and glyph tables for the legacy Vietnamese decoders.

Everything here is plain data built once at import time and never mutated
afterwards, so decoders running on many worker threads share it freely.

VNI-Windows writes a diacritic as a trailing marker character that has to
be fused with the vowel before it.  TCVN3 (ABC) gives every accented letter
its own 8-bit code point.  Both reach us as the Latin-1 characters Excel
shows when the legacy bytes are read as Windows-1252.
"""

from __future__ import annotations

from enum import Enum


class Tone(str, Enum):
    """Diacritic carried by a VNI marker character."""

    ACUTE = "acute"
    GRAVE = "grave"
    HOOK = "hook"
    TILDE = "tilde"
    DOT = "dot"
    CIRCUMFLEX = "circumflex"
    BREVE = "breve"
    HORN = "horn"


# ---------------------------------------------------------------------------
# Vowel inventory
# ---------------------------------------------------------------------------

# Column order of every row in _TONE_ROWS.
_TONE_COLUMNS = (Tone.ACUTE, Tone.GRAVE, Tone.HOOK, Tone.TILDE, Tone.DOT)

_TONE_ROWS: dict[str, str] = {
    "a": "áàảãạ",
    "ă": "ắằẳẵặ",
    "â": "ấầẩẫậ",
    "e": "éèẻẽẹ",
    "ê": "ếềểễệ",
    "i": "íìỉĩị",
    "o": "óòỏõọ",
    "ô": "ốồổỗộ",
    "ơ": "ớờởỡợ",
    "u": "úùủũụ",
    "ư": "ứừửữự",
    "y": "ýỳỷỹỵ",
    "A": "ÁÀẢÃẠ",
    "Ă": "ẮẰẲẴẶ",
    "Â": "ẤẦẨẪẬ",
    "E": "ÉÈẺẼẸ",
    "Ê": "ẾỀỂỄỆ",
    "I": "ÍÌỈĨỊ",
    "O": "ÓÒỎÕỌ",
    "Ô": "ỐỒỔỖỘ",
    "Ơ": "ỚỜỞỠỢ",
    "U": "ÚÙỦŨỤ",
    "Ư": "ỨỪỬỮỰ",
    "Y": "ÝỲỶỸỴ",
}

BASE_VOWELS = "aeiouyAEIOUY"
COMPOSED_VOWELS = "ăâêôơưĂÂÊÔƠƯ"

_MODIFIERS: dict[str, dict[Tone, str]] = {
    "a": {Tone.CIRCUMFLEX: "â"},
    "e": {Tone.CIRCUMFLEX: "ê"},
    "o": {Tone.CIRCUMFLEX: "ô", Tone.HORN: "ơ"},
    "u": {Tone.HORN: "ư"},
    "A": {Tone.CIRCUMFLEX: "Â"},
    "E": {Tone.CIRCUMFLEX: "Ê"},
    "O": {Tone.CIRCUMFLEX: "Ô", Tone.HORN: "Ơ"},
    "U": {Tone.HORN: "Ư"},
}

# base vowel -> tone -> composed vowel
FIRST_LEVEL: dict[str, dict[Tone, str]] = {
    base: {**dict(zip(_TONE_COLUMNS, _TONE_ROWS[base])), **_MODIFIERS.get(base, {})}
    for base in BASE_VOWELS
}

# composed vowel -> tone -> doubly composed vowel
SECOND_LEVEL: dict[str, dict[Tone, str]] = {
    composed: dict(zip(_TONE_COLUMNS, _TONE_ROWS[composed]))
    for composed in COMPOSED_VOWELS
}

KNOWN_VOWELS = frozenset(BASE_VOWELS + COMPOSED_VOWELS + "".join(_TONE_ROWS.values()))


def _circumflex_fallback() -> dict[str, str]:
    mapping: dict[str, str] = {}
    for plain, capped in (("a", "â"), ("e", "ê"), ("o", "ô"), ("A", "Â"), ("E", "Ê"), ("O", "Ô")):
        mapping.update(zip(_TONE_ROWS[plain], _TONE_ROWS[capped]))
    return mapping


def _retone(tone: Tone) -> dict[str, str]:
    column = _TONE_COLUMNS.index(tone)
    return {
        toned: row[column]
        for row in _TONE_ROWS.values()
        for toned in row
        if toned != row[column]
    }


# Second chance for a marker whose primary lookup failed: the circumflex
# arrives after the tone, or a tone replaces one already present.
SECONDARY_FALLBACKS: dict[Tone, dict[str, str]] = {
    Tone.CIRCUMFLEX: _circumflex_fallback(),
    Tone.GRAVE: _retone(Tone.GRAVE),
    Tone.DOT: _retone(Tone.DOT),
}

# ---------------------------------------------------------------------------
# VNI-Windows
# ---------------------------------------------------------------------------

VNI_MARKERS: dict[str, Tone] = {
    "ù": Tone.ACUTE,
    "Ù": Tone.ACUTE,
    "ø": Tone.GRAVE,
    "Ø": Tone.GRAVE,
    "û": Tone.HOOK,
    "Û": Tone.HOOK,
    "õ": Tone.TILDE,
    "Õ": Tone.TILDE,
    "ï": Tone.DOT,
    "Ï": Tone.DOT,
    "â": Tone.CIRCUMFLEX,
    "Â": Tone.CIRCUMFLEX,
    "ö": Tone.HORN,
    "Ö": Tone.HORN,
}

# Breve only ever follows a/A.
VNI_BREVE_MARKERS = frozenset("êÊ")
BREVE_TARGETS: dict[str, str] = {"a": "ă", "A": "Ă"}

# Letters VNI stores as one byte.  A tone marker after ơ/Ơ still stacks.
VNI_LETTER_SUBSTITUTIONS: dict[str, str] = {
    "ñ": "đ",
    "Ñ": "Đ",
    "ô": "ơ",
    "Ô": "Ơ",
    "ó": "ĩ",
    "Ó": "Ĩ",
    "ò": "ị",
    "Ò": "Ị",
}

# Rewritten before the scan; ô after a horn marker is the legacy standalone ơ.
VNI_AMBIGUOUS_SEQUENCES: tuple[tuple[str, str], ...] = (
    ("ÖÔ", "ƯƠ"),
    ("Öô", "Ươ"),
    ("öô", "ươ"),
)

VNI_HORN_LEGACY_GLYPH = "ệ"
VNI_STANDALONE_HORN: dict[str, str] = {"ö": "ư", "Ö": "Ư"}

# Single-character glyphs the scan never produces.
VNI_ARTIFACTS: dict[str, str] = {"æ": "ỉ", "Æ": "Ỉ", "î": "ỵ", "Î": "Ỵ"}

# ---------------------------------------------------------------------------
# TCVN3 (ABC)
# ---------------------------------------------------------------------------

TCVN3_TABLE: dict[str, str] = {
    # Upper-case letters with their own code point
    "¡": "Ă",
    "¢": "Â",
    "£": "Ê",
    "¤": "Ô",
    "¥": "Ơ",
    "¦": "Ư",
    "§": "Đ",
    # Lower-case letters
    "¨": "ă",
    "©": "â",
    "ª": "ê",
    "«": "ô",
    "¬": "ơ",
    "\u00ad": "ư",
    "®": "đ",
    # a
    "µ": "à",
    "¶": "ả",
    "·": "ã",
    "¸": "á",
    "¹": "ạ",
    # ă
    "»": "ằ",
    "¼": "ẳ",
    "½": "ẵ",
    "¾": "ắ",
    "Æ": "ặ",
    # â
    "Ç": "ầ",
    "È": "ẩ",
    "É": "ẫ",
    "Ê": "ấ",
    "Ë": "ậ",
    # e
    "Ì": "è",
    "Î": "ẻ",
    "Ï": "ẽ",
    "Ð": "é",
    "Ñ": "ẹ",
    # ê
    "Ò": "ề",
    "Ó": "ể",
    "Ô": "ễ",
    "Õ": "ế",
    "Ö": "ệ",
    # i
    "×": "ì",
    "Ø": "ỉ",
    "Ü": "ĩ",
    "Ý": "í",
    "Þ": "ị",
    # o
    "ß": "ò",
    "á": "ỏ",
    "â": "õ",
    "ã": "ó",
    "ä": "ọ",
    # ô
    "å": "ồ",
    "æ": "ổ",
    "ç": "ỗ",
    "è": "ố",
    "é": "ộ",
    # ơ
    "ê": "ờ",
    "ë": "ở",
    "ì": "ỡ",
    "í": "ớ",
    "î": "ợ",
    # u
    "ï": "ù",
    "ñ": "ủ",
    "ò": "ũ",
    "ó": "ú",
    "ô": "ụ",
    # ư; U+00F6 is read as ô ("Cöng ty"), so ử has no code point here
    "õ": "ừ",
    "ö": "ô",
    "÷": "ữ",
    "ø": "ứ",
    "ù": "ự",
    # y; ý (U+00FD) is the same code point in both
    "ú": "ỳ",
    "û": "ỷ",
    "ü": "ỹ",
    "þ": "ỵ",
}

# ---------------------------------------------------------------------------
# Detection evidence
# ---------------------------------------------------------------------------

VNI_FONT_PREFIX = "vni-"
TCVN3_FONT_PREFIX = ".vn"

# Code points that never occur in ordinary Unicode Vietnamese text.
VNI_CHARACTERISTIC = frozenset("øØûÛïÏöÖñÑ")
TCVN3_CHARACTERISTIC = frozenset("¨ª¬¶¸¹¾ÇËÐÞß")
