"""VNI-Windows decoder.

VNI stores an accented vowel as the bare letter followed by one or two
marker characters (``a`` + ``â`` + ``ù`` for ``ấ``).  Decoding is a single
left-to-right scan that fuses each marker into the character already
emitted before it, consulting the tables in ``vnfontkit.tables``.  A few
letters (``đ``, ``ơ``, ``ĩ``, ``ị``) have a byte of their own and are
substituted directly; tone markers after them still stack.
"""

from __future__ import annotations

from vnfontkit.tables import (
    BREVE_TARGETS,
    FIRST_LEVEL,
    KNOWN_VOWELS,
    SECOND_LEVEL,
    SECONDARY_FALLBACKS,
    VNI_AMBIGUOUS_SEQUENCES,
    VNI_ARTIFACTS,
    VNI_BREVE_MARKERS,
    VNI_HORN_LEGACY_GLYPH,
    VNI_LETTER_SUBSTITUTIONS,
    VNI_MARKERS,
    VNI_STANDALONE_HORN,
    Tone,
)

_ARTIFACT_TRANSLATION = str.maketrans(VNI_ARTIFACTS)


class VniDecoder:
    """Decode VNI-Windows text to Unicode.

    The decoder is stateless: every call starts from an empty buffer, so a
    single instance is safe to share across threads.
    """

    def to_unicode(self, text: str) -> str:
        """Decode *text*.

        Parameters
        ----------
        text:
            Cell text as stored under a VNI font.

        Returns
        -------
        str
            The Unicode rendering.  Markers that cannot be attached to a
            preceding vowel are kept as-is.
        """
        if not text:
            return text

        for legacy, replacement in VNI_AMBIGUOUS_SEQUENCES:
            text = text.replace(legacy, replacement)

        result: list[str] = []
        for char in text:
            tone = VNI_MARKERS.get(char)
            if tone is not None:
                self._apply_marker(result, char, tone)
            elif char in VNI_LETTER_SUBSTITUTIONS:
                result.append(VNI_LETTER_SUBSTITUTIONS[char])
            elif char in VNI_BREVE_MARKERS and result and result[-1] in BREVE_TARGETS:
                result[-1] = BREVE_TARGETS[result[-1]]
            else:
                result.append(char)

        return "".join(result).translate(_ARTIFACT_TRANSLATION)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _apply_marker(self, result: list[str], marker: str, tone: Tone) -> None:
        previous = result[-1] if result else None

        if previous is not None:
            combined = _combine(previous, tone)
            if combined is not None:
                result[-1] = combined
                return

        if tone is Tone.HORN:
            result.append(self._resolve_horn(previous, marker))
            return

        fallback = SECONDARY_FALLBACKS.get(tone, {})
        if previous is not None and previous in fallback:
            result[-1] = fallback[previous]
            return

        result.append(marker)

    @staticmethod
    def _resolve_horn(previous: str | None, marker: str) -> str:
        """Choose what an unattached horn marker stands for.

        After a vowel the marker is the legacy ``ệ`` glyph (``Vi`` + ``Ö`` +
        ``t``); anywhere else it is a standalone ``ư``/``Ư`` in the
        marker's own case.
        """
        if previous is not None and previous in KNOWN_VOWELS:
            return VNI_HORN_LEGACY_GLYPH
        return VNI_STANDALONE_HORN[marker]


def _combine(previous: str, tone: Tone) -> str | None:
    if previous in SECOND_LEVEL:
        return SECOND_LEVEL[previous].get(tone)
    if previous in FIRST_LEVEL:
        return FIRST_LEVEL[previous].get(tone)
    return None
