"""Structural interface shared by the legacy decoders."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Decoder(Protocol):
    """Converts legacy-encoded text to Unicode.

    Implementations are total (unknown characters pass through unchanged)
    and hold no state between calls, so one instance may be shared by
    every worker thread.
    """

    def to_unicode(self, text: str) -> str:
        """Return *text* decoded to Unicode."""
        ...
