"""Lookup of the shared decoder instance for an encoding."""

from __future__ import annotations

from vnfontkit.decoders.base import Decoder
from vnfontkit.decoders.tcvn3 import Tcvn3Decoder
from vnfontkit.decoders.vni import VniDecoder
from vnfontkit.models import Encoding

_DECODERS: dict[Encoding, Decoder] = {
    Encoding.VNI: VniDecoder(),
    Encoding.TCVN3: Tcvn3Decoder(),
}


def get_decoder(encoding: Encoding) -> Decoder | None:
    """Return the decoder for *encoding*, or ``None`` if it has none.

    ``Encoding.UNKNOWN`` and ``Encoding.AUTO`` have no decoder; callers
    leave such text untouched.
    """
    return _DECODERS.get(encoding)
