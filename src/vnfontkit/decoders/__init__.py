"""Legacy Vietnamese text decoders."""

from vnfontkit.decoders.base import Decoder
from vnfontkit.decoders.factory import get_decoder
from vnfontkit.decoders.tcvn3 import Tcvn3Decoder
from vnfontkit.decoders.vni import VniDecoder

__all__ = [
    "Decoder",
    "Tcvn3Decoder",
    "VniDecoder",
    "get_decoder",
]
