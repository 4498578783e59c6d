"""
Decoder result type shared by the network and transport decoders.
"""

from __future__ import annotations

from dataclasses import dataclass


# IP protocol number routed to the TCP decoder
IP_PROTO_TCP = 6


@dataclass
class DecodeResult:
    """Result returned by a decoder.

    Decoders never raise on malformed input; they return success=False
    with no header and an empty payload instead.
    """
    success: bool
    header: object | None = None  # Decoded header (IPv4Header, TCPSegment, ...)
    payload: bytes = b""  # Bytes following the header

    @classmethod
    def failed(cls) -> DecodeResult:
        return cls(success=False)

    def __bool__(self) -> bool:
        return self.success
