"""
Transport layer decoder (TCP).
"""

from __future__ import annotations

from dataclasses import dataclass

import dpkt

from netreport.protocols.base import DecodeResult


TCP_MIN_HEADER_LEN = 20


@dataclass
class TCPSegment:
    """TCP header fields the report uses."""
    sport: int
    dport: int
    seq: int = 0
    ack: int = 0
    flags: int = 0
    window: int = 0
    header_len: int = TCP_MIN_HEADER_LEN
    payload_len: int = 0


def decode_tcp(data: bytes) -> DecodeResult:
    """Decode a TCP segment header; the segment data becomes the payload."""
    if not data or len(data) < TCP_MIN_HEADER_LEN:
        return DecodeResult.failed()

    # dpkt slices options without checking they fit
    header_len = (data[12] >> 4) * 4
    if header_len > len(data):
        return DecodeResult.failed()

    try:
        tcp = dpkt.tcp.TCP(data)
    except dpkt.UnpackError:
        return DecodeResult.failed()

    payload = bytes(tcp.data)
    segment = TCPSegment(
        sport=tcp.sport,
        dport=tcp.dport,
        seq=tcp.seq,
        ack=tcp.ack,
        flags=tcp.flags,
        window=tcp.win,
        header_len=tcp.off * 4,
        payload_len=len(payload),
    )
    return DecodeResult(success=True, header=segment, payload=payload)
