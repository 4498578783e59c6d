"""
Network layer decoders (IPv4, IPv6).

Thin wrappers over dpkt's IP and IP6 packets that keep the header fields
the report uses and hand back the raw upper-layer bytes.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass

import dpkt

from netreport.protocols.base import DecodeResult


IPV4_MIN_HEADER_LEN = 20
IPV6_HEADER_LEN = 40


@dataclass
class IPv4Header:
    """IPv4 header fields the report uses."""
    src: bytes
    dst: bytes
    protocol: int
    ttl: int = 0
    total_length: int = 0
    header_len: int = IPV4_MIN_HEADER_LEN

    @property
    def src_ip(self) -> str:
        return socket.inet_ntop(socket.AF_INET, self.src)

    @property
    def dst_ip(self) -> str:
        return socket.inet_ntop(socket.AF_INET, self.dst)


@dataclass
class IPv6Header:
    """
    IPv6 header fields the report uses.

    next_header is the fixed header's field; payload_protocol is the
    protocol found after any extension headers.
    """
    src: bytes
    dst: bytes
    next_header: int
    hop_limit: int = 0
    payload_length: int = 0
    flow_label: int = 0
    payload_protocol: int | None = None
    extension_len: int = 0

    def __post_init__(self):
        if self.payload_protocol is None:
            self.payload_protocol = self.next_header

    @property
    def protocol(self) -> int:
        return self.payload_protocol

    @property
    def src_ip(self) -> str:
        return socket.inet_ntop(socket.AF_INET6, self.src)

    @property
    def dst_ip(self) -> str:
        return socket.inet_ntop(socket.AF_INET6, self.dst)


def decode_ipv4(data: bytes) -> DecodeResult:
    """
    Decode an IPv4 datagram.

    The payload is clipped to the total-length field so link-layer
    padding does not leak into the transport decoder.
    """
    # dpkt checks neither the version nor that the header fits the buffer
    if not data or len(data) < IPV4_MIN_HEADER_LEN or data[0] >> 4 != 4:
        return DecodeResult.failed()

    header_len = (data[0] & 0x0f) * 4
    if header_len < IPV4_MIN_HEADER_LEN or header_len > len(data):
        return DecodeResult.failed()

    try:
        ip = dpkt.ip.IP(data)
    except dpkt.UnpackError:
        return DecodeResult.failed()

    # Some capture offloads report a zero total length; fall back to the buffer
    end = ip.len if header_len <= ip.len <= len(data) else len(data)

    header = IPv4Header(
        src=bytes(ip.src),
        dst=bytes(ip.dst),
        protocol=ip.p,
        ttl=ip.ttl,
        total_length=ip.len,
        header_len=header_len,
    )
    return DecodeResult(success=True, header=header, payload=bytes(data[header_len:end]))


def decode_ipv6(data: bytes) -> DecodeResult:
    """Decode an IPv6 datagram, skipping any extension headers dpkt walks."""
    if not data or len(data) < IPV6_HEADER_LEN or data[0] >> 4 != 6:
        return DecodeResult.failed()

    try:
        ip6 = dpkt.ip6.IP6(data)
    except dpkt.UnpackError:
        return DecodeResult.failed()

    extension_len = sum(ext.length for ext in ip6.all_extension_headers)
    end = IPV6_HEADER_LEN + ip6.plen
    if ip6.plen == 0 or end > len(data):
        end = len(data)
    start = min(IPV6_HEADER_LEN + extension_len, end)

    header = IPv6Header(
        src=bytes(ip6.src),
        dst=bytes(ip6.dst),
        next_header=ip6.nxt,
        hop_limit=ip6.hlim,
        payload_length=ip6.plen,
        flow_label=ip6.flow,
        # ESP hides the next protocol; dpkt leaves p unset then
        payload_protocol=getattr(ip6, 'p', ip6.nxt),
        extension_len=extension_len,
    )
    return DecodeResult(success=True, header=header, payload=bytes(data[start:end]))
