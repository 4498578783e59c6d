"""
Packet classification: IPv4, IPv6 or neither, and TCP or not.

The classifier decides which statistics see a packet. It only wraps the
decoders; it never raises on malformed input.
"""

from __future__ import annotations

from dataclasses import dataclass

from netreport.protocols.base import IP_PROTO_TCP
from netreport.protocols.network import IPv4Header, IPv6Header, decode_ipv4, decode_ipv6
from netreport.protocols.transport import TCPSegment, decode_tcp


@dataclass
class Classification:
    """Decoded layers of one packet. Absent layers are None."""
    ipv4: IPv4Header | None = None
    ipv6: IPv6Header | None = None
    tcp: TCPSegment | None = None
    ip_payload: bytes = b""

    @property
    def is_ipv4(self) -> bool:
        return self.ipv4 is not None

    @property
    def is_ipv6(self) -> bool:
        return self.ipv6 is not None

    @property
    def is_ip(self) -> bool:
        return self.ipv4 is not None or self.ipv6 is not None

    @property
    def has_tcp(self) -> bool:
        return self.tcp is not None

    @property
    def addresses(self) -> tuple[bytes, bytes] | None:
        """(src, dst) raw address bytes, IPv6 preferred, or None for non-IP."""
        if self.ipv6 is not None:
            return self.ipv6.src, self.ipv6.dst
        if self.ipv4 is not None:
            return self.ipv4.src, self.ipv4.dst
        return None


def classify(ip_data: bytes) -> Classification:
    """
    Classify network-layer bytes.

    IPv4 is tried first, then IPv6. A TCP segment is decoded from the IP
    payload only when the IP header names TCP as its payload protocol
    (for IPv6, the protocol after any extension headers). UDP and other
    payloads are never read as TCP, even when their bytes would parse.
    """
    result = Classification()

    ip4 = decode_ipv4(ip_data)
    if ip4.success:
        result.ipv4 = ip4.header
        result.ip_payload = ip4.payload
        protocol = ip4.header.protocol
    else:
        ip6 = decode_ipv6(ip_data)
        if not ip6.success:
            return result
        result.ipv6 = ip6.header
        result.ip_payload = ip6.payload
        protocol = ip6.header.protocol

    if protocol == IP_PROTO_TCP:
        tcp = decode_tcp(result.ip_payload)
        if tcp.success:
            result.tcp = tcp.header

    return result
