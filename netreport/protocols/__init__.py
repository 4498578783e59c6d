"""Protocol decoder modules."""

from netreport.protocols.base import DecodeResult, IP_PROTO_TCP
from netreport.protocols.network import IPv4Header, IPv6Header, decode_ipv4, decode_ipv6
from netreport.protocols.transport import TCPSegment, decode_tcp
from netreport.protocols.classifier import Classification, classify

__all__ = [
    'DecodeResult',
    'IP_PROTO_TCP',
    'IPv4Header',
    'IPv6Header',
    'decode_ipv4',
    'decode_ipv6',
    'TCPSegment',
    'decode_tcp',
    'Classification',
    'classify',
]
