"""Configuration and fixtures for pytest tests."""

import socket
import struct
import sys
import os

import pytest

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from netreport.core.packet import ETHERTYPE_IP, ETHERTYPE_IPV6, PacketInfo, Timestamp
from netreport.render.surface import Surface, TextExtents


# ── Packet builders ──

def _ip4_bytes(ip: str) -> bytes:
    return socket.inet_pton(socket.AF_INET, ip)


def _ip6_bytes(ip: str) -> bytes:
    return socket.inet_pton(socket.AF_INET6, ip)


def build_ipv4(src="10.0.0.1", dst="10.0.0.2", proto=6, payload=b"", ttl=64) -> bytes:
    """Minimal IPv4 header (20 bytes, no options) + payload."""
    total_len = 20 + len(payload)
    hdr = struct.pack('>BBHHHBBH',
                      0x45,           # version=4, ihl=5
                      0,              # tos
                      total_len,
                      0x1234,         # identification
                      0,              # flags+frag
                      ttl,
                      proto,
                      0)              # checksum (0 = skip)
    hdr += _ip4_bytes(src) + _ip4_bytes(dst)
    return hdr + payload


def build_ipv6(src="2001:db8::1", dst="2001:db8::2", next_header=6, payload=b"") -> bytes:
    """Minimal IPv6 header (40 bytes) + payload."""
    hdr = struct.pack('>IHBB',
                      0x60000000,       # version=6, traffic class=0, flow label=0
                      len(payload),     # payload length
                      next_header,
                      64)               # hop limit
    hdr += _ip6_bytes(src) + _ip6_bytes(dst)
    return hdr + payload


def build_tcp(sport=12345, dport=80, seq=0, ack=0, flags=0x18, win=8192, payload=b"") -> bytes:
    """Minimal TCP header (20 bytes, no options) + payload."""
    hdr = struct.pack('>HHIIBBHHH',
                      sport, dport, seq, ack,
                      5 << 4,         # data offset = 5 words
                      flags, win,
                      0, 0)           # checksum, urgent pointer
    return hdr + payload


def build_udp(sport=53, dport=53, payload=b"") -> bytes:
    return struct.pack('>HHHH', sport, dport, 8 + len(payload), 0) + payload


def make_packet(ip_data=b"", ether_type=ETHERTYPE_IP, sec=1_700_000_000, usec=0, caplen=None):
    """PacketInfo as a capture loop would produce it (14-byte Ethernet header assumed)."""
    if caplen is None:
        caplen = 14 + len(ip_data)
    return PacketInfo(timestamp=Timestamp(sec, usec), caplen=caplen,
                      ether_type=ether_type, ip_data=ip_data)


def make_tcp4_packet(src="10.0.0.1", dst="10.0.0.2", sport=12345, dport=80,
                     sec=1_700_000_000, usec=0, payload=b""):
    ip_data = build_ipv4(src, dst, proto=6, payload=build_tcp(sport, dport, payload=payload))
    return make_packet(ip_data, ETHERTYPE_IP, sec, usec)


def make_tcp6_packet(src="2001:db8::1", dst="2001:db8::2", sport=12345, dport=443,
                     sec=1_700_000_000, usec=0):
    ip_data = build_ipv6(src, dst, next_header=6, payload=build_tcp(sport, dport))
    return make_packet(ip_data, ETHERTYPE_IPV6, sec, usec)


def ethernet_frame(ip_data, ether_type=ETHERTYPE_IP):
    return b'\x00\x11\x22\x33\x44\x55' + b'\x00\xaa\xbb\xcc\xdd\xee' + struct.pack('>H', ether_type) + ip_data


def write_pcap(path, frames, link_type=1):
    """
    Write a little-endian microsecond pcap file.

    frames is a list of (sec, usec, frame_bytes).
    """
    with open(path, 'wb') as f:
        f.write(b'\xd4\xc3\xb2\xa1')
        f.write(struct.pack('<HHiIiI', 2, 4, 0, 0, 65535, link_type))
        for sec, usec, frame in frames:
            f.write(struct.pack('<IIII', sec, usec, len(frame), len(frame)))
            f.write(frame)
    return path


# ── Drawing stub ──

class RecordingSurface(Surface):
    """
    Surface that draws nothing and records every call.

    Text measures font_size high and 0.5 * font_size per character wide,
    so layout arithmetic in tests is exact.
    """

    def __init__(self):
        self.font_size = 10.0
        self.texts = []       # (text, x, y, font_size)
        self.lines = []
        self.rects = []
        self.translations = []
        self.closed = False

    def set_font_size(self, size):
        self.font_size = size

    def measure_text(self, text):
        return TextExtents(width=len(text) * self.font_size * 0.5, height=self.font_size)

    def draw_text(self, text, x, y):
        self.texts.append((text, x, y, self.font_size))

    def draw_line(self, x1, y1, x2, y2, width=0.5):
        self.lines.append((x1, y1, x2, y2))

    def draw_rect(self, x, y, width, height, fill=True):
        self.rects.append((x, y, width, height))

    def translate(self, dx, dy):
        self.translations.append((dx, dy))

    def close(self):
        self.closed = True

    def text_values(self):
        return [t[0] for t in self.texts]


@pytest.fixture
def surface():
    """Provide a fresh RecordingSurface."""
    return RecordingSurface()


@pytest.fixture
def sample_report():
    """Report with a small mixed capture: IPv4/TCP, IPv6/TCP, UDP, ARP."""
    from netreport.core.packet import ETHERTYPE_ARP
    from netreport.report import OnePageReport

    report = OnePageReport(source_identifier="sample.pcap")
    for i in range(6):
        report.ingest_packet(make_tcp4_packet(src="192.168.1.10", dst="10.0.0.1",
                                              sport=40000 + i, dport=443,
                                              sec=1_700_000_000 + i, usec=100 + i))
    for i in range(2):
        report.ingest_packet(make_tcp6_packet(sec=1_700_000_010 + i, usec=200 + i))
    report.ingest_packet(make_packet(build_ipv4("192.168.1.10", "8.8.8.8", proto=17,
                                                payload=build_udp()),
                                     sec=1_700_000_020, usec=300))
    report.ingest_packet(make_packet(b"\x00\x01\x08\x00" + b"\x00" * 24, ETHERTYPE_ARP,
                                     sec=1_700_000_021, usec=400))
    return report
