"""
PcapReader - pcap/pcapng input for the report.

Reads capture files with dpkt and turns each frame into a PacketInfo:
timestamp, captured length, ethertype and the network-layer bytes.
Ethernet (with 802.1Q tags), Linux SLL, raw IP and BSD loopback link
layers are understood; anything else is counted with ethertype 0.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator
import logging
import struct
import sys

import dpkt

from netreport.core.packet import (
    ETHERTYPE_IP,
    ETHERTYPE_IPV6,
    PacketInfo,
    Timestamp,
)

if TYPE_CHECKING:
    from netreport.report import OnePageReport, ReportConfig

logger = logging.getLogger(__name__)


# DLT (Data Link Type) constants
DLT_NULL = 0           # BSD loopback
DLT_EN10MB = 1         # Ethernet
DLT_RAW = 101          # Raw IP
DLT_LOOP = 108         # OpenBSD loopback
DLT_LINUX_SLL = 113    # Linux cooked capture
DLT_IPV4 = 228         # Raw IPv4
DLT_IPV6 = 229         # Raw IPv6

SLL_HDR_LEN = 16
NULL_HDR_LEN = 4

# BSD address families seen in loopback captures
_AF_INET = 2
_AF_INET6 = (10, 24, 28, 30)


class LinkLayerType:
    """Link layer type support."""
    ETHERNET = "ethernet"
    LINUX_SLL = "linux_sll"
    RAW_IP = "raw_ip"
    NULL = "null"
    UNKNOWN = "unknown"


def get_link_layer_type(dlt: int) -> str:
    """Get link layer type name from DLT value."""
    mapping = {
        DLT_EN10MB: LinkLayerType.ETHERNET,
        DLT_LINUX_SLL: LinkLayerType.LINUX_SLL,
        DLT_RAW: LinkLayerType.RAW_IP,
        DLT_IPV4: LinkLayerType.RAW_IP,
        DLT_IPV6: LinkLayerType.RAW_IP,
        DLT_NULL: LinkLayerType.NULL,
        DLT_LOOP: LinkLayerType.NULL,
    }
    return mapping.get(dlt, LinkLayerType.UNKNOWN)


def decode_ethernet_frame(buf: bytes) -> tuple[int, bytes]:
    """
    (ethertype, payload) of an Ethernet frame.

    802.1Q tags (up to two, as dpkt unpacks them) are skipped and the
    inner ethertype is reported.
    """
    try:
        eth = dpkt.ethernet.Ethernet(buf)
    except (dpkt.UnpackError, IndexError):
        # IndexError: dpkt's MPLS next-type guess reads past short frames
        return 0, b""

    vlan_tags = getattr(eth, 'vlan_tags', None)
    if vlan_tags and isinstance(vlan_tags[-1], dpkt.ethernet.VLANtag8021Q):
        ether_type = vlan_tags[-1].type
    else:
        ether_type = eth.type
    return ether_type, buf[len(eth) - len(eth.data):]


def decode_linux_sll_frame(buf: bytes) -> tuple[int, bytes]:
    """
    (protocol, payload) of a Linux cooked capture frame.

    SLL header format:
    - Packet type (2 bytes)
    - ARPHRD type (2 bytes)
    - Link-layer address length (2 bytes)
    - Link-layer address (8 bytes)
    - Protocol type (2 bytes)
    """
    if len(buf) < SLL_HDR_LEN:
        return 0, b""
    proto, = struct.unpack('>H', buf[14:16])
    return proto, buf[SLL_HDR_LEN:]


def decode_raw_ip_frame(buf: bytes) -> tuple[int, bytes]:
    """Raw IP has no link header; the ethertype comes from the IP version."""
    if not buf:
        return 0, b""
    version = buf[0] >> 4
    if version == 4:
        return ETHERTYPE_IP, buf
    if version == 6:
        return ETHERTYPE_IPV6, buf
    return 0, buf


def decode_null_frame(buf: bytes) -> tuple[int, bytes]:
    """
    BSD loopback frame.

    NULL header format (4 bytes):
    - Address family (4 bytes, host byte order)
    """
    if len(buf) < NULL_HDR_LEN:
        return 0, b""
    # Host byte order (native); fall back to swapped if value looks wrong
    af = struct.unpack('=I', buf[0:4])[0]
    if af > 255:
        af = struct.unpack('>I' if sys.byteorder == 'little' else '<I', buf[0:4])[0]
    payload = buf[NULL_HDR_LEN:]
    if af == _AF_INET:
        return ETHERTYPE_IP, payload
    if af in _AF_INET6:
        return ETHERTYPE_IPV6, payload
    return 0, payload


_FRAME_DECODERS = {
    LinkLayerType.ETHERNET: decode_ethernet_frame,
    LinkLayerType.LINUX_SLL: decode_linux_sll_frame,
    LinkLayerType.RAW_IP: decode_raw_ip_frame,
    LinkLayerType.NULL: decode_null_frame,
}


def link_to_packet_info(ts: float, buf: bytes, dlt: int, wirelen: int = 0) -> PacketInfo:
    """Build a PacketInfo from one captured frame of link type dlt."""
    decoder = _FRAME_DECODERS.get(get_link_layer_type(dlt))
    if decoder is None:
        ether_type, ip_data = 0, b""
    else:
        ether_type, ip_data = decoder(buf)
    return PacketInfo(
        timestamp=Timestamp.from_float(ts),
        caplen=len(buf),
        ether_type=ether_type,
        ip_data=bytes(ip_data),
        wirelen=wirelen or len(buf),
    )


class PcapReader:
    """
    PCAP file reader.

    Handles standard pcap and pcapng via dpkt's UniversalReader.
    """

    def __init__(self, pcap_path: str | Path):
        self.pcap_path = Path(pcap_path)
        self._reader: Any | None = None
        self._file = None
        self._link_layer_type: int | None = None
        self._link_layer_name: str = LinkLayerType.UNKNOWN

    def open(self) -> None:
        """Open the PCAP file and initialize reader."""
        if not self.pcap_path.exists():
            raise FileNotFoundError(f"PCAP file not found: {self.pcap_path}")

        f = open(self.pcap_path, 'rb')
        try:
            self._reader = dpkt.pcap.UniversalReader(f)
            self._file = f
            self._link_layer_type = self._reader.datalink()
        except ValueError as e:
            f.close()
            raise ValueError(f"Unknown PCAP format: {e}")

        self._link_layer_name = get_link_layer_type(self._link_layer_type)
        logger.debug("opened %s (link type %s)", self.pcap_path, self._link_layer_name)

    def close(self) -> None:
        """Close the PCAP file."""
        self._reader = None
        if self._file:
            self._file.close()
            self._file = None

    def __enter__(self) -> PcapReader:
        self.open()
        return self

    def __exit__(self, *args) -> None:
        self.close()

    @property
    def link_layer_type(self) -> int:
        """Get the DLT link layer type."""
        if self._link_layer_type is None:
            raise RuntimeError("Reader not opened")
        return self._link_layer_type

    @property
    def link_layer_name(self) -> str:
        """Get the link layer type name."""
        return self._link_layer_name

    def __iter__(self) -> Iterator[tuple[float, bytes]]:
        """Iterate over (timestamp, frame) pairs."""
        if self._reader is None:
            raise RuntimeError("Reader not opened. Call open() first.")

        try:
            for ts, buf in self._reader:
                yield ts, buf
        except dpkt.NeedData as e:
            # a record header cut short by the end of the file
            logger.warning("%s: truncated record after the last complete packet (%s)",
                           self.pcap_path, e)
        except dpkt.UnpackError as e:
            raise ValueError(f"Malformed capture {self.pcap_path}: {e}")

    def packet_infos(self, limit: int | None = None) -> Iterator[PacketInfo]:
        """Iterate over the file's packets as PacketInfo records."""
        dlt = self.link_layer_type
        for count, (ts, buf) in enumerate(self, start=1):
            yield link_to_packet_info(ts, buf, dlt)
            if limit and count >= limit:
                break

    @staticmethod
    def is_pcap_file(path: str | Path) -> bool:
        """Check if file is a valid PCAP or PCAPNG file."""
        path = Path(path)
        if not path.exists() or not path.is_file():
            return False

        try:
            with open(path, 'rb') as f:
                magic = f.read(4)
        except OSError:
            return False

        # standard pcap (micro- and nanosecond, either byte order) or pcapng
        return magic in (
            b'\xd4\xc3\xb2\xa1', b'\xa1\xb2\xc3\xd4',
            b'\x4d\x3c\xb2\xa1', b'\xa1\xb2\x3c\x4d',
            b'\x0a\x0d\x0d\x0a',
        )


def build_report(pcap_path: str | Path, config: ReportConfig | None = None,
                 limit: int | None = None) -> OnePageReport:
    """Read a capture file into a new OnePageReport."""
    from netreport.report import OnePageReport

    report = OnePageReport(source_identifier=str(pcap_path), config=config)
    with PcapReader(pcap_path) as reader:
        report.ingest_packets(reader.packet_infos(limit=limit))
    return report
