"""
OnePageReport - statistics for one capture, rendered as a single PDF page.

Packets are ingested one at a time during capture; once capture ends the
report is rendered once. Nothing is persisted between sessions.

Example usage:
    from netreport import OnePageReport, PcapReader

    report = OnePageReport(source_identifier='traffic.pcap')
    with PcapReader('traffic.pcap') as reader:
        for pi in reader.packet_infos():
            report.ingest_packet(pi)
    report.render('out/')
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
import logging
import warnings

from netreport.core.packet import (
    ETHERTYPE_ARP,
    ETHERTYPE_IP,
    ETHERTYPE_IPV6,
    PacketInfo,
    Timestamp,
    ethertype_name,
)
from netreport.formatting import format_size, percentage
from netreport.protocols.classifier import classify
from netreport.render.layout import RenderPass
from netreport.render.surface import Bounds, Surface, open_pdf_surface
from netreport.stats import (
    AddressHistogram,
    AddressTree,
    BandwidthHistogram,
    Direction,
    PacketFall,
    PortHistogram,
)

logger = logging.getLogger(__name__)


@dataclass
class ReportConfig:
    """Page geometry, spacing and text settings of the report."""
    filename: str = "report.pdf"
    page_width: float = 611.0
    page_height: float = 792.0
    page_margin_factor: float = 0.05
    line_space_factor: float = 0.25
    histogram_pad_factor_y: float = 1.0
    address_histogram_width_divisor: float = 2.5
    bandwidth_histogram_height: float = 100.0
    address_histogram_height: float = 100.0
    header_font_size: float = 8.0
    top_list_font_size: float = 8.0
    histogram_show_top_n_text: int = 3

    def validate(self) -> None:
        """Raise ValueError if any setting cannot produce a page."""
        positive = {
            'page_width': self.page_width,
            'page_height': self.page_height,
            'address_histogram_width_divisor': self.address_histogram_width_divisor,
            'header_font_size': self.header_font_size,
            'top_list_font_size': self.top_list_font_size,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"Invalid {name}={value!r}, must be positive")
        if not 0 <= self.page_margin_factor < 0.5:
            raise ValueError(
                f"Invalid page_margin_factor={self.page_margin_factor!r}, must be in [0, 0.5)"
            )
        if self.histogram_show_top_n_text < 0:
            raise ValueError(
                f"Invalid histogram_show_top_n_text={self.histogram_show_top_n_text!r}, "
                "must not be negative"
            )
        if not self.filename:
            raise ValueError("filename must not be empty")


class OnePageReport:
    """
    Aggregated statistics of one capture session.

    Owns the counters, the capture time range, the per-ethertype tally,
    the histograms drawn on the page, and the two address trees the
    address histograms are built from at render time.

    Args:
        source_identifier: Label of the input (file name, interface); shown
            on the report and fixed for the report's lifetime
        config: Page layout settings (default: ReportConfig())
    """

    def __init__(self, source_identifier: str = "", config: ReportConfig | None = None):
        self.config = config or ReportConfig()
        self.config.validate()
        self._source_identifier = source_identifier

        self.packet_count = 0
        self.byte_count = 0
        self.earliest: Timestamp | None = None
        self.latest = Timestamp()
        self.transport_counts: Counter[int] = Counter()

        self.bandwidth_histogram = BandwidthHistogram()
        self.src_addr_histogram = AddressHistogram()
        self.dst_addr_histogram = AddressHistogram()
        self.src_port_histogram = PortHistogram()
        self.dst_port_histogram = PortHistogram()
        self.pfall = PacketFall()
        self.src_tree = AddressTree()
        self.dst_tree = AddressTree()

        self.dst_addr_histogram.quick_config(Direction.DESTINATION, "Top Destination Addresses")
        self.src_addr_histogram.quick_config(Direction.SOURCE, "Top Source Addresses")
        self.dst_port_histogram.quick_config(Direction.DESTINATION, "Top Destination Ports")
        self.src_port_histogram.quick_config(Direction.SOURCE, "Top Source Ports")

    @property
    def source_identifier(self) -> str:
        return self._source_identifier

    def _update_time_range(self, ts: Timestamp) -> None:
        if self.earliest is None:
            self.earliest = ts
        # Both components must grow; a later second with a smaller
        # microsecond part does not move latest.
        if ts.sec > self.latest.sec and ts.usec > self.latest.usec:
            self.latest = ts

    def ingest_packet(self, pi: PacketInfo) -> None:
        """
        Add one packet to every statistic it belongs to.

        Never raises for malformed packets: anything that is not IPv4 or
        IPv6 is counted and otherwise ignored.
        """
        self._update_time_range(pi.timestamp)

        self.packet_count += 1
        self.byte_count += pi.caplen
        self.transport_counts[pi.ether_type] += 1

        decoded = classify(pi.ip_data)

        # address histograms read the trees, not the packets
        addresses = decoded.addresses
        if addresses is not None:
            src, dst = addresses
            self.src_tree.add(src)
            self.dst_tree.add(dst)

        self.bandwidth_histogram.ingest(pi, decoded.tcp)
        if decoded.tcp is not None:
            self.src_port_histogram.ingest(decoded.tcp)
            self.dst_port_histogram.ingest(decoded.tcp)
        self.pfall.ingest(pi)

    def ingest_packets(self, packets) -> int:
        """Ingest an iterable of PacketInfo; returns how many were ingested."""
        count = 0
        for pi in packets:
            self.ingest_packet(pi)
            count += 1
        logger.debug("ingested %d packets from %s", count, self._source_identifier)
        return count

    # rendering

    def content_bounds(self) -> Bounds:
        """Page rectangle minus margins, with its origin at the margin corner."""
        cfg = self.config
        pad = cfg.page_width * cfg.page_margin_factor
        return Bounds(pad, pad, cfg.page_width - pad * 2, cfg.page_height - pad * 2)

    def render_to_surface(self, surface: Surface, now: datetime | None = None) -> RenderPass:
        """Lay the report out on an already-open surface; returns the finished pass."""
        pad_bounds = self.content_bounds()
        surface.translate(pad_bounds.x, pad_bounds.y)
        render_pass = RenderPass(self, surface, Bounds(0.0, 0.0, pad_bounds.width, pad_bounds.height),
                                 now=now)
        render_pass.run()
        return render_pass

    def render(self, outdir: str | Path, now: datetime | None = None) -> Path | None:
        """
        Write the report to outdir/config.filename.

        Returns:
            Path of the written PDF, or None when no PDF backend is
            available or the output location cannot be used
        """
        path = Path(outdir) / self.config.filename
        surface = open_pdf_surface(path, self.config.page_width, self.config.page_height)
        if surface is None:
            return None

        try:
            self.render_to_surface(surface, now=now)
        except Exception:
            surface.discard()
            raise
        return path if self._close_surface(surface, path) else None

    @staticmethod
    def _close_surface(surface: Surface, path: Path) -> bool:
        try:
            surface.close()
        except OSError as e:
            warnings.warn(f"Could not write report {path}: {e}", RuntimeWarning, stacklevel=3)
            return False
        return True

    # summaries

    def transport_breakdown(self) -> dict[str, float]:
        """Percent of packets per ethertype class (IPv4, IPv6, ARP, Other)."""
        total = sum(self.transport_counts.values())
        if not total:
            return {'IPv4': 0.0, 'IPv6': 0.0, 'ARP': 0.0, 'Other': 0.0}
        known = {
            'IPv4': self.transport_counts[ETHERTYPE_IP],
            'IPv6': self.transport_counts[ETHERTYPE_IPV6],
            'ARP': self.transport_counts[ETHERTYPE_ARP],
        }
        breakdown = {name: count / total * 100.0 for name, count in known.items()}
        breakdown['Other'] = (1.0 - sum(known.values()) / total) * 100.0
        return breakdown

    def top_lists(self, n: int | None = None) -> dict[str, list[tuple[str, int, int]]]:
        """
        Top entries of each histogram as (label, count, percent).

        Address histograms are refreshed from the trees first.
        """
        if n is None:
            n = self.config.histogram_show_top_n_text
        self.src_addr_histogram.ingest(self.src_tree)
        self.dst_addr_histogram.ingest(self.dst_tree)
        sections = {
            'src_addr': self.src_addr_histogram,
            'dst_addr': self.dst_addr_histogram,
            'src_port': self.src_port_histogram,
            'dst_port': self.dst_port_histogram,
        }
        result = {}
        for name, histogram in sections.items():
            total = histogram.get_count_sum()
            result[name] = [(label, count, percentage(count, total))
                            for label, count in histogram.get_top_list(n)]
        return result

    def summary(self, n: int | None = None) -> dict[str, Any]:
        """Plain-data summary of the report (what the header and lists show)."""
        earliest = self.earliest or Timestamp()
        return {
            'source': self._source_identifier,
            'packet_count': self.packet_count,
            'byte_count': self.byte_count,
            'size': format_size(self.byte_count),
            'earliest': earliest.to_float(),
            'latest': self.latest.to_float(),
            'transport_counts': {ethertype_name(k): v for k, v in self.transport_counts.items()},
            'transports': self.transport_breakdown(),
            'tcp_packets': self.bandwidth_histogram.tcp_packet_count,
            'top': self.top_lists(n),
        }
