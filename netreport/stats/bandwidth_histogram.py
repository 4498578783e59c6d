"""
Bytes-over-time histogram for the whole capture.
"""

from __future__ import annotations

import numpy as np

from netreport.core.packet import PacketInfo
from netreport.formatting import format_size
from netreport.protocols.transport import TCPSegment
from netreport.render.plot import PlotStyle, draw_bar_chart
from netreport.render.surface import Bounds, Surface


class BandwidthHistogram:
    """
    Captured bytes per time bucket, with the TCP share drawn on top.

    Buckets are computed at render time over the span between the first
    and last packet, so ingestion only appends.
    """

    def __init__(self, bucket_count: int = 60, title: str = "TCP Packets Received"):
        self.bucket_count = bucket_count
        self.style = PlotStyle(
            title=title,
            pad_left_factor=0.2,
            y_tick_font_size=6.0,
            x_tick_font_size=6.0,
            x_axis_font_size=8.0,
            y_tick_formatter=lambda v: format_size(int(v)),
        )
        self._timestamps: list[float] = []
        self._sizes: list[int] = []
        self._tcp: list[bool] = []

    def ingest(self, pi: PacketInfo, tcp: TCPSegment | None) -> None:
        self._timestamps.append(pi.ts)
        self._sizes.append(pi.caplen)
        self._tcp.append(tcp is not None)

    def __len__(self) -> int:
        return len(self._timestamps)

    @property
    def tcp_packet_count(self) -> int:
        return sum(self._tcp)

    def buckets(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Returns:
            (edges, all_bytes, tcp_bytes); edges are seconds since the
            first packet and have one more element than the byte arrays.
        """
        if not self._timestamps:
            empty = np.zeros(0)
            return np.zeros(1), empty, empty

        times = np.asarray(self._timestamps, dtype=np.float64)
        sizes = np.asarray(self._sizes, dtype=np.float64)
        is_tcp = np.asarray(self._tcp, dtype=bool)

        start = float(times.min())
        span = float(times.max()) - start
        # A zero-length capture still gets one bucket
        if span <= 0:
            span = 1.0
        edges = np.linspace(0.0, span, self.bucket_count + 1)
        relative = times - start
        all_bytes, _ = np.histogram(relative, bins=edges, weights=sizes)
        tcp_bytes, _ = np.histogram(relative[is_tcp], bins=edges, weights=sizes[is_tcp])
        return edges, all_bytes, tcp_bytes

    def render(self, surface: Surface, bounds: Bounds) -> float:
        edges, all_bytes, tcp_bytes = self.buckets()
        labels = [f"{edge:.0f}s" for edge in edges[:-1]]
        return draw_bar_chart(surface, bounds, self.style, all_bytes, labels, overlay=tcp_bytes)
