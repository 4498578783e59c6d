"""
Packet waterfall: every packet as a tick on a shared time axis.
"""

from __future__ import annotations

import numpy as np

from netreport.core.packet import PacketInfo
from netreport.render.plot import PlotStyle
from netreport.render.surface import Bounds, Surface


class PacketFall:
    """Time-ordered trace of individual packets."""

    def __init__(self):
        self.style = PlotStyle(pad_left_factor=0.2)
        self._timestamps: list[float] = []
        self._sizes: list[int] = []

    def ingest(self, pi: PacketInfo) -> None:
        self._timestamps.append(pi.ts)
        self._sizes.append(pi.caplen)

    def __len__(self) -> int:
        return len(self._timestamps)

    def positions(self) -> tuple[np.ndarray, np.ndarray]:
        """
        Normalized (x, height) per packet, both in [0, 1].

        x is the packet's time relative to the capture span, height its
        captured length relative to the largest packet.
        """
        if not self._timestamps:
            return np.zeros(0), np.zeros(0)
        times = np.asarray(self._timestamps, dtype=np.float64)
        sizes = np.asarray(self._sizes, dtype=np.float64)
        span = times.max() - times.min()
        x = (times - times.min()) / span if span > 0 else np.zeros_like(times)
        largest = sizes.max()
        heights = sizes / largest if largest > 0 else np.zeros_like(sizes)
        return x, heights

    def render(self, surface: Surface, bounds: Bounds) -> float:
        left = bounds.x + bounds.width * self.style.pad_left_factor
        width = bounds.right - left
        baseline = bounds.bottom

        surface.set_color(0.0, 0.0, 0.0)
        surface.draw_line(left, baseline, bounds.right, baseline)

        x, heights = self.positions()
        surface.set_color(*self.style.overlay_color)
        for px, ph in zip(x, heights):
            tick_x = left + float(px) * width
            surface.draw_line(tick_x, baseline, tick_x, baseline - float(ph) * bounds.height, width=0.25)
        surface.set_color(0.0, 0.0, 0.0)
        return bounds.height
