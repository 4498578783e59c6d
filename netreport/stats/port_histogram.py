"""
Top source / destination TCP port histogram.
"""

from __future__ import annotations

from netreport.protocols.transport import TCPSegment
from netreport.render.plot import PlotStyle
from netreport.render.surface import Bounds, Surface
from netreport.stats.count_histogram import CountHistogram, Direction


class PortHistogram:
    """Counts TCP segments per source or destination port."""

    def __init__(self, direction: Direction = Direction.SOURCE, title: str = "",
                 subtitle: str = "", max_bars: int = 10):
        self.direction = direction
        self.count_histogram = CountHistogram(max_bars=max_bars)
        self.style = PlotStyle(title=title, subtitle=subtitle)

    def quick_config(self, direction: Direction, title: str, subtitle: str = "") -> None:
        self.direction = direction
        self.style.title = title
        self.style.subtitle = subtitle

    def ingest(self, tcp: TCPSegment) -> None:
        port = tcp.sport if self.direction is Direction.SOURCE else tcp.dport
        self.count_histogram.increment(str(port))

    def render(self, surface: Surface, bounds: Bounds) -> float:
        return self.count_histogram.render(surface, bounds, self.style)

    def get_top_list(self, n: int | None = None):
        return self.count_histogram.get_top_list(n)

    def get_count_sum(self) -> int:
        return self.count_histogram.get_count_sum()
