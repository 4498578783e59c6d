"""
Top source / destination address histogram.

Address histograms do not see packets; at render time they are filled
from the AddressTree the report built during ingestion.
"""

from __future__ import annotations

from netreport.render.plot import PlotStyle
from netreport.render.surface import Bounds, Surface
from netreport.stats.address_tree import AddressTree
from netreport.stats.count_histogram import CountHistogram, Direction


class AddressHistogram:
    """Ranked prefixes of one address tree."""

    def __init__(self, direction: Direction = Direction.SOURCE, title: str = "",
                 subtitle: str = "", max_bars: int = 10):
        self.direction = direction
        self.count_histogram = CountHistogram(max_bars=max_bars)
        self.style = PlotStyle(title=title, subtitle=subtitle)

    def quick_config(self, direction: Direction, title: str, subtitle: str = "") -> None:
        self.direction = direction
        self.style.title = title
        self.style.subtitle = subtitle

    def ingest(self, tree: AddressTree) -> None:
        """Replace the current counts with the tree's prefix summary."""
        self.count_histogram.clear()
        for label, count in tree.summarize(self.count_histogram.max_bars):
            self.count_histogram.increment(label, count)

    def render_from_tree(self, surface: Surface, bounds: Bounds, tree: AddressTree) -> float:
        self.ingest(tree)
        return self.render(surface, bounds)

    def render(self, surface: Surface, bounds: Bounds) -> float:
        return self.count_histogram.render(surface, bounds, self.style)

    def get_top_list(self, n: int | None = None):
        return self.count_histogram.get_top_list(n)

    def get_count_sum(self) -> int:
        return self.count_histogram.get_count_sum()
