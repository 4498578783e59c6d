"""
Label -> count histogram with a ranked top list.

Port and address histograms keep their counts in a CountHistogram and
read their "top N" text and the percentage denominator from it.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum

from netreport.render.plot import PlotStyle, draw_bar_chart
from netreport.render.surface import Bounds, Surface


class Direction(Enum):
    """Which end of a packet a histogram counts."""
    SOURCE = "source"
    DESTINATION = "destination"


# (label, count)
CountPair = tuple[str, int]


class CountHistogram:
    """Counts per label, ranked by count descending then label ascending."""

    def __init__(self, max_bars: int = 10):
        self.max_bars = max_bars
        self._counts: Counter[str] = Counter()

    def increment(self, key: str, count: int = 1) -> None:
        self._counts[key] += count

    def clear(self) -> None:
        self._counts.clear()

    def get_count_sum(self) -> int:
        return sum(self._counts.values())

    def get_top_list(self, n: int | None = None) -> list[CountPair]:
        """The n highest-ranked entries (max_bars when n is None)."""
        if n is None:
            n = self.max_bars
        ranked = sorted(self._counts.items(), key=lambda item: (-item[1], item[0]))
        return ranked[:n]

    def __len__(self) -> int:
        return len(self._counts)

    def __contains__(self, key: str) -> bool:
        return key in self._counts

    def __getitem__(self, key: str) -> int:
        return self._counts[key]

    def render(self, surface: Surface, bounds: Bounds, style: PlotStyle) -> float:
        """Draw the top list as bars; returns the height used."""
        top = self.get_top_list()
        labels = [str(rank) for rank in range(1, len(top) + 1)]
        return draw_bar_chart(surface, bounds, style, [count for _, count in top], labels)
