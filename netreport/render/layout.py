"""
Single-pass vertical layout of the one-page report.

A RenderPass walks the report sections in a fixed order. Each section is
drawn at the cursor's current offset and then the cursor moves down by
the height the section reports plus padding. Nothing is ever moved back
up, so a section's height only has to be known after it is drawn.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Sequence
import logging

from netreport import __title_version__
from netreport.core.packet import Timestamp
from netreport.formatting import comma_number_string, format_size, percentage
from netreport.render.surface import Bounds, Surface, TextExtents

if TYPE_CHECKING:
    from netreport.report import OnePageReport
    from netreport.stats.count_histogram import CountPair

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
UNKNOWN_TIME = "unknown"


def format_timestamp(ts: Timestamp) -> str:
    """Local time of ts, or UNKNOWN_TIME when the platform cannot represent it."""
    try:
        return ts.to_datetime().strftime(TIME_FORMAT)
    except (OverflowError, OSError, ValueError):
        return UNKNOWN_TIME


class RenderStateError(RuntimeError):
    """A render step was called out of order or after the pass finished."""


class RenderState(Enum):
    NOT_STARTED = 0
    HEADER_RENDERED = 1
    BANDWIDTH_RENDERED = 2
    MAP_PLACEHOLDER = 3
    WATERFALL_RENDERED = 4
    ADDRESS_HISTOGRAMS_RENDERED = 5
    PORT_HISTOGRAMS_RENDERED = 6
    DONE = 7


@dataclass
class LayoutCursor:
    """Vertical offset of the end of the content drawn so far."""
    bounds: Bounds
    end_of_content: float = 0.0

    def advance(self, dy: float) -> float:
        self.end_of_content += dy
        return self.end_of_content

    @property
    def remaining(self) -> float:
        return self.bounds.height - self.end_of_content


class RenderPass:
    """
    Draws one report onto one surface, top to bottom.

    bounds is the content rectangle after margins; the surface origin is
    expected to already sit at its top-left corner. now fixes the
    "Generated" time (wall clock when None).
    """

    def __init__(self, report: OnePageReport, surface: Surface, bounds: Bounds,
                 now: datetime | None = None):
        self.report = report
        self.config = report.config
        self.surface = surface
        self.cursor = LayoutCursor(bounds=bounds)
        self.now = now
        self.state = RenderState.NOT_STARTED

    @property
    def end_of_content(self) -> float:
        return self.cursor.end_of_content

    def _step(self, expected: RenderState, next_state: RenderState) -> None:
        if self.state is not expected:
            raise RenderStateError(
                f"Cannot enter {next_state.name} from {self.state.name}"
            )
        self.state = next_state
        logger.debug("render %s at y=%.2f", next_state.name, self.cursor.end_of_content)

    def run(self) -> float:
        """Render every section in order; returns the final cursor offset."""
        self.render_header()
        self.render_bandwidth_histogram()
        self.render_map()
        self.render_packetfall()
        self.render_address_histograms()
        self.render_port_histograms()
        self.finish()
        return self.cursor.end_of_content

    def finish(self) -> None:
        self._step(RenderState.PORT_HISTOGRAMS_RENDERED, RenderState.DONE)

    # text

    def render_text(self, text: str, font_size: float, x_offset: float) -> TextExtents:
        """Draw text with its top at the cursor; the cursor does not move."""
        self.surface.set_font_size(font_size)
        self.surface.set_color(0.0, 0.0, 0.0)
        extents = self.surface.measure_text(text)
        self.surface.draw_text(text, x_offset, self.cursor.end_of_content + extents.height)
        return extents

    def render_text_line(self, text: str, font_size: float, line_space: float) -> None:
        extents = self.render_text(text, font_size, 0.0)
        self.cursor.advance(extents.height + line_space)

    # sections

    def header_lines(self) -> tuple[list[str], list[str]]:
        """Title block lines and quick-stat lines of the header."""
        report = self.report
        generated = self.now or datetime.now()
        earliest = report.earliest or Timestamp()
        title = [
            __title_version__,
            f"Input: {report.source_identifier}",
            f"Generated: {generated.strftime(TIME_FORMAT)}",
        ]

        transports = report.transport_breakdown()
        stats = [
            f"Date range: {format_timestamp(earliest)} to {format_timestamp(report.latest)}",
            "Packets analyzed: {} ({})".format(
                comma_number_string(report.packet_count), format_size(report.byte_count)),
            "Transports: " + " ".join(f"{name} {value:.2f}%" for name, value in transports.items()),
        ]
        return title, stats

    def render_header(self) -> None:
        self._step(RenderState.NOT_STARTED, RenderState.HEADER_RENDERED)
        font_size = self.config.header_font_size
        line_space = font_size * self.config.line_space_factor
        title, stats = self.header_lines()

        for line in title:
            self.render_text_line(line, font_size, line_space)
        self.cursor.advance(line_space * 4)
        for line in stats:
            self.render_text_line(line, font_size, line_space)
        self.cursor.advance(line_space * 4)

    def _full_width_band(self) -> Bounds:
        return Bounds(0.0, self.cursor.end_of_content, self.cursor.bounds.width,
                      self.config.bandwidth_histogram_height)

    def render_bandwidth_histogram(self) -> None:
        self._step(RenderState.HEADER_RENDERED, RenderState.BANDWIDTH_RENDERED)
        bounds = self._full_width_band()
        self.report.bandwidth_histogram.render(self.surface, bounds)
        self.cursor.advance(bounds.height * self.config.histogram_pad_factor_y)

    def render_map(self) -> None:
        """Reserved for a geographic map; draws nothing."""
        self._step(RenderState.BANDWIDTH_RENDERED, RenderState.MAP_PLACEHOLDER)

    def render_packetfall(self) -> None:
        self._step(RenderState.MAP_PLACEHOLDER, RenderState.WATERFALL_RENDERED)
        bounds = self._full_width_band()
        self.report.pfall.render(self.surface, bounds)
        self.cursor.advance(bounds.height * self.config.histogram_pad_factor_y)

    def _pair_bounds(self) -> tuple[Bounds, Bounds]:
        page_width = self.cursor.bounds.width
        width = page_width / self.config.address_histogram_width_divisor
        height = self.config.address_histogram_height
        y = self.cursor.end_of_content
        return Bounds(0.0, y, width, height), Bounds(page_width - width, y, width, height)

    def _render_pair(self, left, right, render_left, render_right) -> None:
        left_bounds, right_bounds = self._pair_bounds()
        left_bounds.height = render_left(left_bounds)
        right_bounds.height = render_right(right_bounds)

        self.cursor.advance(max(left_bounds.height, right_bounds.height))

        self.render_dual_top_n(
            left.get_top_list(), right.get_top_list(),
            left.get_count_sum(), right.get_count_sum(),
            left_bounds, right_bounds,
        )

    def render_address_histograms(self) -> None:
        self._step(RenderState.WATERFALL_RENDERED, RenderState.ADDRESS_HISTOGRAMS_RENDERED)
        report = self.report
        self._render_pair(
            report.src_addr_histogram, report.dst_addr_histogram,
            lambda b: report.src_addr_histogram.render_from_tree(self.surface, b, report.src_tree),
            lambda b: report.dst_addr_histogram.render_from_tree(self.surface, b, report.dst_tree),
        )

    def render_port_histograms(self) -> None:
        self._step(RenderState.ADDRESS_HISTOGRAMS_RENDERED, RenderState.PORT_HISTOGRAMS_RENDERED)
        report = self.report
        self._render_pair(
            report.src_port_histogram, report.dst_port_histogram,
            lambda b: report.src_port_histogram.render(self.surface, b),
            lambda b: report.dst_port_histogram.render(self.surface, b),
        )

    # top-N text under a pair of histograms

    @staticmethod
    def top_n_line(rank: int, pair: CountPair, total: int) -> str:
        label, count = pair
        return f"{rank}. {label} - {comma_number_string(count)} ({percentage(count, total)}%)"

    def render_dual_top_n(self, left_list: Sequence[CountPair], right_list: Sequence[CountPair],
                          left_sum: int, right_sum: int,
                          left_hist_bounds: Bounds, right_hist_bounds: Bounds) -> None:
        """
        Show the first entries of two ranked lists side by side, one row
        per rank, under the pair of histograms they belong to.
        """
        font_size = self.config.top_list_font_size
        for i in range(self.config.histogram_show_top_n_text):
            left_extents = TextExtents()
            right_extents = TextExtents()

            if len(left_list) > i:
                text = self.top_n_line(i + 1, left_list[i], left_sum)
                left_extents = self.render_text(text, font_size, left_hist_bounds.x)

            if len(right_list) > i:
                text = self.top_n_line(i + 1, right_list[i], right_sum)
                right_extents = self.render_text(text, font_size, right_hist_bounds.x)

            self.cursor.advance(max(left_extents.height, right_extents.height) * 1.5)

        self.cursor.advance(max(left_hist_bounds.height, right_hist_bounds.height)
                            * (self.config.histogram_pad_factor_y - 1.0))
