"""Test the render pass: section order, cursor arithmetic and top-N text."""

from datetime import datetime

import pytest

from conftest import make_packet

from netreport.core.packet import Timestamp
from netreport.render.layout import (
    UNKNOWN_TIME,
    LayoutCursor,
    RenderPass,
    RenderState,
    RenderStateError,
    format_timestamp,
)
from netreport.render.surface import Bounds
from netreport.report import OnePageReport, ReportConfig

NOW = datetime(2024, 1, 2, 3, 4, 5)


class FixedHeightHistogram:
    """Histogram stand-in that reports a fixed rendered height."""

    def __init__(self, height, top_list=(), total=0):
        self.height = height
        self.top_list = list(top_list)
        self.total = total
        self.rendered_bounds = None

    def render(self, surface, bounds):
        self.rendered_bounds = bounds
        return self.height

    def render_from_tree(self, surface, bounds, tree):
        return self.render(surface, bounds)

    def get_top_list(self, n=None):
        return self.top_list

    def get_count_sum(self):
        return self.total


def make_pass(report, surface):
    return RenderPass(report, surface, Bounds(0.0, 0.0, 500.0, 700.0), now=NOW)


def test_layout_cursor_advance():
    cursor = LayoutCursor(Bounds(0, 0, 100, 50))
    assert cursor.advance(10) == 10
    assert cursor.advance(2.5) == 12.5
    assert cursor.remaining == 37.5


def test_header_lines(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    title, stats = render_pass.header_lines()

    assert title[0].startswith("netreport ")
    assert title[1] == "Input: sample.pcap"
    assert title[2] == "Generated: 2024-01-02 03:04:05"
    assert stats[0].startswith("Date range: ")
    assert " to " in stats[0]
    assert stats[1] == f"Packets analyzed: 10 ({sample_report.summary()['size']})"
    assert stats[2] == "Transports: IPv4 70.00% IPv6 20.00% ARP 10.00% Other 0.00%"


def test_header_advance(sample_report, surface):
    """Six lines of (text height + line space) plus two trailers of 4 line spaces."""
    render_pass = make_pass(sample_report, surface)
    render_pass.render_header()

    font = sample_report.config.header_font_size
    line_space = font * sample_report.config.line_space_factor
    assert render_pass.end_of_content == pytest.approx(6 * (font + line_space) + 8 * line_space)
    assert len(surface.texts) == 6
    assert render_pass.state is RenderState.HEADER_RENDERED


def test_header_with_no_packets(surface):
    report = OnePageReport(source_identifier="empty")
    render_pass = make_pass(report, surface)
    render_pass.render_header()

    texts = surface.text_values()
    assert "Packets analyzed: 0 (0.00 B)" in texts
    assert "Transports: IPv4 0.00% IPv6 0.00% ARP 0.00% Other 0.00%" in texts


def test_format_timestamp_out_of_range():
    assert format_timestamp(Timestamp(10**12, 5)) == UNKNOWN_TIME
    assert format_timestamp(Timestamp(0, 0)) != UNKNOWN_TIME


def test_header_with_unrepresentable_time(surface):
    """A timestamp past the last representable year shows a placeholder."""
    report = OnePageReport(source_identifier="far.pcap")
    report.ingest_packet(make_packet(sec=10**12, usec=5))
    render_pass = make_pass(report, surface)

    _, stats = render_pass.header_lines()
    assert stats[0] == f"Date range: {UNKNOWN_TIME} to {UNKNOWN_TIME}"
    render_pass.render_header()
    assert stats[0] in surface.text_values()



def test_full_band_sections_advance_by_height(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    render_pass.render_header()
    after_header = render_pass.end_of_content

    render_pass.render_bandwidth_histogram()
    assert render_pass.end_of_content == pytest.approx(after_header + 100.0)

    render_pass.render_map()
    assert render_pass.end_of_content == pytest.approx(after_header + 100.0)

    render_pass.render_packetfall()
    assert render_pass.end_of_content == pytest.approx(after_header + 200.0)


def test_map_draws_nothing(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    render_pass.render_header()
    render_pass.render_bandwidth_histogram()
    drawn = (len(surface.texts), len(surface.lines), len(surface.rects))

    render_pass.render_map()
    assert (len(surface.texts), len(surface.lines), len(surface.rects)) == drawn
    assert render_pass.state is RenderState.MAP_PLACEHOLDER


def _advance_to_ports(render_pass):
    render_pass.render_header()
    render_pass.render_bandwidth_histogram()
    render_pass.render_map()
    render_pass.render_packetfall()
    render_pass.render_address_histograms()


def test_pair_advances_by_taller_histogram(surface):
    """Histograms of 80 and 65 units move the cursor by 80."""
    report = OnePageReport(config=ReportConfig(histogram_show_top_n_text=0))
    report.src_port_histogram = FixedHeightHistogram(80.0)
    report.dst_port_histogram = FixedHeightHistogram(65.0)
    render_pass = make_pass(report, surface)
    _advance_to_ports(render_pass)

    before = render_pass.end_of_content
    render_pass.render_port_histograms()
    assert render_pass.end_of_content - before == pytest.approx(80.0)


def test_pair_bounds(surface):
    """Left pair member at x=0, right one flush right, same y and width."""
    report = OnePageReport()
    report.src_port_histogram = FixedHeightHistogram(100.0)
    report.dst_port_histogram = FixedHeightHistogram(100.0)
    render_pass = make_pass(report, surface)
    _advance_to_ports(render_pass)
    render_pass.render_port_histograms()

    left = report.src_port_histogram.rendered_bounds
    right = report.dst_port_histogram.rendered_bounds
    assert left.x == 0.0
    assert left.width == pytest.approx(500.0 / 2.5)
    assert right.x == pytest.approx(500.0 - 200.0)
    assert left.y == right.y
    assert left.height == right.height == 100.0


def test_dual_top_n_rows(surface):
    report = OnePageReport()
    render_pass = make_pass(report, surface)
    left_bounds = Bounds(0.0, 0.0, 200.0, 100.0)
    right_bounds = Bounds(300.0, 0.0, 200.0, 100.0)

    render_pass.render_dual_top_n(
        [("10.0.0.1", 2000), ("10.0.0.2", 1000)],
        [("443", 1), ("80", 1), ("22", 1), ("25", 1)],
        3000, 3, left_bounds, right_bounds)

    texts = surface.text_values()
    assert texts == [
        "1. 10.0.0.1 - 2,000 (66%)",
        "1. 443 - 1 (33%)",
        "2. 10.0.0.2 - 1,000 (33%)",
        "2. 80 - 1 (33%)",
        "3. 22 - 1 (33%)",
    ]
    # right column starts at the right histogram's x
    assert surface.texts[1][1] == 300.0
    # three rows of font height * 1.5, pad factor 1.0 adds nothing
    assert render_pass.end_of_content == pytest.approx(3 * 8.0 * 1.5)


def test_dual_top_n_zero_total(surface):
    """A zero total renders 0% instead of dividing by zero."""
    render_pass = make_pass(OnePageReport(), surface)
    render_pass.render_dual_top_n([("a", 5)], [("b", 7)], 0, 0,
                                  Bounds(0, 0, 10, 10), Bounds(20, 0, 10, 10))
    assert surface.text_values() == ["1. a - 5 (0%)", "1. b - 7 (0%)"]


def test_dual_top_n_empty_lists_do_not_move_cursor(surface):
    render_pass = make_pass(OnePageReport(), surface)
    render_pass.render_dual_top_n([], [], 0, 0, Bounds(0, 0, 10, 10), Bounds(20, 0, 10, 10))
    assert render_pass.end_of_content == 0.0
    assert surface.texts == []


def test_dual_top_n_pad_factor(surface):
    """With a pad factor above 1 the taller histogram adds extra space."""
    report = OnePageReport(config=ReportConfig(histogram_pad_factor_y=1.5,
                                               histogram_show_top_n_text=0))
    render_pass = make_pass(report, surface)
    render_pass.render_dual_top_n([], [], 0, 0, Bounds(0, 0, 10, 80), Bounds(20, 0, 10, 65))
    assert render_pass.end_of_content == pytest.approx(40.0)


def test_run_visits_every_state(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    end = render_pass.run()

    assert render_pass.state is RenderState.DONE
    assert end == render_pass.end_of_content
    texts = surface.text_values()
    assert "Top Source Addresses" in texts
    assert "Top Destination Ports" in texts
    assert "1. 443 - 8 (100%)" in texts


def test_out_of_order_step_raises(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    with pytest.raises(RenderStateError):
        render_pass.render_bandwidth_histogram()


def test_no_steps_after_done(sample_report, surface):
    render_pass = make_pass(sample_report, surface)
    render_pass.run()
    with pytest.raises(RenderStateError):
        render_pass.render_header()
    with pytest.raises(RenderStateError):
        render_pass.run()


def test_render_to_surface_applies_margin(sample_report, surface):
    render_pass = sample_report.render_to_surface(surface, now=NOW)

    pad = 611.0 * 0.05
    assert surface.translations == [(pad, pad)]
    assert render_pass.cursor.bounds.width == pytest.approx(611.0 - 2 * pad)
    assert render_pass.state is RenderState.DONE
