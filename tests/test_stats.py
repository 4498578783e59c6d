"""Test the histogram collaborators and the address tree."""

import socket

import numpy as np
import pytest

from conftest import make_packet

from netreport.protocols.transport import TCPSegment
from netreport.render.plot import PlotStyle
from netreport.render.surface import Bounds
from netreport.stats import (
    AddressHistogram,
    AddressTree,
    BandwidthHistogram,
    CountHistogram,
    Direction,
    PacketFall,
    PortHistogram,
)


def ip4(text):
    return socket.inet_pton(socket.AF_INET, text)


def ip6(text):
    return socket.inet_pton(socket.AF_INET6, text)


# ── CountHistogram ──

def test_count_histogram_ranking():
    """Ranked by count descending, ties by label."""
    hist = CountHistogram(max_bars=3)
    for key, n in [("b", 5), ("a", 5), ("c", 9), ("d", 1)]:
        hist.increment(key, n)

    assert hist.get_top_list() == [("c", 9), ("a", 5), ("b", 5)]
    assert hist.get_top_list(1) == [("c", 9)]
    assert hist.get_count_sum() == 20
    assert len(hist) == 4
    assert hist["a"] == 5


def test_count_histogram_render(surface):
    hist = CountHistogram()
    hist.increment("x", 3)
    hist.increment("y", 1)
    height = hist.render(surface, Bounds(0, 0, 200, 100), PlotStyle(title="T"))

    assert height == 100
    assert len(surface.rects) == 2
    assert "T" in surface.text_values()


def test_empty_histogram_renders_no_data(surface):
    CountHistogram().render(surface, Bounds(0, 0, 200, 100), PlotStyle())
    assert "no data" in surface.text_values()
    assert surface.rects == []


# ── AddressTree ──

def test_address_tree_rejects_bad_length():
    with pytest.raises(ValueError):
        AddressTree().add(b"\x01\x02\x03")


def test_address_tree_counts():
    tree = AddressTree()
    tree.add(ip4("10.0.0.1"))
    tree.add(ip4("10.0.0.1"))
    tree.add(ip4("10.0.0.2"))
    tree.add(ip6("2001:db8::1"))

    assert tree.insertions == 4
    assert tree.count(ip4("10.0.0.1")) == 2
    assert tree.count(ip4("10.9.9.9")) == 0
    assert tree.distinct_addresses() == 3


def test_address_tree_summary_full_addresses():
    """Few addresses are listed individually."""
    tree = AddressTree()
    for addr, n in [("10.0.0.1", 5), ("10.0.0.2", 3), ("192.168.1.1", 1)]:
        for _ in range(n):
            tree.add(ip4(addr))

    assert tree.summarize(10) == [("10.0.0.1", 5), ("10.0.0.2", 3), ("192.168.1.1", 1)]


def test_address_tree_summary_aggregates_prefixes():
    """More addresses than entries roll up into prefixes that cover everything."""
    tree = AddressTree()
    for i in range(1, 21):
        tree.add(ip4(f"10.0.0.{i}"))
    tree.add(ip4("172.16.0.1"))

    summary = tree.summarize(3)
    assert len(summary) <= 3
    assert sum(count for _, count in summary) == tree.insertions
    assert summary[0] == ("10.0.0.0/24", 20)
    assert ("172.16.0.1", 1) in summary


def test_address_tree_summary_empty():
    assert AddressTree().summarize(5) == []


def test_format_prefix():
    assert AddressTree.format_prefix((4,)) == "0.0.0.0/0"
    assert AddressTree.format_prefix((4, 10, 1)) == "10.1.0.0/16"
    assert AddressTree.format_prefix((16, 0x20, 0x01)) == "2001::/16"


# ── AddressHistogram / PortHistogram ──

def test_address_histogram_from_tree(surface):
    tree = AddressTree()
    for _ in range(3):
        tree.add(ip4("10.0.0.1"))
    tree.add(ip4("10.0.0.2"))

    hist = AddressHistogram(Direction.SOURCE, "Top Source Addresses")
    height = hist.render_from_tree(surface, Bounds(0, 0, 200, 100), tree)

    assert height == 100
    assert hist.get_top_list() == [("10.0.0.1", 3), ("10.0.0.2", 1)]
    assert hist.get_count_sum() == 4

    # rendering again does not double count
    hist.render_from_tree(surface, Bounds(0, 0, 200, 100), tree)
    assert hist.get_count_sum() == 4


def test_port_histogram_direction():
    src = PortHistogram(Direction.SOURCE)
    dst = PortHistogram(Direction.DESTINATION)
    for segment in (TCPSegment(sport=5000, dport=80), TCPSegment(sport=5001, dport=80)):
        src.ingest(segment)
        dst.ingest(segment)

    assert dst.get_top_list() == [("80", 2)]
    assert src.get_top_list() == [("5000", 1), ("5001", 1)]


# ── BandwidthHistogram / PacketFall ──

def test_bandwidth_buckets():
    hist = BandwidthHistogram(bucket_count=4)
    tcp = TCPSegment(sport=1, dport=2)
    hist.ingest(make_packet(sec=100, usec=0, caplen=100), tcp)
    hist.ingest(make_packet(sec=101, usec=0, caplen=50), None)
    hist.ingest(make_packet(sec=104, usec=0, caplen=10), tcp)

    edges, all_bytes, tcp_bytes = hist.buckets()
    assert len(edges) == 5
    assert edges[-1] == pytest.approx(4.0)
    assert all_bytes.sum() == 160
    assert tcp_bytes.sum() == 110
    assert all_bytes[0] == 100
    assert all_bytes[1] == 50
    assert hist.tcp_packet_count == 2


def test_bandwidth_single_instant():
    hist = BandwidthHistogram(bucket_count=2)
    hist.ingest(make_packet(sec=5, caplen=70), None)
    _, all_bytes, _ = hist.buckets()
    assert all_bytes.sum() == 70


def test_bandwidth_render_empty(surface):
    assert BandwidthHistogram().render(surface, Bounds(0, 0, 300, 100)) == 100


def test_packetfall_positions(surface):
    fall = PacketFall()
    fall.ingest(make_packet(sec=10, caplen=100))
    fall.ingest(make_packet(sec=12, caplen=50))
    fall.ingest(make_packet(sec=14, caplen=25))

    x, heights = fall.positions()
    np.testing.assert_allclose(x, [0.0, 0.5, 1.0])
    np.testing.assert_allclose(heights, [1.0, 0.5, 0.25])

    fall.render(surface, Bounds(0, 0, 100, 50))
    # axis plus one tick per packet
    assert len(surface.lines) == 4
