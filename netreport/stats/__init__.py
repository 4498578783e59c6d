"""Statistics collected during ingestion and drawn on the report."""

from netreport.stats.count_histogram import CountHistogram, CountPair, Direction
from netreport.stats.address_tree import AddressTree
from netreport.stats.address_histogram import AddressHistogram
from netreport.stats.port_histogram import PortHistogram
from netreport.stats.bandwidth_histogram import BandwidthHistogram
from netreport.stats.packetfall import PacketFall

__all__ = [
    'CountHistogram',
    'CountPair',
    'Direction',
    'AddressTree',
    'AddressHistogram',
    'PortHistogram',
    'BandwidthHistogram',
    'PacketFall',
]
