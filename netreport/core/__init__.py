"""Core netreport modules."""

from netreport.core.packet import (
    ETHERTYPE_ARP,
    ETHERTYPE_IP,
    ETHERTYPE_IPV6,
    ETHERTYPE_VLAN,
    PacketInfo,
    Timestamp,
    ethertype_name,
)
from netreport.core.reader import PcapReader, LinkLayerType, link_to_packet_info, build_report

__all__ = [
    'ETHERTYPE_ARP',
    'ETHERTYPE_IP',
    'ETHERTYPE_IPV6',
    'ETHERTYPE_VLAN',
    'PacketInfo',
    'Timestamp',
    'ethertype_name',
    'PcapReader',
    'LinkLayerType',
    'link_to_packet_info',
    'build_report',
]
