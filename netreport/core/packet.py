"""
Packet record passed from the capture loop to the report.

A PacketInfo carries only what the report needs: when the packet was
captured, how many bytes were stored, the link-layer ethertype, and the
network-layer bytes (which may be empty or garbage).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


# Ethertype constants
ETHERTYPE_IP = 0x0800
ETHERTYPE_ARP = 0x0806
ETHERTYPE_VLAN = 0x8100
ETHERTYPE_IPV6 = 0x86DD


def ethertype_name(ether_type: int) -> str:
    """Short display name for an ethertype."""
    names = {
        ETHERTYPE_IP: "IPv4",
        ETHERTYPE_IPV6: "IPv6",
        ETHERTYPE_ARP: "ARP",
        ETHERTYPE_VLAN: "802.1Q",
    }
    return names.get(ether_type, f"0x{ether_type:04x}")


@dataclass(frozen=True)
class Timestamp:
    """Capture time split into whole seconds and microseconds."""
    sec: int = 0
    usec: int = 0

    @classmethod
    def from_float(cls, ts: float) -> Timestamp:
        sec = int(ts)
        usec = int(round((ts - sec) * 1_000_000))
        if usec >= 1_000_000:
            sec += 1
            usec -= 1_000_000
        return cls(sec=sec, usec=usec)

    def to_float(self) -> float:
        return self.sec + self.usec / 1_000_000

    def to_datetime(self) -> datetime:
        """Local time of the whole-second component."""
        return datetime.fromtimestamp(self.sec)

    @property
    def is_set(self) -> bool:
        return self.sec != 0


@dataclass
class PacketInfo:
    """One captured packet as seen by the report."""
    timestamp: Timestamp
    caplen: int
    ether_type: int
    ip_data: bytes = b""
    wirelen: int = 0

    def __post_init__(self):
        if not self.wirelen:
            self.wirelen = self.caplen

    @property
    def ts(self) -> float:
        """Timestamp as float seconds."""
        return self.timestamp.to_float()
