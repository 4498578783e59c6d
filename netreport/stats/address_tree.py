"""
Prefix-aggregating address tree.

Addresses are inserted as raw 4-byte (IPv4) or 16-byte (IPv6) strings and
stored in a byte-wise trie, so every node holds the packet count of one
/8-aligned prefix. summarize() turns the trie into a short list of
prefixes that together cover every insertion: heavy prefixes are split
into their children, light ones stay aggregated.
"""

from __future__ import annotations

import socket


class _Node:
    __slots__ = ('count', 'children')

    def __init__(self):
        self.count = 0
        self.children: dict[int, _Node] = {}


class AddressTree:
    """Byte-wise prefix trie over IPv4 and IPv6 addresses."""

    ADDRESS_LENGTHS = (4, 16)

    def __init__(self):
        # First level is keyed by address length, so IPv4 and IPv6 never mix
        self._root = _Node()

    def add(self, addr: bytes) -> None:
        """Count one packet for addr (4 or 16 raw bytes)."""
        addr = bytes(addr)
        if len(addr) not in self.ADDRESS_LENGTHS:
            raise ValueError(f"Address must be 4 or 16 bytes, got {len(addr)}")

        node = self._root
        node.count += 1
        for key in (len(addr),) + tuple(addr):
            child = node.children.get(key)
            if child is None:
                child = _Node()
                node.children[key] = child
            node = child
            node.count += 1

    @property
    def insertions(self) -> int:
        """Total number of add() calls."""
        return self._root.count

    def __len__(self) -> int:
        return self._root.count

    def count(self, addr: bytes) -> int:
        """Packets counted for an exact address."""
        node = self._root
        for key in (len(addr),) + tuple(addr):
            node = node.children.get(key)
            if node is None:
                return 0
        return node.count

    def distinct_addresses(self) -> int:
        """Number of distinct full addresses inserted."""
        total = 0
        stack = [(self._root, 0)]
        while stack:
            node, depth = stack.pop()
            if not node.children and depth > 1:
                total += 1
            stack.extend((child, depth + 1) for child in node.children.values())
        return total

    @staticmethod
    def format_prefix(path: tuple[int, ...]) -> str:
        """Label for a trie path: (addr_len, byte, byte, ...)."""
        addr_len = path[0]
        prefix = bytes(path[1:])
        family = socket.AF_INET if addr_len == 4 else socket.AF_INET6
        text = socket.inet_ntop(family, prefix + b'\x00' * (addr_len - len(prefix)))
        if len(prefix) == addr_len:
            return text
        return f"{text}/{len(prefix) * 8}"

    def summarize(self, max_entries: int = 10) -> list[tuple[str, int]]:
        """
        Partition the tree into at most max_entries prefixes.

        Starting from the whole tree, the heaviest prefix whose children
        still fit is repeatedly replaced by its children. Counts of the
        result always sum to insertions. Returns (label, count) pairs
        sorted by count descending then label.
        """
        if self._root.count == 0:
            return []

        # (path, node); the root itself is never a reportable entry
        entries = [((key,), child) for key, child in self._root.children.items()]
        max_entries = max(max_entries, len(entries))

        while True:
            candidates = sorted(
                (entry for entry in entries if entry[1].children),
                key=lambda entry: -entry[1].count,
            )
            for entry in candidates:
                path, node = entry
                if len(entries) - 1 + len(node.children) <= max_entries:
                    entries.remove(entry)
                    entries.extend((path + (key,), child) for key, child in node.children.items())
                    break
            else:
                break

        summary = [(self.format_prefix(path), node.count) for path, node in entries]
        summary.sort(key=lambda pair: (-pair[1], pair[0]))
        return summary
