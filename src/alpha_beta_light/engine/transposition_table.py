"""
Transposition table for caching alpha-beta search results.

The table remembers values computed for positions already searched, so a
position reached again through another move order does not have to be
searched twice.

Key concepts:
- Entry kinds: EXACT (one minimax value) or BOUNDS (lower, upper); a table
  holds one kind only, chosen at construction
- Buckets: `size` buckets indexed by hash % size, at most BUCKET_SIZE entries each
- Replacement policy: depth-preferred (shallower entries make room for deeper ones)
- Lookups match on the raw hash only; two different positions with equal
  hashes share an entry. This is an accepted approximation, not an error.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from alpha_beta_light.errors import ConfigurationError, TableKindError


BUCKET_SIZE = 5


@dataclass
class TTEntry:
    """
    Transposition table entry.

    Attributes:
        hash: Raw hash of the stored position
        depth: Depth of the position when the entry was stored
    """
    hash: int
    depth: int

    def __post_init__(self):
        if self.depth < 0:
            raise ValueError(f"Entry depth must be non-negative, got {self.depth}")

    def update(self, entry: 'TTEntry'):
        """Take over depth and payload of a same-kind entry."""
        if type(entry) is not type(self):
            raise TableKindError(
                f"Cannot update {type(self).__name__} from {type(entry).__name__}"
            )
        self.depth = entry.depth

    def bounds(self) -> Tuple[float, float]:
        raise NotImplementedError


@dataclass
class ExactEntry(TTEntry):
    """Exact minimax value."""
    value: float = 0.0

    def update(self, entry: 'TTEntry'):
        super().update(entry)
        self.value = entry.value

    def bounds(self) -> Tuple[float, float]:
        return (self.value, self.value)


@dataclass
class BoundsEntry(TTEntry):
    """Lower and upper bound of the minimax value."""
    lower: float = 0.0
    upper: float = 0.0

    def update(self, entry: 'TTEntry'):
        super().update(entry)
        self.lower = entry.lower
        self.upper = entry.upper

    def bounds(self) -> Tuple[float, float]:
        return (self.lower, self.upper)


class TranspositionTable:
    """
    Hash-bucketed transposition table with depth-preferred replacement.

    Invariants:
    - no bucket holds more than BUCKET_SIZE entries
    - a bucket holds at most one entry per raw hash value

    A table belongs to one search session; it is not thread-safe and must
    not be shared between concurrent searches.
    """

    def __init__(self, size: int = 100_000, use_exact_value: bool = False):
        """
        Initialize transposition table.

        Args:
            size: Number of buckets
            use_exact_value: Store exact values instead of (lower, upper) bounds
        """
        if size <= 0:
            raise ConfigurationError(f"Transposition table size must be positive, got {size}")

        self.size = size
        self.use_exact_value = use_exact_value
        self.table: List[Optional[List[TTEntry]]] = [None] * size

        # Statistics
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.replacements = 0
        self.dropped = 0

    def _get_index(self, hash_value: int) -> int:
        # Python's modulo is already non-negative for a positive size
        return hash_value % self.size

    def put_bounds(self, key, lower: float, upper: float, depth: int):
        """
        Store bounds of the minimax value of `key` found at `depth`.

        Raises:
            TableKindError: the table stores exact values
        """
        if key is None:
            raise ValueError("Transposition table key must not be None")
        if self.use_exact_value:
            raise TableKindError("Table stores exact values, use put_exact()")
        self._put(BoundsEntry(hash(key), depth, lower, upper))

    def put_exact(self, key, value: float, depth: int):
        """
        Store the exact minimax value of `key` found at `depth`.

        Raises:
            TableKindError: the table stores bounds
        """
        if key is None:
            raise ValueError("Transposition table key must not be None")
        if not self.use_exact_value:
            raise TableKindError("Table stores bounds, use put_bounds()")
        self._put(ExactEntry(hash(key), depth, value))

    def get(self, key) -> Optional[Tuple[float, float]]:
        """
        Look up `key` by raw hash.

        Returns:
            (lower, upper) for bounds entries, (value, value) for exact
            entries, None if nothing is stored under the hash
        """
        if key is None:
            raise ValueError("Transposition table key must not be None")
        hash_value = hash(key)
        bucket = self.table[self._get_index(hash_value)]
        if bucket is not None:
            for entry in bucket:
                if entry.hash == hash_value:
                    self.hits += 1
                    return entry.bounds()
        self.misses += 1
        return None

    def _put(self, entry: TTEntry):
        index = self._get_index(entry.hash)
        bucket = self.table[index]
        if bucket is None:
            self.table[index] = [entry]
            self.stores += 1
            return

        # Same position (by hash): deeper or equal search wins
        min_entry = None
        for existing in bucket:
            if existing.hash == entry.hash:
                if existing.depth <= entry.depth:
                    existing.update(entry)
                    self.stores += 1
                else:
                    self.dropped += 1
                return
            if min_entry is None or existing.depth < min_entry.depth:
                min_entry = existing

        if len(bucket) < BUCKET_SIZE:
            bucket.append(entry)
            self.stores += 1
        elif min_entry.depth < entry.depth:
            # Full bucket: evict the shallowest entry if the new one is deeper
            bucket.remove(min_entry)
            bucket.append(entry)
            self.stores += 1
            self.replacements += 1
        else:
            self.dropped += 1

    def clear(self):
        """Discard all entries (use between independent searches)."""
        self.table = [None] * self.size
        self._reset_stats()

    def _reset_stats(self):
        self.hits = 0
        self.misses = 0
        self.stores = 0
        self.replacements = 0
        self.dropped = 0

    def bucket(self, index: int) -> List[TTEntry]:
        """Entries of one bucket (a copy), for inspection."""
        return list(self.table[index] or ())

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self.table if bucket is not None)

    def get_stats(self) -> dict:
        """
        Get transposition table statistics.

        Returns:
            Dictionary with hits, misses, hit rate, stores, replacements, dropped
        """
        total_queries = self.hits + self.misses
        hit_rate = self.hits / total_queries if total_queries > 0 else 0.0

        return {
            'hits': self.hits,
            'misses': self.misses,
            'hit_rate': hit_rate,
            'stores': self.stores,
            'replacements': self.replacements,
            'dropped': self.dropped,
            'buckets': self.size,
        }

    def get_fill_rate(self) -> float:
        """
        Percentage of entry slots occupied (0-100).
        """
        return (len(self) / (self.size * BUCKET_SIZE)) * 100.0
