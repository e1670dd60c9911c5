"""
Unit tests for the transposition table.

Tests verify:
1. Buckets never exceed BUCKET_SIZE entries
2. Depth-preferred replacement, both for the same hash and for full buckets
3. Exact and bounds tables reject the other kind of entry
4. Lookups match on the raw hash only
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / 'src'))

from alpha_beta_light.engine.transposition_table import (
    BUCKET_SIZE, BoundsEntry, ExactEntry, TranspositionTable
)
from alpha_beta_light.errors import ConfigurationError, TableKindError


class FixedHash:
    """Distinct objects sharing one hash value."""

    def __init__(self, name, hash_value):
        self.name = name
        self.hash_value = hash_value

    def __hash__(self):
        return self.hash_value

    def __eq__(self, other):
        return isinstance(other, FixedHash) and self.name == other.name


def snapshot(table, index=0):
    return [(e.hash, e.depth, e.bounds()) for e in table.bucket(index)]


class TestConstruction:
    """Test table construction and argument checks."""

    def test_rejects_non_positive_size(self):
        with pytest.raises(ConfigurationError):
            TranspositionTable(size=0)
        with pytest.raises(ConfigurationError):
            TranspositionTable(size=-3)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            TranspositionTable(size=0)

    def test_none_key_rejected(self):
        tt = TranspositionTable(size=10)
        with pytest.raises(ValueError):
            tt.put_bounds(None, 0.0, 1.0, 1)
        with pytest.raises(ValueError):
            tt.get(None)

    def test_negative_depth_rejected(self):
        tt = TranspositionTable(size=10)
        with pytest.raises(ValueError):
            tt.put_bounds(3, 0.0, 1.0, -1)


class TestStoreAndGet:
    """Test basic storage."""

    def test_store_and_get_bounds(self):
        tt = TranspositionTable(size=16)
        tt.put_bounds('position', -2.0, 5.0, depth=3)

        assert tt.get('position') == (-2.0, 5.0)
        assert len(tt) == 1

    def test_missing_key_returns_none(self):
        tt = TranspositionTable(size=16)
        assert tt.get('nothing') is None
        assert tt.get_stats()['misses'] == 1

    def test_exact_entries_return_value_twice(self):
        tt = TranspositionTable(size=16, use_exact_value=True)
        tt.put_exact('position', 7.5, depth=2)

        assert tt.get('position') == (7.5, 7.5)

    def test_hits_are_counted(self):
        tt = TranspositionTable(size=16)
        tt.put_bounds(1, 0.0, 0.0, 1)
        tt.get(1)
        tt.get(1)
        tt.get(2)

        stats = tt.get_stats()
        assert stats['hits'] == 2
        assert stats['misses'] == 1
        assert stats['hit_rate'] == pytest.approx(2 / 3)

    def test_clear_discards_entries(self):
        tt = TranspositionTable(size=4)
        for key in range(10):
            tt.put_bounds(key, 0.0, 1.0, 1)
        tt.clear()

        assert len(tt) == 0
        assert tt.get(3) is None
        assert tt.get_fill_rate() == 0.0


class TestTableKinds:
    """A table stores exactly one kind of entry."""

    def test_exact_put_on_bounds_table(self):
        tt = TranspositionTable(size=8)
        with pytest.raises(TableKindError):
            tt.put_exact(1, 3.0, 1)

    def test_bounds_put_on_exact_table(self):
        tt = TranspositionTable(size=8, use_exact_value=True)
        with pytest.raises(TableKindError):
            tt.put_bounds(1, 0.0, 3.0, 1)

    def test_entry_update_rejects_other_kind(self):
        entry = BoundsEntry(hash=1, depth=1, lower=0.0, upper=1.0)
        with pytest.raises(TableKindError):
            entry.update(ExactEntry(hash=1, depth=2, value=0.5))

    def test_table_kind_error_is_type_error(self):
        tt = TranspositionTable(size=8)
        with pytest.raises(TypeError):
            tt.put_exact(1, 3.0, 1)


class TestBucketInvariant:
    """No bucket ever holds more than BUCKET_SIZE entries."""

    def test_single_bucket_never_overflows(self):
        tt = TranspositionTable(size=1)
        for key in range(50):
            tt.put_bounds(key, 0.0, float(key), depth=key % 7)
            assert len(tt.bucket(0)) <= BUCKET_SIZE

        assert len(tt) == BUCKET_SIZE

    def test_many_buckets_never_overflow(self):
        tt = TranspositionTable(size=7)
        for key in range(500):
            tt.put_bounds(key * 13, 0.0, 1.0, depth=(key * 5) % 11)

        for index in range(tt.size):
            assert len(tt.bucket(index)) <= BUCKET_SIZE
        assert tt.get_fill_rate() <= 100.0

    def test_full_bucket_keeps_one_entry_per_hash(self):
        tt = TranspositionTable(size=1)
        for key in range(BUCKET_SIZE):
            tt.put_bounds(key, 0.0, 1.0, depth=1)
        tt.put_bounds(2, -4.0, 4.0, depth=9)

        hashes = [entry.hash for entry in tt.bucket(0)]
        assert len(hashes) == len(set(hashes)) == BUCKET_SIZE
        assert tt.get(2) == (-4.0, 4.0)


class TestDepthPreferredReplacement:
    """Deeper results displace shallower ones, never the other way round."""

    def test_shallower_entry_leaves_full_bucket_unchanged(self):
        tt = TranspositionTable(size=1)
        for key in range(BUCKET_SIZE):
            tt.put_bounds(key, 0.0, 1.0, depth=3)
        before = snapshot(tt)

        tt.put_bounds(100, 5.0, 5.0, depth=1)

        assert snapshot(tt) == before
        assert tt.get(100) is None
        assert tt.get_stats()['dropped'] == 1

    def test_equal_depth_does_not_evict_from_full_bucket(self):
        tt = TranspositionTable(size=1)
        for key in range(BUCKET_SIZE):
            tt.put_bounds(key, 0.0, 1.0, depth=3)
        before = snapshot(tt)

        tt.put_bounds(100, 5.0, 5.0, depth=3)

        assert snapshot(tt) == before

    def test_deeper_entry_evicts_shallowest(self):
        tt = TranspositionTable(size=1)
        for key, depth in zip(range(BUCKET_SIZE), (4, 2, 5, 3, 6)):
            tt.put_bounds(key, 0.0, 1.0, depth=depth)

        tt.put_bounds(100, 5.0, 5.0, depth=3)

        hashes = {entry.hash for entry in tt.bucket(0)}
        assert 1 not in hashes  # depth 2 was the shallowest
        assert tt.get(100) == (5.0, 5.0)
        assert tt.get_stats()['replacements'] == 1

    def test_same_hash_shallower_is_dropped(self):
        tt = TranspositionTable(size=8)
        tt.put_bounds('node', 1.0, 2.0, depth=4)
        tt.put_bounds('node', -9.0, 9.0, depth=2)

        assert tt.get('node') == (1.0, 2.0)
        assert len(tt) == 1

    def test_same_hash_equal_or_deeper_overwrites(self):
        tt = TranspositionTable(size=8)
        tt.put_bounds('node', 1.0, 2.0, depth=4)
        tt.put_bounds('node', 3.0, 3.0, depth=4)
        assert tt.get('node') == (3.0, 3.0)

        tt.put_bounds('node', 0.0, 8.0, depth=6)
        assert tt.get('node') == (0.0, 8.0)
        assert tt.bucket(tt._get_index(hash('node')))[0].depth == 6
        assert len(tt) == 1


class TestHashOnlyLookup:
    """Entries are matched by raw hash, without comparing the keys."""

    def test_colliding_keys_share_an_entry(self):
        tt = TranspositionTable(size=32)
        first = FixedHash('first', 77)
        second = FixedHash('second', 77)
        assert first != second

        tt.put_bounds(first, -1.0, 1.0, depth=2)

        assert tt.get(second) == (-1.0, 1.0)

    def test_same_bucket_different_hash_are_separate(self):
        tt = TranspositionTable(size=10)
        tt.put_bounds(3, 0.0, 0.0, depth=1)
        tt.put_bounds(13, 1.0, 1.0, depth=1)

        assert tt.get(3) == (0.0, 0.0)
        assert tt.get(13) == (1.0, 1.0)
        assert len(tt.bucket(3)) == 2

    def test_negative_hashes_index_into_table(self):
        tt = TranspositionTable(size=10)
        tt.put_bounds(FixedHash('neg', -7), 2.0, 3.0, depth=1)

        assert len(tt.bucket(3)) == 1
        assert tt.get(FixedHash('other', -7)) == (2.0, 3.0)
