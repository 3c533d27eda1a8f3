"""
Integration Tests for Multiset Hash Workflows

Tests realistic uses: comparing replicas that hold the same objects in
different orders, streaming large objects in chunks, and accumulating shards
in parallel before a single final compression.
"""

import random
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List

import pytest

from multiset_hash import (
    MultisetHash,
    ProtocolViolation,
    RistrettoPoint,
    Settings,
    get_digest_factory,
)


def hash_counter(counter: Dict[bytes, int], **kwargs) -> bytes:
    hasher = MultisetHash(**kwargs)
    for element, multiplicity in counter.items():
        hasher.add(element, multiplicity)
    return hasher.finalize()


def hash_shard(objects: List[bytes]) -> bytes:
    """Accumulate one shard and ship its running sum."""
    hasher = MultisetHash()
    for obj in objects:
        hasher.add(obj, 1)
    return hasher.running_sum.compress()


class TestReplicaComparison:
    """Two replicas agree iff they hold the same multiset."""

    @pytest.fixture
    def objects(self):
        rng = random.Random(1234)
        pool = [f"object-{i:04d}".encode() for i in range(40)]
        # Duplicates on purpose
        return [rng.choice(pool) for _ in range(120)]

    def test_shuffled_replicas_match(self, objects):
        replica_a = list(objects)
        replica_b = list(objects)
        random.Random(99).shuffle(replica_b)

        h_a = MultisetHash()
        for obj in replica_a:
            h_a.add(obj)
        h_b = MultisetHash()
        for obj in replica_b:
            h_b.add(obj)

        assert h_a.finalize() == h_b.finalize()

    def test_counted_matches_one_by_one(self, objects):
        one_by_one = MultisetHash()
        for obj in objects:
            one_by_one.add(obj, 1)

        assert one_by_one.finalize() == hash_counter(Counter(objects))

    def test_missing_duplicate_detected(self, objects):
        counts = Counter(objects)
        duplicated = next(obj for obj, n in counts.items() if n > 1)
        damaged = Counter(counts)
        damaged[duplicated] -= 1

        assert hash_counter(counts) != hash_counter(damaged)

    def test_extra_object_detected(self, objects):
        counts = Counter(objects)
        extra = Counter(counts)
        extra[b"intruder"] += 1

        assert hash_counter(counts) != hash_counter(extra)

    @pytest.mark.parametrize("name", ["blake2b", "cryptography-sha3_512"])
    def test_replicas_match_with_other_digests(self, objects, name):
        factory = get_digest_factory(name)
        counts = Counter(objects)
        reordered = dict(sorted(counts.items(), reverse=True))

        assert hash_counter(counts, digest_factory=factory) == hash_counter(
            reordered, digest_factory=factory
        )
        assert hash_counter(counts, digest_factory=factory) != hash_counter(counts)


class TestStreaming:
    """Large elements fed in chunks and buffers reused across multisets."""

    def test_large_object_in_chunks(self):
        blob = bytes(range(256)) * 512
        chunked = MultisetHash()
        chunked.add(b"small", 2)
        for offset in range(0, len(blob), 4096):
            chunked.update(blob[offset:offset + 4096])
        chunked.end_update(3)

        whole = MultisetHash()
        whole.add(blob, 3)
        whole.add(b"small", 2)

        assert chunked.finalize() == whole.finalize()

    def test_interleaving_requires_commit(self):
        hasher = MultisetHash()
        hasher.update(b"first half")
        with pytest.raises(ProtocolViolation):
            hasher.add(b"another element", 1)
        hasher.update(b" second half")
        hasher.end_update(1)

        expected = MultisetHash()
        expected.add(b"first half second half", 1)
        assert hasher.finalize() == expected.finalize()

    def test_reused_hasher_over_many_multisets(self):
        batches = [
            Counter({b"a": 1, b"b": 2}),
            Counter(),
            Counter({b"c": 5}),
        ]
        hasher = MultisetHash()
        results = []
        for batch in batches:
            for element, multiplicity in batch.items():
                hasher.add(element, multiplicity)
            results.append(hasher.finalize_and_reset())

        assert results == [hash_counter(batch) for batch in batches]
        assert results[1] == bytes(32)


class TestShardedAccumulation:
    """Shards accumulated independently and merged before compression."""

    def test_parallel_shards_merge(self):
        objects = [f"row-{i % 17}".encode() for i in range(200)]
        shards = [objects[i::4] for i in range(4)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            partial_sums = list(pool.map(hash_shard, shards))

        combined = MultisetHash()
        for encoded in partial_sums:
            combined.merge_sum(RistrettoPoint.decompress(encoded))

        assert combined.finalize() == hash_counter(Counter(objects))

    def test_merge_hashers_from_settings(self):
        settings = Settings(_env_file=None, digest="blake2b")
        left = MultisetHash.from_settings(settings)
        right = MultisetHash.from_settings(settings)
        left.add(b"x", 2)
        right.add(b"y", 1)
        right.add(b"x", 1)

        left.merge(right)

        single = MultisetHash(get_digest_factory("blake2b"))
        single.add(b"y", 1)
        single.add(b"x", 3)
        assert left.finalize() == single.finalize()
