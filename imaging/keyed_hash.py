"""Seeded 64-bit hash used for output fingerprints (xxHash64)."""
import xxhash

MASK_64 = (1 << 64) - 1


def keyed_hash(data: bytes, seed: int) -> int:
    """Return xxh64(data) under ``seed`` as an unsigned 64-bit integer.

    ``seed`` is reduced modulo 2**64 so callers may add seeds freely.
    """
    return xxhash.xxh64_intdigest(data, seed=seed & MASK_64)
