"""Output fingerprints.

A fingerprint folds together everything that determines an output's bytes:
the source file, the resize stage, the codec stage and the variant name.
Each stage contributes its own SEED constant; the seeds are summed so that
bumping one stage changes exactly the fingerprints that pass through it.
"""
from imaging.keyed_hash import MASK_64, keyed_hash

HEX_WIDTH = 16


def combined_seed(format_seed: int, resize_seed: int) -> int:
    return (resize_seed + format_seed) & MASK_64


def fingerprint(
    source: bytes,
    format_seed: int,
    resize_seed: int,
    variant: str | None = None,
) -> int:
    """Return the 64-bit fingerprint of ``source`` under the given stage seeds."""
    seed = combined_seed(format_seed, resize_seed)
    value = keyed_hash(source, seed)
    if variant is not None:
        value = (value + keyed_hash(variant.encode("utf-8"), seed)) & MASK_64
    return value


def fingerprint_hex(value: int) -> str:
    """Lowercase hex of the big-endian bytes, always HEX_WIDTH characters."""
    return (value & MASK_64).to_bytes(8, "big").hex()
