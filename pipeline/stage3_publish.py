"""Stage 3: Publish — persist the manifest once the whole batch succeeded.

Reads:  in-memory VariantManifest (loaded at run start, updated by Stage 2)
Writes: the --manifest file, overwritten wholesale

Never called after a failure, so an aborted run leaves the previous
manifest on disk untouched. There is no inter-process locking: two runs
sharing one manifest file race and the last writer wins.
"""
import logging
from pathlib import Path

from models.manifest import VariantManifest

logger = logging.getLogger(__name__)


def run(manifest: VariantManifest, path: Path) -> Path:
    manifest.save(path)
    logger.info("Stage 3 complete → %s", path)
    logger.info("  Images:  %d", len(manifest.root))
    logger.info("  Entries: %d", manifest.leaf_count)
    return path
