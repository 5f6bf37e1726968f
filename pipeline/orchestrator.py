"""Drive one batch end-to-end: resolve → load manifest → transform → publish.

All-or-nothing: any PipelineError propagates to the caller before the
manifest is written, and no later image is attempted.
"""
import logging
import time
from pathlib import Path

from models.artifacts import OutputArtifact
from models.manifest import VariantManifest
from models.request import TransformRequest
from pipeline import stage1_resolve, stage2_transform, stage3_publish

logger = logging.getLogger(__name__)


def run(request: TransformRequest, cwd: Path | None = None) -> list[OutputArtifact]:
    """Run the batch described by ``request``.

    ``cwd`` anchors every relative path in the request (inputs, base_dir,
    out_dir, manifest); it defaults to the process working directory.
    """
    start = time.perf_counter()
    cwd = cwd or Path.cwd()

    batch = stage1_resolve.run(request, cwd)

    manifest_path = _anchor(request.manifest, cwd)
    manifest = VariantManifest.load(manifest_path) if manifest_path is not None else None

    out_dir = _anchor(request.out_dir, cwd)
    artifacts = stage2_transform.run(request, batch, out_dir, manifest)

    if manifest is not None:
        stage3_publish.run(manifest, manifest_path)

    logger.info("Took %.2fs", time.perf_counter() - start)
    return artifacts


def _anchor(path: Path | None, cwd: Path) -> Path | None:
    if path is None or path.is_absolute():
        return path
    return cwd / path
