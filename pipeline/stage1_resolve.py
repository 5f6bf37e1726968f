"""Stage 1: Resolve — confine every input image to the base directory.

Runs before any decode or encode work so a bad path aborts the batch
without producing output. Both the base directory and every candidate are
passed through ``Path.resolve()`` so symlinks are treated the same way on
both sides of the containment check.
"""
import logging
from pathlib import Path

from models.artifacts import ResolvedBatch, ResolvedImage
from models.request import TransformRequest
from pipeline.errors import InvalidBaseDirError, NotAFileError, OutsideBaseError

logger = logging.getLogger(__name__)


def run(request: TransformRequest, cwd: Path) -> ResolvedBatch:
    """Resolve the base directory and all input images, in caller order."""
    base = resolve_base_dir(request.base_dir, cwd)
    logger.debug("Base dir: %s", base)

    images = [
        ResolvedImage(path=path, relative=path.relative_to(base))
        for path in (resolve_image_path(candidate, cwd, base) for candidate in request.images)
    ]

    logger.info("Stage 1 complete → %d image(s) under %s", len(images), base)
    return ResolvedBatch(base_dir=base, images=images)


def resolve_base_dir(base_dir: Path | None, cwd: Path) -> Path:
    if base_dir is None:
        return cwd.resolve()
    path = base_dir if base_dir.is_absolute() else cwd / base_dir
    if not path.is_dir():
        raise InvalidBaseDirError("base directory is not a valid directory", base_dir)
    return path.resolve()


def resolve_image_path(candidate: Path, cwd: Path, base: Path) -> Path:
    """Return the absolute, resolved path of ``candidate``.

    ``base`` must already be resolved (see resolve_base_dir).
    """
    path = candidate if candidate.is_absolute() else cwd / candidate
    if not path.is_file():
        raise NotAFileError("not a valid file", path)
    resolved = path.resolve()
    if not resolved.is_relative_to(base):
        raise OutsideBaseError(f"outside of the base directory {base}", path)
    return resolved
