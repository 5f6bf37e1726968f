"""Stage 2: Transform — decode, resize and fan out each image to every format.

Each input is read, decoded and resized exactly once; the resized image is
then encoded once per requested format, in the order the caller gave them.
The first failure aborts the whole batch.

Naming:
    manifest mode   <out_dir>/<rel dir>/<stem>-<fingerprint>.<ext>
    simple mode     <out_dir>/<rel dir>/<stem>.<ext>   (fingerprint logged only)
"""
import logging
from collections.abc import Callable
from pathlib import Path

from PIL import Image

from imaging import avif, jpeg, png, resize, webp
from models.artifacts import OutputArtifact, ResolvedBatch, ResolvedImage
from models.manifest import VariantManifest
from models.request import OutputFormat, TransformRequest
from pipeline.errors import (
    MissingExtensionError,
    PipelineError,
    ReadError,
    UnsupportedFormatError,
    WriteError,
)
from pipeline.fingerprint import fingerprint, fingerprint_hex

logger = logging.getLogger(__name__)

_DECODERS: dict[str, Callable[[bytes], Image.Image]] = {
    "jpg": jpeg.decode,
    "jpeg": jpeg.decode,
    "png": png.decode,
}

FORMAT_SEEDS: dict[OutputFormat, int] = {
    OutputFormat.AVIF: avif.SEED,
    OutputFormat.JPEG: jpeg.SEED,
    OutputFormat.PNG: png.SEED,
    OutputFormat.WEBP: webp.SEED,
}


def run(
    request: TransformRequest,
    batch: ResolvedBatch,
    out_dir: Path,
    manifest: VariantManifest | None = None,
) -> list[OutputArtifact]:
    """Transform every resolved image. ``manifest`` is updated in place."""
    artifacts: list[OutputArtifact] = []
    written: set[Path] = set()

    for image in batch.images:
        for artifact in _transform_image(request, image, out_dir, manifest):
            if artifact.path in written:
                logger.warning("%s was already written in this run; overwriting", artifact.path)
            written.add(artifact.path)
            artifacts.append(artifact)

    logger.info("Stage 2 complete → %d file(s) in %s", len(artifacts), out_dir)
    return artifacts


# ---------------------------------------------------------------------------
# Per-image processing
# ---------------------------------------------------------------------------

def _transform_image(
    request: TransformRequest,
    image: ResolvedImage,
    out_dir: Path,
    manifest: VariantManifest | None,
) -> list[OutputArtifact]:
    logger.debug("Processing %s", image.path)
    data = _read_source(image.path)
    decoded = decode_image(image, data)

    logger.debug("Resizing %s", image.path)
    resized = _with_path(
        image.path, resize.resize, decoded, request.width, request.height, request.preserve_aspect
    )

    artifacts = []
    for fmt in request.formats:
        artifact = _emit_format(request, image, data, resized, fmt, out_dir)
        if manifest is not None:
            manifest.record(image.logical_name, request.variant, fmt.ext, artifact.relative_path)
        artifacts.append(artifact)
    return artifacts


def decode_image(image: ResolvedImage, data: bytes) -> Image.Image:
    """Pick a decoder from the file extension and decode ``data``."""
    ext = image.extension
    if ext is None:
        raise MissingExtensionError(
            "must have an extension to guess the image format from", image.path
        )
    decoder = _DECODERS.get(ext)
    if decoder is None:
        raise UnsupportedFormatError(f"unsupported image format: {ext}", image.path)
    return _with_path(image.path, decoder, data)


def _emit_format(
    request: TransformRequest,
    image: ResolvedImage,
    data: bytes,
    resized: Image.Image,
    fmt: OutputFormat,
    out_dir: Path,
) -> OutputArtifact:
    value = fingerprint(data, FORMAT_SEEDS[fmt], resize.SEED, request.variant)
    digest = fingerprint_hex(value)

    out_file = output_path(out_dir, image.relative, fmt, digest if request.manifest_mode else None)
    logger.debug("Writing %s (fingerprint %s)", out_file, digest)
    if out_file.resolve() == image.path.resolve():
        raise WriteError("output would overwrite its own source image", out_file)

    try:
        out_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise WriteError(f"failed to create directory: {exc}", out_file.parent) from exc

    encoded = _with_path(image.path, encode, resized, fmt, request)

    try:
        out_file.write_bytes(encoded)
    except OSError as exc:
        raise WriteError(f"failed to write: {exc}", out_file) from exc

    return OutputArtifact(
        source=image.path,
        format=fmt,
        fingerprint=digest,
        path=out_file,
        relative_path=out_file.relative_to(out_dir).as_posix(),
        size_bytes=len(encoded),
        width=resized.width,
        height=resized.height,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def output_path(out_dir: Path, relative: Path, fmt: OutputFormat, digest: str | None) -> Path:
    """Re-root ``relative`` under ``out_dir`` with the format's extension.

    ``digest`` is appended to the stem when given (manifest mode).
    """
    stem = relative.stem if digest is None else f"{relative.stem}-{digest}"
    return out_dir / relative.parent / f"{stem}.{fmt.ext}"


def encode(image: Image.Image, fmt: OutputFormat, request: TransformRequest) -> bytes:
    if fmt is OutputFormat.AVIF:
        return avif.encode(image, request.avif)
    if fmt is OutputFormat.JPEG:
        return jpeg.encode(image, request.jpeg)
    if fmt is OutputFormat.PNG:
        return png.encode(image)
    return webp.encode(image, request.webp)


def _read_source(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ReadError(f"failed to read ({exc})", path) from exc


def _with_path(path: Path, func, *args):
    """Call ``func`` and attach ``path`` to any PipelineError raised without one."""
    try:
        return func(*args)
    except PipelineError as exc:
        if exc.path is None:
            exc.path = path
        raise
