"""Error taxonomy for the variant pipeline.

Library code only raises these; ``run_pipeline.main`` is the single place
that logs the failure and terminates the process. Every error carries the
stage it came from and, where there is one, the offending path.
"""
from pathlib import Path


class PipelineError(Exception):
    stage = "pipeline"

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class ConfigError(PipelineError):
    stage = "config"


# ---------------------------------------------------------------------------
# Path sandbox
# ---------------------------------------------------------------------------

class PathError(PipelineError):
    stage = "resolve"


class NotAFileError(PathError):
    pass


class OutsideBaseError(PathError):
    pass


class InvalidBaseDirError(PathError):
    pass


# ---------------------------------------------------------------------------
# Filesystem
# ---------------------------------------------------------------------------

class PipelineIOError(PipelineError):
    stage = "io"


class ReadError(PipelineIOError):
    pass


class WriteError(PipelineIOError):
    pass


class ManifestReadError(PipelineIOError):
    pass


class ManifestWriteError(PipelineIOError):
    pass


# ---------------------------------------------------------------------------
# Transform stages
# ---------------------------------------------------------------------------

class DecodeError(PipelineError):
    stage = "decode"


class UnsupportedFormatError(DecodeError):
    pass


class MissingExtensionError(DecodeError):
    pass


class ResizeError(PipelineError):
    stage = "resize"


class EncodeError(PipelineError):
    stage = "encode"


class ManifestParseError(PipelineError):
    stage = "manifest"
