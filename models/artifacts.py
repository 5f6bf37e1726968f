from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from models.request import OutputFormat


class ResolvedImage(BaseModel):
    """An input image that passed the path sandbox.

    ``path`` is absolute and lies inside the base directory; ``relative`` is
    the same file expressed relative to that base (e.g. ``animals/cat.png``).
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    relative: Path

    @property
    def logical_name(self) -> str:
        """Manifest key: base-relative path without extension, ``/``-separated."""
        return self.relative.with_suffix("").as_posix()

    @property
    def extension(self) -> str | None:
        suffix = self.path.suffix
        return suffix[1:].lower() if suffix else None


class ResolvedBatch(BaseModel):
    base_dir: Path
    images: list[ResolvedImage] = Field(default_factory=list)


class OutputArtifact(BaseModel):
    """One encoded file written by Stage 2."""

    source: Path
    format: OutputFormat
    fingerprint: str  # 16 lowercase hex chars
    path: Path  # absolute
    relative_path: str  # relative to out_dir, "/"-separated; the manifest leaf value
    size_bytes: int = Field(ge=0)
    width: int
    height: int
