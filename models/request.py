"""Transform request — the immutable description of one pipeline run.

Built once by the CLI (or a test) and passed unchanged through every stage.
"""
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from pipeline.errors import ConfigError


class OutputFormat(str, Enum):
    AVIF = "avif"
    JPEG = "jpg"
    PNG = "png"
    WEBP = "webp"

    @property
    def ext(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> "OutputFormat":
        """Parse a user-supplied format name. Accepts ``jpeg`` as an alias for ``jpg``."""
        key = name.strip().lower()
        if key == "jpeg":
            key = "jpg"
        try:
            return cls(key)
        except ValueError:
            raise ConfigError(f"invalid output format: {name}") from None

    def __str__(self) -> str:
        return self.value


class JpegOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: int = Field(default=80, ge=0, le=100)


class WebpOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: int = Field(default=80, ge=0, le=100)


class AvifOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    quality: int = Field(default=60, ge=0, le=100)
    speed: int = Field(default=5, ge=1, le=10)  # 1 slow/best .. 10 fast


class TransformRequest(BaseModel):
    """Everything a run needs, validated up front.

    Paths are stored as given; relative paths are resolved against the
    working directory by the orchestrator, not here.
    """

    model_config = ConfigDict(frozen=True)

    images: list[Path]
    out_dir: Path
    base_dir: Path | None = None
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    formats: list[OutputFormat]
    variant: str | None = None
    manifest: Path | None = None
    preserve_aspect: bool = True
    jpeg: JpegOptions = Field(default_factory=JpegOptions)
    webp: WebpOptions = Field(default_factory=WebpOptions)
    avif: AvifOptions = Field(default_factory=AvifOptions)

    @field_validator("formats", mode="before")
    @classmethod
    def parse_format_names(cls, v):
        if not isinstance(v, (list, tuple)):
            return v
        try:
            return [f if isinstance(f, OutputFormat) else OutputFormat.parse(str(f)) for f in v]
        except ConfigError as exc:
            raise ValueError(exc.message) from exc

    @model_validator(mode="after")
    def check_invariants(self) -> "TransformRequest":
        if not self.images:
            raise ValueError("no input images provided")
        if not self.formats:
            raise ValueError("no output format specified")
        if self.manifest is not None and self.variant is None:
            raise ValueError(
                "when writing into a manifest (--manifest), the variant name (--variant) is required"
            )
        return self

    @property
    def manifest_mode(self) -> bool:
        return self.manifest is not None

    @classmethod
    def build(cls, **fields) -> "TransformRequest":
        """Validate ``fields`` and raise ConfigError instead of ValidationError."""
        try:
            return cls(**fields)
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
                for err in exc.errors()
            )
            raise ConfigError(problems) from exc
