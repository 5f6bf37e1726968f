"""Variant manifest — cross-run record of every output the pipeline wrote.

Shape on disk::

    {
      "animals/cat": {
        "thumb": {
          "png": "animals/cat-3f2a9c0d1e4b5a67.png",
          "webp": "animals/cat-9b8e7d6c5a4f3e21.webp"
        }
      }
    }

logical image name → variant → format extension → path relative to out_dir.
Loaded once at run start, mutated in memory, saved once at the end.
"""
import json
import logging
from pathlib import Path

from pydantic import Field, RootModel, ValidationError

from pipeline.errors import ManifestParseError, ManifestReadError, ManifestWriteError

logger = logging.getLogger(__name__)

ManifestTree = dict[str, dict[str, dict[str, str]]]


class VariantManifest(RootModel[ManifestTree]):
    root: ManifestTree = Field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "VariantManifest":
        """Load from ``path``; an absent file yields an empty manifest.

        Raises ManifestParseError if the file exists but is not JSON of the
        expected shape. An existing manifest is never silently discarded.
        """
        if not path.is_file():
            logger.debug("No manifest at %s, starting empty", path)
            return cls()
        try:
            data = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestReadError(f"failed to read manifest ({exc})", path) from exc
        try:
            return cls.model_validate_json(data)
        except ValidationError as exc:
            raise ManifestParseError(
                f"failed to parse existing manifest as JSON: {exc.errors()[0]['msg']}", path
            ) from exc

    def record(self, image: str, variant: str, ext: str, relative_path: str) -> None:
        """Upsert a single leaf. Other images, variants and formats are untouched."""
        self.root.setdefault(image, {}).setdefault(variant, {})[ext] = relative_path

    def lookup(self, image: str, variant: str, ext: str) -> str | None:
        return self.root.get(image, {}).get(variant, {}).get(ext)

    def dumps(self) -> str:
        # Sorted keys keep repeated runs byte-identical regardless of input order.
        return json.dumps(self.root, indent=2, sort_keys=True, ensure_ascii=False) + "\n"

    def save(self, path: Path) -> None:
        """Overwrite ``path`` with the whole manifest."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(self.dumps(), encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            raise ManifestWriteError(f"failed to write manifest: {exc}", path) from exc

    @property
    def leaf_count(self) -> int:
        return sum(len(formats) for variants in self.root.values() for formats in variants.values())
