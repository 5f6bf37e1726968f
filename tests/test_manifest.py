"""Tests for VariantManifest load / record / save."""
import json
from pathlib import Path

import pytest

from models.manifest import VariantManifest
from pipeline.errors import ManifestParseError, ManifestWriteError


def _seeded() -> VariantManifest:
    m = VariantManifest()
    m.record("cat", "thumb", "png", "cat-0000000000000001.png")
    m.record("cat", "thumb", "webp", "cat-0000000000000002.webp")
    m.record("cat", "hero", "png", "cat-0000000000000003.png")
    m.record("animals/dog", "thumb", "jpg", "animals/dog-0000000000000004.jpg")
    return m


# ---------------------------------------------------------------------------
# load()
# ---------------------------------------------------------------------------

class TestLoad:
    def test_missing_file_is_empty(self, tmp_path):
        m = VariantManifest.load(tmp_path / "absent.json")
        assert m.root == {}
        assert m.leaf_count == 0

    def test_loads_existing(self, tmp_path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"cat": {"thumb": {"png": "cat-ab.png"}}}), encoding="utf-8")
        m = VariantManifest.load(path)
        assert m.lookup("cat", "thumb", "png") == "cat-ab.png"

    def test_invalid_json_is_fatal(self, tmp_path):
        path = tmp_path / "m.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestParseError) as exc_info:
            VariantManifest.load(path)
        assert exc_info.value.path == path

    def test_wrong_shape_is_fatal(self, tmp_path):
        path = tmp_path / "m.json"
        path.write_text(json.dumps({"cat": {"thumb": ["cat.png"]}}), encoding="utf-8")
        with pytest.raises(ManifestParseError):
            VariantManifest.load(path)

    def test_empty_file_is_fatal(self, tmp_path):
        path = tmp_path / "m.json"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ManifestParseError):
            VariantManifest.load(path)


# ---------------------------------------------------------------------------
# record() — merge semantics
# ---------------------------------------------------------------------------

class TestRecord:
    def test_new_leaf_leaves_others_untouched(self):
        m = _seeded()
        before = json.loads(m.dumps())
        m.record("cat", "thumb", "avif", "cat-0000000000000005.avif")

        after = json.loads(m.dumps())
        assert after["cat"]["thumb"]["avif"] == "cat-0000000000000005.avif"
        del after["cat"]["thumb"]["avif"]
        assert after == before

    def test_rerecord_overwrites_single_leaf(self):
        m = _seeded()
        m.record("cat", "thumb", "png", "cat-ffffffffffffffff.png")
        assert m.lookup("cat", "thumb", "png") == "cat-ffffffffffffffff.png"
        assert m.lookup("cat", "thumb", "webp") == "cat-0000000000000002.webp"
        assert m.lookup("cat", "hero", "png") == "cat-0000000000000003.png"
        assert m.leaf_count == 4

    def test_lookup_missing(self):
        m = _seeded()
        assert m.lookup("cat", "thumb", "avif") is None
        assert m.lookup("bird", "thumb", "png") is None


# ---------------------------------------------------------------------------
# save()
# ---------------------------------------------------------------------------

class TestSave:
    def test_save_is_pretty_and_sorted(self, tmp_path):
        path = tmp_path / "out" / "m.json"
        _seeded().save(path)
        text = path.read_text(encoding="utf-8")
        assert text.startswith('{\n  "animals/dog"')
        assert text.endswith("}\n")
        assert VariantManifest.load(path).root == _seeded().root

    def test_serialization_independent_of_insert_order(self):
        a = VariantManifest()
        a.record("b", "v", "png", "b.png")
        a.record("a", "v", "png", "a.png")
        b = VariantManifest()
        b.record("a", "v", "png", "a.png")
        b.record("b", "v", "png", "b.png")
        assert a.dumps() == b.dumps()

    def test_merge_into_existing_file(self, tmp_path):
        path = tmp_path / "m.json"
        _seeded().save(path)
        original = json.loads(path.read_text(encoding="utf-8"))

        m = VariantManifest.load(path)
        m.record("bird", "thumb", "png", "bird-0000000000000009.png")
        m.save(path)

        merged = json.loads(path.read_text(encoding="utf-8"))
        assert merged.pop("bird") == {"thumb": {"png": "bird-0000000000000009.png"}}
        assert merged == original

    def test_write_failure(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        with pytest.raises(ManifestWriteError):
            _seeded().save(blocker / "m.json")
