from pathlib import Path

import pytest
from PIL import Image

from settings import Settings


def make_image(path: Path, size: tuple[int, int] = (200, 150), color=(200, 80, 40), fmt: str | None = None) -> Path:
    """Write a solid-colour image with a gradient stripe so resizes are not trivial."""
    path.parent.mkdir(parents=True, exist_ok=True)
    img = Image.new("RGB", size, color)
    for x in range(size[0]):
        img.putpixel((x, 0), (x % 256, 0, 255 - x % 256))
    img.save(path, format=fmt)
    return path


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A working directory laid out like a small asset project.

        photos/cat.png
        photos/animals/dog.jpg
        outside.png            (sibling of the base directory)
    """
    make_image(tmp_path / "photos" / "cat.png", size=(200, 150))
    make_image(tmp_path / "photos" / "animals" / "dog.jpg", size=(120, 240), color=(20, 120, 220))
    make_image(tmp_path / "outside.png", size=(50, 50))
    return tmp_path


@pytest.fixture
def image_factory():
    """Expose make_image to tests that need extra files."""
    return make_image
