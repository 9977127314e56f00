from pathlib import Path

import pytest
from PIL import Image

FORMATS = {
    ".jpg": "JPEG",
    ".jpeg": "JPEG",
    ".png": "PNG",
    ".gif": "GIF",
    ".webp": "WEBP",
}


def _make_image(path: Path, color=(200, 30, 30), size=(4, 3)) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format=FORMATS[path.suffix.lower()])
    return path


@pytest.fixture
def image_tree(tmp_path):
    """ri/h: a.jpg b.png c.webp, ri/v: x.gif y.jpeg (각각 다른 내용)."""
    src = tmp_path / "ri"
    _make_image(src / "h" / "a.jpg", (255, 0, 0), (4, 3))
    _make_image(src / "h" / "b.png", (0, 255, 0), (5, 3))
    _make_image(src / "h" / "c.webp", (0, 0, 255), (6, 3))
    _make_image(src / "v" / "x.gif", (10, 10, 10), (3, 4))
    _make_image(src / "v" / "y.jpeg", (90, 90, 90), (3, 5))
    return src


@pytest.fixture
def make_image():
    return _make_image
