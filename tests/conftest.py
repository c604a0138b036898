from pathlib import Path

import cv2
import numpy as np
import pytest


def write_image(path: Path, width: int = 64, height: int = 48) -> Path:
    """Write a gradient image; the format follows the file extension."""
    path.parent.mkdir(parents=True, exist_ok=True)
    xs = np.linspace(0, 255, width, dtype=np.uint8)
    ys = np.linspace(0, 255, height, dtype=np.uint8)
    img = np.zeros((height, width, 3), dtype=np.uint8)
    img[:, :, 0] = xs[np.newaxis, :]
    img[:, :, 1] = ys[:, np.newaxis]
    img[:, :, 2] = 128
    assert cv2.imwrite(str(path), img)
    return path


def image_size(path: Path) -> tuple:
    img = cv2.imread(str(path))
    assert img is not None, f"{path} is not a readable image"
    h, w = img.shape[:2]
    return w, h


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    origin/
        a.png
        b.jpg
        notes.txt
        .hidden.png
        nested/c.bmp
        nested/deeper/d.png
        empty/
    """
    root = tmp_path / "origin"
    write_image(root / "a.png")
    write_image(root / "b.jpg")
    (root / "notes.txt").write_text("not an image")
    write_image(root / ".hidden.png")
    write_image(root / "nested" / "c.bmp")
    write_image(root / "nested" / "deeper" / "d.png", 30, 20)
    (root / "empty").mkdir()
    return root
