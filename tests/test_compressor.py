import cv2
import numpy as np
import pytest

from conftest import image_size, write_image
from folder_compressor import (
    Completed,
    Compressor,
    Factor,
    Failed,
    InvalidFactor,
    OutputWriteError,
    UnsupportedOrCorruptImage,
)
from folder_compressor.compressor import decode_image, resize_image


def test_compress_png_to_half_size_jpg(tmp_path):
    source = write_image(tmp_path / "origin" / "a.png", 1000, 800)
    dest = tmp_path / "dest"

    comp = Compressor(source, dest)
    comp.set_factor(Factor(80, 0.5))
    result = comp.compress_to_jpg()

    assert result == dest / "a.jpg"
    assert result.read_bytes()[:2] == b"\xff\xd8"
    assert image_size(result) == (500, 400)
    assert source.is_file()


def test_ratio_one_keeps_dimensions(tmp_path):
    source = write_image(tmp_path / "b.bmp", 123, 77)
    comp = Compressor(source, tmp_path / "out", lambda w, h, s: Factor(90, 1.0))
    assert image_size(comp.compress_to_jpg()) == (123, 77)


def test_resize_rounds_to_nearest_pixel():
    img = np.zeros((7, 5, 3), dtype=np.uint8)
    assert resize_image(img, 0.5).shape[:2] == (4, 2)  # 3.5 -> 4, 2.5 -> 2 (banker's rounding)
    assert resize_image(img, 1e-6).shape[:2] == (1, 1)
    assert resize_image(img, 1.0) is img


def test_calculator_receives_dimensions_and_file_size(tmp_path):
    source = write_image(tmp_path / "c.png", 40, 30)
    seen = []

    def calc(width, height, size):
        seen.append((width, height, size))
        return Factor(70, 1.0)

    Compressor(source, tmp_path / "out", calc).compress_to_jpg()
    assert seen == [(40, 30, source.stat().st_size)]


def test_decode_reports_original_size(tmp_path):
    source = write_image(tmp_path / "d.png", 10, 10)
    img, size = decode_image(source)
    assert img.shape == (10, 10, 3)
    assert size == source.stat().st_size


@pytest.mark.parametrize("content", [b"", b"definitely not an image", b"\x89PNG\r\n\x1a\n" + b"\x00" * 20])
def test_corrupt_input_raises(tmp_path, content):
    source = tmp_path / "broken.png"
    source.write_bytes(content)
    comp = Compressor(source, tmp_path / "out")
    with pytest.raises(UnsupportedOrCorruptImage):
        comp.compress_to_jpg()
    assert not (tmp_path / "out" / "broken.jpg").exists()


def test_missing_source_raises(tmp_path):
    with pytest.raises(UnsupportedOrCorruptImage):
        Compressor(tmp_path / "nope.png", tmp_path / "out").compress_to_jpg()


def test_invalid_factor_from_calculator_raises(tmp_path):
    source = write_image(tmp_path / "e.png")
    comp = Compressor(source, tmp_path / "out", lambda w, h, s: Factor(80, 2.0))
    with pytest.raises(InvalidFactor):
        comp.compress_to_jpg()


def test_existing_target_is_not_overwritten(tmp_path):
    source = write_image(tmp_path / "f.png")
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "f.jpg").write_bytes(b"keep me")

    with pytest.raises(OutputWriteError, match="already exists"):
        Compressor(source, dest).compress_to_jpg()
    assert (dest / "f.jpg").read_bytes() == b"keep me"


def test_overwrite_replaces_target(tmp_path):
    source = write_image(tmp_path / "f.png")
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "f.jpg").write_bytes(b"old")

    comp = Compressor(source, dest)
    comp.set_overwrite(True)
    result = comp.compress_to_jpg()
    assert cv2.imread(str(result)) is not None


def test_unwritable_destination_raises(tmp_path):
    source = write_image(tmp_path / "g.png")
    blocker = tmp_path / "blocker"
    blocker.write_text("a file where a directory should be")
    with pytest.raises(OutputWriteError):
        Compressor(source, blocker / "out").compress_to_jpg()


def test_delete_original_removes_source(tmp_path):
    source = write_image(tmp_path / "h.png")
    comp = Compressor(source, tmp_path / "out")
    comp.set_delete_original(True)
    result = comp.compress_to_jpg()
    assert result.is_file()
    assert not source.exists()


def test_overwrite_in_place_keeps_compressed_source(tmp_path):
    source = write_image(tmp_path / "photo.jpg", 40, 20)

    comp = Compressor(source, tmp_path, lambda w, h, s: Factor(60, 0.5))
    comp.set_overwrite(True)
    comp.set_delete_original(True)
    outcome = comp.run()

    assert isinstance(outcome, Completed)
    assert outcome.destination == source
    assert source.is_file()
    assert image_size(source) == (20, 10)


def test_in_place_target_without_overwrite_keeps_source(tmp_path):
    source = write_image(tmp_path / "photo.jpg", 40, 20)
    original = source.read_bytes()

    comp = Compressor(source, tmp_path)
    comp.set_delete_original(True)
    outcome = comp.run()

    assert isinstance(outcome, Failed)
    assert "already exists" in outcome.reason
    assert source.read_bytes() == original


def test_run_reports_completed(tmp_path):
    source = write_image(tmp_path / "i.png", 20, 20)
    outcome = Compressor(source, tmp_path / "out").run()
    assert isinstance(outcome, Completed)
    assert outcome.ok
    assert outcome.source == source
    assert outcome.destination == tmp_path / "out" / "i.jpg"
    assert outcome.original_size == source.stat().st_size
    assert outcome.compressed_size == outcome.destination.stat().st_size
    assert outcome.elapsed >= 0


def test_run_reports_failure_instead_of_raising(tmp_path):
    source = tmp_path / "readme.txt"
    source.write_text("hello")
    outcome = Compressor(source, tmp_path / "out").run()
    assert isinstance(outcome, Failed)
    assert not outcome.ok
    assert outcome.source == source
    assert "readme.txt" in outcome.reason


def test_run_reports_calculator_exception(tmp_path):
    source = write_image(tmp_path / "j.png")

    def calc(w, h, s):
        raise RuntimeError("rule exploded")

    outcome = Compressor(source, tmp_path / "out", calc).run()
    assert isinstance(outcome, Failed)
    assert "rule exploded" in outcome.reason


def test_set_factor_calculator_requires_callable(tmp_path):
    with pytest.raises(TypeError):
        Compressor(tmp_path / "a.png", tmp_path).set_factor_calculator(Factor(80, 0.5))
