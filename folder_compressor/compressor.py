import os
import time
from pathlib import Path
from typing import Optional, Tuple, Union

import cv2
import numpy as np

from . import config
from .errors import EncodeError, OutputWriteError, UnsupportedOrCorruptImage
from .factor import Factor, FactorCalculator, constant_calculator, default_calculator, resolve_factor
from .logger_setup import setup_logger
from .messages import Completed, CompressionOutcome, Failed

log = setup_logger()


def decode_image(image_path: Path) -> Tuple[np.ndarray, int]:
    """
    Read a file from disk and decode it with OpenCV.

    The bytes are read in Python and decoded with cv2.imdecode, which copes
    with non-ASCII paths that cv2.imread cannot open on some platforms.

    Returns:
        Tuple[np.ndarray, int]: (BGR image, original_size_bytes)

    Raises:
        UnsupportedOrCorruptImage: unreadable file or data OpenCV cannot decode.
    """
    try:
        data = image_path.read_bytes()
    except OSError as e:
        raise UnsupportedOrCorruptImage(f"Cannot read {image_path}: {e}") from e

    img = None
    if data:
        try:
            img = cv2.imdecode(np.frombuffer(data, dtype=np.uint8), cv2.IMREAD_COLOR)
        except cv2.error:
            img = None
    if img is None:
        raise UnsupportedOrCorruptImage(f"Unsupported or corrupt image: {image_path}")
    return img, len(data)


def resize_image(img: np.ndarray, resize_ratio: float) -> np.ndarray:
    """Scale both sides by `resize_ratio`, rounding to the nearest pixel (at least 1)."""
    if resize_ratio == 1.0:
        return img
    h, w = img.shape[:2]
    new_w = max(1, int(round(w * resize_ratio)))
    new_h = max(1, int(round(h * resize_ratio)))
    if (new_w, new_h) == (w, h):
        return img
    return cv2.resize(img, (new_w, new_h), interpolation=cv2.INTER_AREA)


def encode_jpeg(img: np.ndarray, quality: int) -> np.ndarray:
    # Encode to JPEG in memory (faster than imwrite)
    encode_params = [cv2.IMWRITE_JPEG_QUALITY, quality]
    success, encoded_img = cv2.imencode(".jpg", img, encode_params)
    if not success:
        raise EncodeError("OpenCV failed to encode the image as JPEG")
    return encoded_img


class Compressor:
    """
    Compress one image file into `<destination_dir>/<stem>.jpg`.

    The pipeline runs strictly in order: decode, resolve factor, resize,
    encode, write. compress_to_jpg() raises on the first failing step; run()
    catches everything and reports a Completed or Failed outcome instead.

    Example:
        >>> comp = Compressor("origin/photo.png", "dest")
        >>> comp.set_factor(Factor(75, 0.7))
        >>> comp.compress_to_jpg()
        PosixPath('dest/photo.jpg')
    """

    def __init__(
            self,
            source: Union[str, os.PathLike],
            destination_dir: Union[str, os.PathLike],
            calculator: Optional[FactorCalculator] = None
    ):
        self.source = Path(source)
        self.destination_dir = Path(destination_dir)
        self.calculator: FactorCalculator = calculator or default_calculator
        self.delete_original = False
        self.overwrite = False

    def set_factor(self, factor: Factor) -> None:
        self.calculator = constant_calculator(factor)

    def set_factor_calculator(self, calculator: FactorCalculator) -> None:
        if not callable(calculator):
            raise TypeError("factor calculator must be callable")
        self.calculator = calculator

    def set_delete_original(self, to_delete: bool) -> None:
        self.delete_original = to_delete

    def set_overwrite(self, overwrite: bool) -> None:
        self.overwrite = overwrite

    @property
    def target_path(self) -> Path:
        return self.destination_dir / (self.source.stem + config.OUTPUT_SUFFIX)

    def compress_to_jpg(self) -> Path:
        """
        Run the whole pipeline for this file.

        Returns:
            Path: The written JPEG.

        Raises:
            UnsupportedOrCorruptImage: decoding failed.
            InvalidFactor: the calculator produced no valid Factor.
            EncodeError: OpenCV could not encode the result.
            OutputWriteError: the result could not be written.
        """
        return self._compress()[0]

    def _compress(self) -> Tuple[Path, int, int]:
        img, orig_size = decode_image(self.source)

        h, w = img.shape[:2]
        factor = resolve_factor(self.calculator, w, h, orig_size)

        img = resize_image(img, factor.resize_ratio)
        encoded_img = encode_jpeg(img, factor.jpeg_quality)

        target = self.target_path
        # overwriting the source in place already replaces the original
        replaces_source = target.resolve() == self.source.resolve()
        self._write(target, encoded_img)

        if self.delete_original and not replaces_source:
            try:
                self.source.unlink()
            except OSError as e:
                log.warning(f"Compressed {self.source} but cannot delete it: {e}")

        return target, orig_size, int(encoded_img.size)

    def _write(self, target: Path, encoded_img: np.ndarray) -> None:
        mode = "wb" if self.overwrite else "xb"
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, mode) as f:
                encoded_img.tofile(f)
        except FileExistsError as e:
            raise OutputWriteError(f"The compressed file already exists: {target}") from e
        except OSError as e:
            raise OutputWriteError(f"Cannot write {target}: {e}") from e

    def run(self) -> CompressionOutcome:
        """
        Compress the file and report the outcome without raising.

        Returns:
            CompressionOutcome: Completed with the destination path and sizes,
            or Failed with the source path and the cause.
        """
        start_time = time.time()
        try:
            target, orig_size, new_size = self._compress()
        except Exception as e:
            log.debug(f"Error processing {self.source}: {e}")
            return Failed(self.source, str(e))

        elapsed = time.time() - start_time
        log.debug(f"Compressed {self.source} -> {target}")
        return Completed(self.source, target, orig_size, new_size, elapsed)
