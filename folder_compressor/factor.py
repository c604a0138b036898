"""
Compression factors.

A Factor says how hard to squeeze one image: the JPEG quality and the linear
resize ratio. A factor calculator derives one per file from the decoded width,
height and the source file size in bytes. Calculators run concurrently on every
worker thread, so they must not mutate shared state.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Callable

from . import config
from .errors import InvalidFactor


@dataclass(frozen=True)
class Factor:
    quality: float
    resize_ratio: float

    def __post_init__(self) -> None:
        if not _is_number(self.quality) or not 0 <= self.quality <= 100:
            raise InvalidFactor(f"quality must be within [0, 100], got {self.quality!r}")
        if not _is_number(self.resize_ratio) or not 0 < self.resize_ratio <= 1:
            raise InvalidFactor(f"resize_ratio must be within (0, 1], got {self.resize_ratio!r}")

    @property
    def jpeg_quality(self) -> int:
        """Quality as OpenCV's integer IMWRITE_JPEG_QUALITY value."""
        return int(round(self.quality))


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


FactorCalculator = Callable[[int, int, int], Factor]

DEFAULT_FACTOR = Factor(config.DEFAULT_QUALITY, config.DEFAULT_RESIZE_RATIO)


def constant_calculator(factor: Factor) -> FactorCalculator:
    """Return a calculator that ignores the image and always answers `factor`."""
    if not isinstance(factor, Factor):
        raise InvalidFactor(f"expected a Factor, got {type(factor).__name__}")

    def calculate(width: int, height: int, original_size: int) -> Factor:
        return factor

    return calculate


def default_calculator(width: int, height: int, original_size: int) -> Factor:
    """
    Built-in threshold rule.

    Large files or large images get a lower quality and a stronger downscale;
    small files are re-encoded at full resolution.

    Args:
        width (int): Decoded image width in pixels.
        height (int): Decoded image height in pixels.
        original_size (int): Size of the source file in bytes.

    Returns:
        Factor: The factor for this image.
    """
    longest = max(width, height)
    for min_bytes, min_side, quality, ratio in config.DEFAULT_THRESHOLDS:
        if original_size > min_bytes or (min_side is not None and longest > min_side):
            return Factor(quality, ratio)
    return Factor(config.FALLBACK_QUALITY, config.FALLBACK_RESIZE_RATIO)


def resolve_factor(calculator: FactorCalculator, width: int, height: int, original_size: int) -> Factor:
    """
    Invoke a calculator and make sure a valid Factor comes back.

    Anything raised by caller logic, or a return value that is not a Factor,
    surfaces as InvalidFactor so the pipeline can report it for this file alone.
    """
    try:
        factor = calculator(width, height, original_size)
    except InvalidFactor:
        raise
    except Exception as e:
        raise InvalidFactor(f"factor calculator failed: {e}") from e
    if not isinstance(factor, Factor):
        raise InvalidFactor(f"factor calculator returned {type(factor).__name__}, expected Factor")
    return factor
