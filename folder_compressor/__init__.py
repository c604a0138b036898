"""
Folder Compressor Package

Compresses a directory tree of images into a mirrored tree of JPEG files with a
pool of worker threads. The JPEG quality and resize ratio of every image come
from a Factor, either fixed or computed per image by a factor calculator.
Includes colored console logging and optional file logging.
"""

from .compressor import Compressor
from .errors import (
    BatchError,
    CompressionError,
    EncodeError,
    InvalidFactor,
    OutputWriteError,
    UnsupportedOrCorruptImage,
)
from .factor import DEFAULT_FACTOR, Factor, FactorCalculator, constant_calculator, default_calculator
from .folder import FolderCompressor
from .messages import Completed, CompressionJob, CompressionOutcome, Failed

__all__ = [
    "BatchError",
    "Completed",
    "CompressionError",
    "CompressionJob",
    "CompressionOutcome",
    "Compressor",
    "DEFAULT_FACTOR",
    "EncodeError",
    "Factor",
    "FactorCalculator",
    "Failed",
    "FolderCompressor",
    "InvalidFactor",
    "OutputWriteError",
    "UnsupportedOrCorruptImage",
    "constant_calculator",
    "default_calculator",
]
