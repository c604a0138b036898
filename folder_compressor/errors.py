"""
Exception taxonomy.

Only BatchError escapes FolderCompressor.compress(). Everything else is caught
at the file boundary by Compressor.run() and reported as a Failed outcome.
"""


class CompressionError(Exception):
    """Base class for every error raised by this package."""


class InvalidFactor(CompressionError, ValueError):
    """Quality or resize ratio out of range, or a calculator returned garbage."""


class UnsupportedOrCorruptImage(CompressionError):
    """The source file could not be read or decoded."""


class EncodeError(CompressionError):
    """The codec refused to encode the resized image."""


class OutputWriteError(CompressionError):
    """The compressed file could not be written."""


class BatchError(CompressionError):
    """The scheduler could not start: missing source root or uncreatable destination."""
