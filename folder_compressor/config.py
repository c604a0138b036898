"""Defaults shared by the compressor, the scheduler and the entry point."""

DEFAULT_THREAD_COUNT = 4

DEFAULT_QUALITY = 80
DEFAULT_RESIZE_RATIO = 0.8

OUTPUT_SUFFIX = ".jpg"

LOG_FILE = "compressor.log"

KIB = 1024
MIB = 1024 * KIB

# (min_bytes, min_longest_side, quality, resize_ratio), checked top to bottom.
# A row matches when the file is larger than min_bytes or its longest side is
# larger than min_longest_side. None disables that half of the test.
DEFAULT_THRESHOLDS = (
    (5 * MIB, 4000, 70, 0.5),
    (1 * MIB, 2000, 75, 0.7),
    (300 * KIB, None, 80, 0.8),
)
FALLBACK_QUALITY = 85
FALLBACK_RESIZE_RATIO = 1.0
