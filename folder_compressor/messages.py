"""Units of work and the outcome messages workers send back."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union


@dataclass(frozen=True)
class CompressionJob:
    source: Path
    destination_dir: Path


@dataclass(frozen=True)
class Completed:
    source: Path
    destination: Path
    original_size: int
    compressed_size: int
    elapsed: float

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    source: Path
    reason: str

    @property
    def ok(self) -> bool:
        return False


CompressionOutcome = Union[Completed, Failed]
