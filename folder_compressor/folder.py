"""
Folder Compressor Module.

This module compresses a whole directory tree into JPEG files using a
`ThreadPoolExecutor`. OpenCV releases the GIL while decoding, resizing and
encoding, so worker threads run in parallel, and factor calculators can be
plain closures.

Classes:
    - FolderCompressor: Configure once, then call compress() to run the batch.
"""

import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Protocol, Union

from . import config
from .compressor import Compressor
from .crawler import delete_empty_tree, mirror_tree
from .factor import Factor, FactorCalculator, constant_calculator, default_calculator
from .logger_setup import setup_logger
from .messages import CompressionJob, CompressionOutcome

log = setup_logger()


class OutcomeSender(Protocol):
    """Anything with a thread-safe `put`, normally a `queue.Queue`."""

    def put(self, item: CompressionOutcome) -> None:
        ...


class FolderCompressor:
    """
    Compress every file under `source_root` into a mirrored tree of JPEGs.

    Args:
        source_root: Existing directory holding the images.
        destination_root: Output directory, created if absent.

    Notes:
        - Setters are only allowed before compress() starts.
        - An instance runs exactly one batch.
        - Per-file failures never make compress() raise; they are logged and,
          when a sender is set, delivered to it as Failed outcomes.

    Example:
        >>> import queue
        >>> outcomes = queue.Queue()
        >>> comp = FolderCompressor("origin", "dest")
        >>> comp.set_factor_calculator(lambda w, h, size: Factor(75, 0.7))
        >>> comp.set_thread_count(4)
        >>> comp.set_sender(outcomes)
        >>> comp.compress()
    """

    def __init__(self, source_root: Union[str, os.PathLike], destination_root: Union[str, os.PathLike]):
        self.source_root = Path(source_root)
        self.destination_root = Path(destination_root)
        self.thread_count = config.DEFAULT_THREAD_COUNT
        self.calculator: FactorCalculator = default_calculator
        self.sender: Optional[OutcomeSender] = None
        self.delete_original = False
        self.overwrite = False
        self._lock = threading.Lock()
        self._started = False

    def _check_configurable(self) -> None:
        if self._started:
            raise RuntimeError("FolderCompressor cannot be reconfigured once compress() has started")

    def set_thread_count(self, thread_count: int) -> None:
        if isinstance(thread_count, bool) or not isinstance(thread_count, int) or thread_count < 1:
            raise ValueError(f"thread_count must be a positive integer, got {thread_count!r}")
        with self._lock:
            self._check_configurable()
            self.thread_count = thread_count

    def set_factor(self, factor: Factor) -> None:
        calculator = constant_calculator(factor)
        with self._lock:
            self._check_configurable()
            self.calculator = calculator

    def set_factor_calculator(self, calculator: FactorCalculator) -> None:
        if not callable(calculator):
            raise TypeError("factor calculator must be callable")
        with self._lock:
            self._check_configurable()
            self.calculator = calculator

    def set_sender(self, sender: OutcomeSender) -> None:
        with self._lock:
            self._check_configurable()
            self.sender = sender

    def set_delete_original(self, to_delete: bool) -> None:
        with self._lock:
            self._check_configurable()
            self.delete_original = to_delete

    def set_overwrite(self, overwrite: bool) -> None:
        with self._lock:
            self._check_configurable()
            self.overwrite = overwrite

    def _report(self, outcome: CompressionOutcome) -> None:
        if self.sender is None:
            # nobody else will see the failure
            if not outcome.ok:
                log.error(f"Error processing {outcome.source}: {outcome.reason}")
            return
        try:
            self.sender.put(outcome)
        except Exception as e:
            log.error(f"Message passing error for {outcome.source}: {e}")

    def _process(self, job: CompressionJob) -> CompressionOutcome:
        compressor = Compressor(job.source, job.destination_dir, self.calculator)
        compressor.set_delete_original(self.delete_original)
        compressor.set_overwrite(self.overwrite)
        outcome = compressor.run()
        self._report(outcome)
        return outcome

    def compress(self) -> None:
        """
        Compress the whole tree and block until every file has been handled.

        Raises:
            BatchError: The source root is missing, unreadable or not a
                directory, or the destination root cannot be created. Raised
                before any worker starts.
            RuntimeError: compress() was already called on this instance.
        """
        with self._lock:
            if self._started:
                raise RuntimeError("FolderCompressor.compress() can only run once")
            self._started = True

        start_total = time.time()

        jobs, walk_failures = mirror_tree(self.source_root, self.destination_root)
        for failure in walk_failures:
            self._report(failure)

        log.info(f"Compressing {len(jobs)} files with {self.thread_count} threads")

        with ThreadPoolExecutor(max_workers=self.thread_count) as executor:
            outcomes = list(executor.map(self._process, jobs))

        completed = sum(1 for outcome in outcomes if outcome.ok)
        failed = len(outcomes) - completed + len(walk_failures)

        if self.delete_original:
            if delete_empty_tree(self.source_root):
                log.info(f"Deleted original folder {self.source_root}")
            else:
                log.warning(f"Original folder {self.source_root} still holds files, not deleted")

        log.info(
            f"Done: {len(jobs) + len(walk_failures)} files | completed: {completed} | failed: {failed} "
            f"| total: {time.time() - start_total:.2f}s"
        )
