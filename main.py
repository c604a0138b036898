"""
Main entry point for the folder compression script.

This module compresses every image in a folder with a pool of worker threads
and writes them as JPEG files into a mirrored directory tree.

It interactively asks the user for the folder path.
If no input is provided, it defaults to the 'images' directory.

Example:
    $ python main.py
"""

import os
import queue
import threading

from folder_compressor import BatchError, Completed, FolderCompressor
from folder_compressor.config import DEFAULT_THREAD_COUNT, LOG_FILE
from folder_compressor.logger_setup import setup_logger

log = setup_logger(log_file=LOG_FILE)


def logger_worker(outcomes: queue.Queue) -> None:
    """
    Log outcomes in real-time as workers finish them.

    Args:
        outcomes (queue.Queue): Queue the FolderCompressor sends outcomes to.

    Notes:
        - Exits when `None` is put into the queue.
        - Successful files are logged with original size, new size, reduction and processing time.
    """
    while True:
        outcome = outcomes.get()
        if outcome is None:
            break
        name = os.path.basename(outcome.source)
        if isinstance(outcome, Completed):
            orig_size, new_size = outcome.original_size, outcome.compressed_size
            ratio = 100 - (new_size / orig_size * 100) if orig_size else 0
            log.info(
                f"{name:<45} | {orig_size/1024:7.1f}KB → {new_size/1024:7.1f}KB (-{ratio:5.1f}%) "
                f"| processing: {outcome.elapsed:5.2f}s"
            )
        else:
            log.warning(f"{name:<45} | skipped: {outcome.reason}")


def main() -> None:
    """Interactive entry point for folder compression."""
    input_folder = input("📁 Enter the path to the folder with images (default: ./images): ").strip() or "images"
    output_folder = "compressed"

    if not os.path.exists(input_folder):
        print(f"❌ The folder '{input_folder}' does not exist.")
        return

    outcomes = queue.Queue()
    log_thread = threading.Thread(target=logger_worker, args=(outcomes,), daemon=True)
    log_thread.start()

    comp = FolderCompressor(input_folder, output_folder)
    comp.set_thread_count(DEFAULT_THREAD_COUNT)
    comp.set_sender(outcomes)

    print(f"🚀 Starting compression from: {input_folder}")
    try:
        comp.compress()
    except BatchError as e:
        log.error(f"Cannot compress the folder: {e}")
    finally:
        # Stop logger worker
        outcomes.put(None)
        log_thread.join()


if __name__ == "__main__":
    main()
