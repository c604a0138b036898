"""
Directory walking helpers.

Everything here runs on the calling thread, before or after the worker pool,
never inside it.
"""

import os
import shutil
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from .errors import BatchError
from .logger_setup import setup_logger
from .messages import CompressionJob, Failed

log = setup_logger()

PathLike = Union[str, os.PathLike]


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _visible_files(current: str, names: List[str]) -> List[Path]:
    files = []
    for name in sorted(names):
        path = Path(current) / name
        if not _is_hidden(name) and path.is_file():
            files.append(path)
    return files


def get_file_list(root: PathLike, onerror: Optional[Callable[[OSError], None]] = None) -> List[Path]:
    """
    List every visible regular file under `root`, recursively.

    Hidden files (names starting with a dot) are skipped. Directories are
    walked in sorted order so the result is stable between runs. Directories
    that cannot be read are passed to `onerror`, as with os.walk.
    """
    files = []
    for current, dirs, names in os.walk(root, onerror=onerror):
        dirs.sort()
        files.extend(_visible_files(current, names))
    return files


def mirror_tree(source_root: PathLike, destination_root: PathLike) -> Tuple[List[CompressionJob], List[Failed]]:
    """
    Recreate the directory layout of `source_root` under `destination_root`.

    Each destination directory is created before any job inside it is
    emitted, so workers never write into a missing directory. A subdirectory
    that cannot be read or mirrored does not stop the walk: its files come
    back as Failed outcomes instead of jobs.

    Args:
        source_root: Root of the tree to compress.
        destination_root: Root of the mirrored output tree.

    Returns:
        Tuple[List[CompressionJob], List[Failed]]: One job per visible file,
        with absolute paths, and the failures found while walking.

    Raises:
        BatchError: The source root is missing or unreadable, or the
            destination root cannot be created.
    """
    source_root = Path(source_root).resolve()
    destination_root = Path(destination_root).resolve()
    if not source_root.is_dir():
        raise BatchError(f"Source folder does not exist or is not a directory: {source_root}")
    try:
        destination_root.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise BatchError(f"Cannot create destination folder {destination_root}: {e}") from e

    nested = source_root in destination_root.parents
    jobs = []
    failures = []

    def on_walk_error(err: OSError) -> None:
        path = Path(err.filename) if err.filename else source_root
        if path == source_root:
            raise BatchError(f"Cannot read source folder {source_root}: {err}") from err
        failures.append(Failed(path, f"Cannot read directory {path}: {err}"))

    for current, dirs, names in os.walk(source_root, onerror=on_walk_error):
        if nested:
            # never walk into our own output
            dirs[:] = [d for d in dirs if Path(current, d).resolve() != destination_root]
        dirs.sort()
        output_dir = destination_root / os.path.relpath(current, source_root)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            reason = f"Cannot create the destination directory {output_dir}: {e}"
            for path in get_file_list(current, on_walk_error):
                if destination_root not in path.parents:
                    failures.append(Failed(path, reason))
            dirs[:] = []
            continue
        for path in _visible_files(current, names):
            jobs.append(CompressionJob(path, output_dir))
    return jobs, failures


def delete_empty_tree(path: PathLike) -> bool:
    """
    Remove a directory tree if no visible file is left anywhere beneath it.

    Hidden files such as .DS_Store do not keep a directory alive. Nested
    directories that still hold files are left untouched, but their empty
    siblings are removed.

    Returns:
        bool: True if `path` itself was removed.
    """
    path = Path(path)
    if not path.is_dir():
        return False

    has_files = False
    for entry in path.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            if not delete_empty_tree(entry):
                has_files = True
        elif not _is_hidden(entry.name):
            has_files = True

    if has_files:
        return False
    try:
        shutil.rmtree(path)
    except OSError as e:
        log.warning(f"Cannot delete directory {path}: {e}")
        return False
    return True
