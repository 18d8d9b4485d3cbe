# python
"""
fsreplay/query.py
Size queries over a DirectoryTable.

Subtrees are found by scanning every known path for a prefix match, so a
single total_size call is O(number of directories) and computing all totals
is O(n^2). Transcripts are at most a few thousand lines, so the table is
small enough that this stays cheaper to reason about than an explicit tree.
"""
import logging
from typing import Dict, List, Tuple

from .dir_table import ROOT, DirectoryTable, Path, format_path, is_ancestor_or_self
from .errors import CapacityError, NoDeletionCandidateError, UnknownDirectoryError

logger = logging.getLogger(__name__)


def direct_size(table: DirectoryTable, path: Path) -> int:
    """Total size of the files directly in `path`, excluding subdirectories."""
    return sum(table.files(path).values())


def total_size(table: DirectoryTable, path: Path) -> int:
    """Total size of `path` and every known directory below it."""
    path = tuple(path)
    if path not in table:
        raise UnknownDirectoryError(path)
    return sum(direct_size(table, p) for p in table if is_ancestor_or_self(path, p))


def all_total_sizes(table: DirectoryTable) -> Dict[Path, int]:
    return {path: total_size(table, path) for path in table.paths()}


def sum_of_small_totals(table: DirectoryTable, max_size: int) -> int:
    """
    Sum the total sizes of all directories whose total is at most `max_size`.
    Nested directories are counted once for themselves and again inside
    each qualifying ancestor.
    """
    return sum(size for size in all_total_sizes(table).values() if size <= max_size)


def find_deletion_candidate(
    table: DirectoryTable, filesystem_size: int, required_free: int
) -> Tuple[Path, int]:
    """
    Return (path, total) of the smallest directory whose deletion leaves at
    least `required_free` bytes free.
    """
    used = total_size(table, ROOT)
    if used > filesystem_size:
        raise CapacityError(
            f"used space {used} exceeds filesystem size {filesystem_size}"
        )
    free = filesystem_size - used
    candidates: List[Tuple[int, Path]] = [
        (size, path)
        for path, size in all_total_sizes(table).items()
        if free + size >= required_free
    ]
    if not candidates:
        raise NoDeletionCandidateError(
            f"deleting {format_path(ROOT)} frees {free + used} of {required_free} required"
        )
    size, path = min(candidates)
    logger.debug(
        "Deletion candidate %s (%d) with %d free of %d", format_path(path), size, free, required_free
    )
    return path, size


def smallest_sufficient_deletion(
    table: DirectoryTable, filesystem_size: int, required_free: int
) -> int:
    _, size = find_deletion_candidate(table, filesystem_size, required_free)
    return size


def format_total_sizes(table: DirectoryTable) -> str:
    return "\n".join(
        f"{format_path(path)} {size}" for path, size in all_total_sizes(table).items()
    )
