"""Directory table built from a transcript, keyed by path tuples."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from .errors import SizeConflictError, UnknownDirectoryError

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]
Files = Dict[str, int]

ROOT: Path = ()

CONFLICT_ERROR = "error"
CONFLICT_OVERWRITE = "overwrite"
CONFLICT_POLICIES = (CONFLICT_ERROR, CONFLICT_OVERWRITE)


def format_path(path: Path) -> str:
    return "/" + "/".join(path)


def is_ancestor_or_self(ancestor: Path, path: Path) -> bool:
    """
    True when `path` starts with `ancestor`. Every path starts with itself
    and every path starts with the root.
    """
    return tuple(path[: len(ancestor)]) == tuple(ancestor)


class DirectoryTable:
    """
    All directories seen in a transcript with the files listed directly in them.

    There is no explicit parent/child link between entries; nesting is implied
    by one path being a prefix of another.
    """

    def __init__(self, entries: Optional[Mapping[Path, Mapping[str, int]]] = None):
        self._index: Dict[Path, Files] = {}
        for path, files in (entries or {}).items():
            self._index[tuple(path)] = dict(files)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (tuple, list)):
            return False
        return tuple(path) in self._index

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Path]:
        return iter(self._index)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DirectoryTable):
            return NotImplemented
        return self._index == other._index

    def __repr__(self) -> str:
        return f"DirectoryTable({len(self._index)} dirs, {self.file_count()} files)"

    def ensure(self, path: Path) -> Files:
        """Return the entry for `path`, creating an empty one if needed."""
        return self._index.setdefault(tuple(path), {})

    def insert_file(
        self, path: Path, name: str, size: int, on_conflict: str = CONFLICT_ERROR
    ) -> None:
        files = self.ensure(path)
        old_size = files.get(name)
        if old_size is None:
            files[name] = size
            return
        if old_size == size:
            return
        if on_conflict == CONFLICT_OVERWRITE:
            logger.warning(
                "Overwriting %s in %s: size %d -> %d",
                name, format_path(path), old_size, size,
            )
            files[name] = size
            return
        raise SizeConflictError(tuple(path), name, old_size, size)

    def files(self, path: Path) -> Mapping[str, int]:
        try:
            return self._index[tuple(path)]
        except KeyError:
            raise UnknownDirectoryError(tuple(path)) from None

    def paths(self) -> List[Path]:
        """Known paths in lexical order."""
        return sorted(self._index)

    def children(self, path: Path) -> List[Path]:
        """Known paths exactly one segment below `path`."""
        path = tuple(path)
        depth = len(path) + 1
        return [
            p for p in self.paths()
            if len(p) == depth and is_ancestor_or_self(path, p)
        ]

    def file_count(self) -> int:
        return sum(len(files) for files in self._index.values())

    def items(self) -> Iterable[Tuple[Path, Mapping[str, int]]]:
        return self._index.items()


def format_dir_table(table: DirectoryTable) -> str:
    """
    Render every directory followed by its files and immediate subdirectories,
    in the same shape as an `ls` listing of the transcript.
    """
    lines: List[str] = []
    for path in table.paths():
        lines.append(format_path(path))
        for name, size in sorted(table.files(path).items()):
            lines.append(f"    {size} {name}")
        for child in table.children(path):
            lines.append(f"    dir {child[-1]}")
    return "\n".join(lines)
