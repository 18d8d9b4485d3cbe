# python
"""
fsreplay/parser.py
Transcript parser that replays cd/ls output lines into a DirectoryTable.
"""
import logging
import re
from typing import Iterable, List, Optional

from .dir_table import (
    CONFLICT_ERROR,
    CONFLICT_POLICIES,
    ROOT,
    DirectoryTable,
    Path,
    format_path,
)
from .errors import ConfigError, NavigationError, TranscriptSyntaxError

logger = logging.getLogger(__name__)

# All of these patterns are disjoint, so match order does not matter.
CD_ROOT_RE = re.compile(r"^\$ cd /$")
CD_UP_RE = re.compile(r"^\$ cd \.\.$")
CD_RE = re.compile(r"^\$ cd ([a-z]+)$")
LS_RE = re.compile(r"^\$ ls$")
DIR_RE = re.compile(r"^dir ([a-z]+)$")
FILE_RE = re.compile(r"^([0-9]+) ([^ ]+)$")


class TranscriptParser:
    """
    Replay a transcript one line at a time.

    The parser tracks a single current path, starting at the root. Each `cd`
    moves it and makes sure the directory it lands in has a table entry; file
    lines are recorded under the current path. `$ ls` and `dir` lines carry
    no information the table needs.
    """

    def __init__(self, on_conflict: str = CONFLICT_ERROR):
        if on_conflict not in CONFLICT_POLICIES:
            raise ConfigError(f"unknown conflict policy: {on_conflict!r}")
        self.on_conflict = on_conflict
        self.table = DirectoryTable()
        self.line_no = 0
        self._cwd: List[str] = []
        self.table.ensure(ROOT)

    @property
    def cwd(self) -> Path:
        return tuple(self._cwd)

    def feed(self, line: str) -> None:
        self.line_no += 1
        line = line.rstrip("\r\n")

        if CD_ROOT_RE.match(line):
            self._cwd = []
            self.table.ensure(self.cwd)
            return
        if CD_UP_RE.match(line):
            self._handle_cd_up()
            return
        m = CD_RE.match(line)
        if m:
            self._cwd.append(m.group(1))
            self.table.ensure(self.cwd)
            return
        if LS_RE.match(line) or DIR_RE.match(line):
            return
        m = FILE_RE.match(line)
        if m:
            size, name = int(m.group(1)), m.group(2)
            self.table.insert_file(self.cwd, name, size, on_conflict=self.on_conflict)
            return
        raise TranscriptSyntaxError(self.line_no, line)

    def _handle_cd_up(self) -> None:
        if not self._cwd:
            raise NavigationError(self.line_no)
        self._cwd.pop()
        self.table.ensure(self.cwd)

    def parse(self, lines: Iterable[str]) -> DirectoryTable:
        for line in lines:
            self.feed(line)
        logger.debug(
            "Parsed %d lines into %d directories and %d files (cwd %s)",
            self.line_no, len(self.table), self.table.file_count(), format_path(self.cwd),
        )
        return self.table


def parse_transcript(
    lines: Iterable[str], on_conflict: Optional[str] = None
) -> DirectoryTable:
    """Build a DirectoryTable from transcript lines."""
    parser = TranscriptParser(on_conflict=on_conflict or CONFLICT_ERROR)
    return parser.parse(lines)
