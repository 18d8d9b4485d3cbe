# python
"""
fsreplay/errors.py
Exceptions raised while replaying a transcript or querying the directory table.
"""
from typing import Tuple


def _display(path: Tuple[str, ...]) -> str:
    return "/" + "/".join(path)


class FsReplayError(Exception):
    """Base class for every fatal fsreplay error."""


class TranscriptSyntaxError(FsReplayError):
    def __init__(self, line_no: int, line: str):
        self.line_no = line_no
        self.line = line
        super().__init__(f"unknown input line {line_no}: {line!r}")


class NavigationError(FsReplayError):
    def __init__(self, line_no: int):
        self.line_no = line_no
        super().__init__(f"line {line_no}: cannot cd .. above the root")


class SizeConflictError(FsReplayError):
    def __init__(self, path: Tuple[str, ...], name: str, old_size: int, new_size: int):
        self.path = path
        self.name = name
        self.old_size = old_size
        self.new_size = new_size
        super().__init__(
            f"file {name!r} in {_display(path)} listed with size {new_size}, "
            f"previously {old_size}"
        )


class UnknownDirectoryError(FsReplayError):
    def __init__(self, path: Tuple[str, ...]):
        self.path = path
        super().__init__(f"no such directory in table: {_display(path)}")


class CapacityError(FsReplayError):
    """Used space at the root exceeds the filesystem size."""


class NoDeletionCandidateError(FsReplayError):
    """No directory frees enough space, not even the root."""


class SnapshotError(FsReplayError):
    """A snapshot file could not be read or failed validation."""


class ConfigError(FsReplayError):
    """A configuration value is missing its expected type or range."""
