#!/usr/bin/env python3
"""
Executable lookup along PATH.

Both the dispatcher and tab completion need to know which names on PATH
are runnable. They go through a small filesystem capability instead of
calling os directly, so an in-memory listing can stand in for the host.
"""

import os
import stat
from typing import Iterable, Iterator, List, Optional

from .log import get_logger

logger = get_logger(__name__)


class HostFileSystem:
    """The filesystem capability backed by the real host."""

    def list_dir(self, directory: str) -> List[str]:
        """Return entry names in directory. Raises OSError when unreadable."""
        return os.listdir(directory)

    def is_executable_file(self, path: str) -> bool:
        """True for a regular (non-directory) file the user may execute."""
        try:
            st = os.stat(path)
        except OSError:
            return False
        return stat.S_ISREG(st.st_mode) and os.access(path, os.X_OK)


class SearchPath:
    """
    Ordered list of directories searched for executables.

    Order is resolution priority: the first directory holding a match
    wins and later directories never shadow it.
    """

    def __init__(self, directories: Iterable[str], filesystem=None):
        self.directories = [d for d in directories if d]
        self.filesystem = filesystem or HostFileSystem()

    @classmethod
    def from_string(cls, value: Optional[str], filesystem=None) -> 'SearchPath':
        """Decode a colon-separated PATH value."""
        return cls((value or '').split(os.pathsep), filesystem)

    def __iter__(self) -> Iterator[str]:
        return iter(self.directories)

    def __len__(self) -> int:
        return len(self.directories)

    def find(self, name: str) -> Optional[str]:
        """Resolve name to the path of the first matching executable."""
        if not name or '/' in name:
            return None

        for directory in self:
            candidate = os.path.join(directory, name)
            if self.filesystem.is_executable_file(candidate):
                logger.debug(f"resolved {name} -> {candidate}")
                return candidate

        logger.debug(f"{name} not found in {len(self)} directories")
        return None

    def executables(self, prefix: str = '') -> Iterator[str]:
        """
        Yield names of executables starting with prefix, in PATH order.

        Duplicates across directories are yielded once per directory;
        callers dedupe. Unreadable directories are skipped.
        """
        for directory in self:
            try:
                entries = self.filesystem.list_dir(directory)
            except OSError as e:
                logger.debug(f"skipping unreadable PATH entry {directory}: {e}")
                continue

            for entry in entries:
                if not entry.startswith(prefix):
                    continue
                if self.filesystem.is_executable_file(os.path.join(directory, entry)):
                    yield entry
