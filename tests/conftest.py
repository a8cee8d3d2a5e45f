"""Shared fixtures for the minishell tests."""

import io
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from minishell.search_path import SearchPath
from minishell.terminal import TerminalConfig, TerminalSession


class MemoryFileSystem:
    """
    In-memory stand-in for HostFileSystem.

    tree maps a directory to {name: kind} where kind is 'exec', 'file'
    or 'dir'. Directories missing from tree behave as unreadable.
    """

    def __init__(self, tree):
        self.tree = tree
        self.listed = []

    def list_dir(self, directory):
        self.listed.append(directory)
        if directory not in self.tree:
            raise FileNotFoundError(2, 'No such file or directory', directory)
        return list(self.tree[directory])

    def is_executable_file(self, path):
        directory, name = os.path.split(path)
        return self.tree.get(directory, {}).get(name) == 'exec'


@pytest.fixture
def memfs():
    """A small PATH layout with shadowing, plain files and a directory."""
    return MemoryFileSystem({
        '/usr/local/bin': {
            'ls': 'exec',
            'lsd': 'exec',
            'grep': 'dir',
        },
        '/usr/bin': {
            'ls': 'exec',
            'less': 'exec',
            'lsblk': 'exec',
            'grep': 'exec',
            'echo': 'exec',
            'notes.txt': 'file',
        },
        '/opt/tools': {
            'exiftool': 'exec',
        },
    })


@pytest.fixture
def search_path(memfs):
    return SearchPath(['/usr/local/bin', '/usr/bin', '/missing', '/opt/tools'], memfs)


@pytest.fixture
def make_session(tmp_path):
    """Build a TerminalSession on in-memory streams."""
    def factory(keys=b'', path='', home=None, filesystem=None, prompt='$ '):
        config = TerminalConfig(prompt=prompt, path=path,
                                home=home if home is not None else str(tmp_path))
        session = TerminalSession(
            config=config,
            stdin=io.BytesIO(keys),
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            filesystem=filesystem,
        )
        return session
    return factory


@pytest.fixture
def restore_cwd():
    """Put the working directory back after tests that cd."""
    cwd = os.getcwd()
    yield cwd
    os.chdir(cwd)
