#!/usr/bin/env python3
"""
Built-in commands for minishell.

Each builtin is a method taking (args, stdout, stderr) and returning an
exit status. Output goes to the sinks it is handed, never to sys.stdout
directly, so redirections apply to builtins exactly as to external
commands.
"""

import os
import re
from typing import Callable, List, Optional, TextIO

from .exceptions import ShellExit
from .search_path import SearchPath

BuiltinHandler = Callable[[List[str], TextIO, TextIO], int]

# ASCII digits with an optional sign. int() alone also takes '1_0', ' 3' and non-ASCII digits
EXIT_CODE_PATTERN = re.compile(r"[+-]?[0-9]+")


class Builtins:
    """The commands implemented inside the interpreter."""

    NAMES = ('cd', 'echo', 'exit', 'pwd', 'type')

    def __init__(self, search_path: SearchPath, home: Optional[str] = None):
        self.search_path = search_path
        self.home = home

    def names(self) -> List[str]:
        return list(self.NAMES)

    def __contains__(self, name: str) -> bool:
        return name in self.NAMES

    def get(self, name: str) -> Optional[BuiltinHandler]:
        """Map a command name to its handler."""
        if name not in self.NAMES:
            return None
        return getattr(self, name)

    def exit(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        """exit [code] - leave the shell."""
        if not args:
            raise ShellExit(0)

        if not EXIT_CODE_PATTERN.fullmatch(args[0]):
            stderr.write(f"exit: {args[0]}: numeric argument required\n")
            raise ShellExit(0)
        raise ShellExit(int(args[0]))

    def echo(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        """echo [args...] - print arguments separated by spaces."""
        stdout.write(' '.join(args) + '\n')
        return 0

    def type(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        """type <name> - tell whether name is a builtin or where it lives."""
        if not args:
            stderr.write("type: missing argument\n")
            return 1

        status = 0
        for name in args:
            if name in self:
                stdout.write(f"{name} is a shell builtin\n")
                continue

            path = self.search_path.find(name)
            if path:
                stdout.write(f"{name} is {path}\n")
            else:
                stdout.write(f"{name}: not found\n")
                status = 1
        return status

    def pwd(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        """pwd - print the working directory."""
        stdout.write(os.getcwd() + '\n')
        return 0

    def cd(self, args: List[str], stdout: TextIO, stderr: TextIO) -> int:
        """cd [dir] - change the working directory. ~ is HOME."""
        target = args[0] if args else '~'

        if target == '~' or target.startswith('~/'):
            if not self.home:
                stderr.write("cd: HOME not set\n")
                return 1
            path = self.home + target[1:]
        else:
            path = target

        try:
            os.chdir(path)
        except OSError as e:
            stderr.write(f"cd: {target}: {e.strerror or 'No such file or directory'}\n")
            return 1
        return 0
