#!/usr/bin/env python3
"""
Terminal session for minishell.

This module ties the pieces together: the line editor reads a line, the
parser splits it, and the executor resolves and runs the command with
its redirections applied.

Design Principles:
- Clean separation between parsing and execution
- Resolution happens once and yields either a builtin or an executable
- Every file opened for a command is closed before the next prompt
"""

import argparse
import os
import subprocess
import sys
from dataclasses import dataclass, field
from typing import List, Optional, TextIO, Union

from .builtins import BuiltinHandler, Builtins
from .command_parser import CommandParser, ParsedLine
from .completion import CandidateIndex
from .exceptions import MissingRedirectionFilename, RedirectionError, ShellExit
from .line_editor import LineEditor, RawTerminal
from .log import configure_logging, get_logger
from .search_path import SearchPath

logger = get_logger(__name__)

STATUS_NOT_FOUND = 127
STATUS_CANNOT_EXECUTE = 126
STATUS_INTERRUPTED = 130
STATUS_USAGE = 2


@dataclass
class TerminalConfig:
    """Configuration for a terminal session."""
    prompt: str = '$ '
    path: str = field(default_factory=lambda: os.environ.get('PATH', ''))
    home: Optional[str] = field(default_factory=lambda: os.environ.get('HOME'))
    bell: str = '\a'
    log_level: str = 'WARNING'
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ=None) -> 'TerminalConfig':
        """Build a config from PATH, HOME and the MINISHELL_* variables."""
        environ = os.environ if environ is None else environ
        return cls(
            prompt=environ.get('MINISHELL_PROMPT', '$ '),
            path=environ.get('PATH', ''),
            home=environ.get('HOME'),
            log_level=environ.get('MINISHELL_LOG_LEVEL', 'WARNING'),
            log_file=environ.get('MINISHELL_LOG_FILE') or None,
        )

    def search_path(self, filesystem=None) -> SearchPath:
        return SearchPath.from_string(self.path, filesystem)


@dataclass
class BuiltinCommand:
    """A name that resolved to a builtin handler."""
    name: str
    handler: BuiltinHandler


@dataclass
class ExternalCommand:
    """A name that resolved to an executable on PATH."""
    name: str
    path: str


Resolution = Union[BuiltinCommand, ExternalCommand]


@dataclass
class CommandDescriptor:
    """A command ready to run, with its output sinks."""
    name: str
    args: List[str]
    stdout: TextIO
    stderr: TextIO
    handles_to_close: List[TextIO] = field(default_factory=list)

    def close(self):
        """Close every redirection handle once."""
        handles, self.handles_to_close = self.handles_to_close, []
        for handle in handles:
            handle.close()


class CommandExecutor:
    """
    Runs parsed command lines.

    This class bridges the gap between parsed lines and the things that
    actually run: it opens redirection files, resolves the name to a
    builtin or an executable, runs it, and closes what it opened.
    """

    def __init__(self, builtins: Builtins, search_path: SearchPath,
                 stdout: TextIO, stderr: TextIO):
        self.builtins = builtins
        self.search_path = search_path
        self.stdout = stdout
        self.stderr = stderr

    def resolve(self, name: str) -> Optional[Resolution]:
        """Map a command name to a builtin or an executable path."""
        handler = self.builtins.get(name)
        if handler is not None:
            return BuiltinCommand(name, handler)

        path = self.search_path.find(name)
        if path is not None:
            return ExternalCommand(name, path)

        return None

    def open_sinks(self, parsed: ParsedLine) -> CommandDescriptor:
        """
        Open redirection targets and build the command descriptor.

        Raises:
            RedirectionError: a target could not be opened; anything already
                opened for this line has been closed
        """
        stdout, stderr = self.stdout, self.stderr
        handles = []

        for redirect in parsed.redirections:
            try:
                handle = open(redirect.target, redirect.mode, encoding='utf-8')
            except OSError as e:
                logger.warning(f"cannot open {redirect.target}: {e}")
                for opened in handles:
                    opened.close()
                raise RedirectionError(redirect.target, e.strerror) from e

            logger.debug(f"fd {redirect.fd} -> {redirect.target} ({redirect.mode})")
            handles.append(handle)
            if redirect.fd == 2:
                stderr = handle
            else:
                stdout = handle

        return CommandDescriptor(
            name=parsed.name,
            args=parsed.args,
            stdout=stdout,
            stderr=stderr,
            handles_to_close=handles,
        )

    def dispatch(self, parsed: ParsedLine) -> int:
        """
        Run a parsed line and return its exit status.

        ShellExit from the exit builtin propagates once the handles are
        closed.

        Raises:
            RedirectionError: a redirection target could not be opened
        """
        if not parsed.tokens:
            return 0

        descriptor = self.open_sinks(parsed)
        try:
            resolution = self.resolve(descriptor.name)

            if isinstance(resolution, BuiltinCommand):
                return self._run_builtin(resolution, descriptor)
            if isinstance(resolution, ExternalCommand):
                return self._run_external(resolution, descriptor)

            descriptor.stdout.write(f"{descriptor.name}: command not found\n")
            return STATUS_NOT_FOUND
        finally:
            descriptor.close()

    def _run_builtin(self, command: BuiltinCommand, descriptor: CommandDescriptor) -> int:
        try:
            return command.handler(descriptor.args, descriptor.stdout, descriptor.stderr)
        except ShellExit:
            raise
        except Exception as e:
            logger.exception(f"builtin {command.name} failed")
            descriptor.stderr.write(f"{command.name}: {e}\n")
            return 1

    def _run_external(self, command: ExternalCommand, descriptor: CommandDescriptor) -> int:
        stdout = _child_stream(descriptor.stdout)
        stderr = _child_stream(descriptor.stderr)

        try:
            result = subprocess.run(
                [command.name, *descriptor.args],
                executable=command.path,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            logger.warning(f"cannot execute {command.path}: {e}")
            descriptor.stderr.write(f"{command.name}: {e.strerror or e}\n")
            return STATUS_CANNOT_EXECUTE

        # Sinks without a file descriptor get the child's output afterwards
        if stdout is subprocess.PIPE:
            descriptor.stdout.write(result.stdout.decode('utf-8', errors='replace'))
        if stderr is subprocess.PIPE:
            descriptor.stderr.write(result.stderr.decode('utf-8', errors='replace'))

        logger.debug(f"{command.path} exited with {result.returncode}")
        return result.returncode


def _child_stream(stream: TextIO):
    """The stream itself if a child process can write to it, else PIPE."""
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return subprocess.PIPE
    stream.flush()
    return stream


class TerminalSession:
    """
    Main terminal session manager.

    This class provides the REPL loop: it holds the terminal in raw mode,
    reads lines through the editor, and hands them to the executor.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 stdin=None, stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None, filesystem=None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig.from_env()
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr

        search_path = self.config.search_path(filesystem)
        self.builtins = Builtins(search_path, self.config.home)
        self.parser = CommandParser()
        self.executor = CommandExecutor(self.builtins, search_path, self.stdout, self.stderr)
        self.completer = CandidateIndex(self.builtins.names(), search_path)
        self.editor = LineEditor(self.completer, self.stdout,
                                 prompt=self.config.prompt, bell=self.config.bell)
        self.last_status = 0

    def execute_command(self, command_line: str) -> int:
        """
        Execute one command line and return its exit status.

        Raises:
            ShellExit: the line ran the exit builtin
        """
        if not command_line or command_line.strip() == '':
            return 0

        try:
            parsed = self.parser.parse(command_line)
        except MissingRedirectionFilename as e:
            self.stderr.write(f"{e}\n")
            self.last_status = STATUS_USAGE
            return self.last_status

        try:
            self.last_status = self.executor.dispatch(parsed)
        except RedirectionError as e:
            self.stderr.write(f"{e}\n")
            self.last_status = 1

        self.stdout.flush()
        return self.last_status

    def run_command(self, command_line: str) -> int:
        """
        Run a single command line without touching the terminal.

        This method is useful for non-interactive use.
        """
        try:
            return self.execute_command(command_line)
        except ShellExit as e:
            return e.code

    def run_interactive(self) -> int:
        """Run the interactive REPL loop and return the exit code."""
        keys = self._open_key_stream()
        try:
            with RawTerminal(self.stdin):
                return self._loop(keys)
        finally:
            if keys is not self.stdin:
                keys.close()

    def _loop(self, keys) -> int:
        while True:
            try:
                command_line = self.editor.read_line(keys)
            except KeyboardInterrupt:
                logger.info("interrupted at the prompt")
                return STATUS_INTERRUPTED

            if command_line is None:
                logger.info("end of input")
                return 0

            try:
                self.execute_command(command_line)
            except ShellExit as e:
                logger.info(f"exit {e.code}")
                return e.code

    def _open_key_stream(self):
        """An unbuffered byte stream over stdin, one read per keystroke."""
        try:
            fd = self.stdin.fileno()
        except (AttributeError, OSError, ValueError):
            # Already a byte stream (tests, pipes wrapped by the caller)
            return self.stdin
        return open(fd, 'rb', buffering=0, closefd=False)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for minishell."""
    parser = argparse.ArgumentParser(description='minishell - a small interactive shell')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('--prompt', help='Prompt text (default: "$ ")')
    parser.add_argument('--log-level', help='Log level (DEBUG, INFO, WARNING, ERROR)')
    parser.add_argument('--log-file', help='Write logs to this file')
    args = parser.parse_args(argv)

    config = TerminalConfig.from_env()
    if args.prompt is not None:
        config.prompt = args.prompt
    if args.log_level:
        config.log_level = args.log_level
    if args.log_file:
        config.log_file = args.log_file

    try:
        configure_logging(config.log_level, config.log_file)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    session = TerminalSession(config=config)

    if args.command:
        return session.run_command(args.command)
    return session.run_interactive()


if __name__ == '__main__':
    sys.exit(main())
