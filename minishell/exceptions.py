"""
Exceptions raised by the minishell interpreter.

Parse and redirection errors abandon the current line; ShellExit unwinds
the REPL with an exit code. None of them is fatal to the interpreter on
its own: the session decides what each one means.
"""

from typing import Optional


class ShellError(Exception):
    """Base class for all minishell errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ParseError(ShellError):
    """A command line could not be turned into a runnable command."""


class MissingRedirectionFilename(ParseError):
    """A redirection operator was the last token on the line."""

    def __init__(self, operator: str):
        super().__init__(f"syntax error: {operator}: missing redirection filename")
        self.operator = operator


class RedirectionError(ShellError):
    """
    A redirection target could not be opened.

    Attributes:
        target: The file name as written on the command line
        reason: The operating system's description of the failure
    """

    def __init__(self, target: str, reason: Optional[str] = None):
        reason = reason or 'cannot open file'
        super().__init__(f"{target}: {reason}")
        self.target = target
        self.reason = reason


class ShellExit(ShellError):
    """Raised by the exit builtin to stop the interpreter."""

    def __init__(self, code: int = 0):
        super().__init__(f"exit {code}")
        self.code = code
