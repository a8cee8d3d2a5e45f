"""
minishell - a small interactive command interpreter

This package provides a raw-mode line editor with tab completion, a
shell-style tokenizer with output redirection, and a dispatcher that runs
builtins or executables found on PATH.
"""

import logging

__version__ = "0.1.0"

from .command_parser import (
    CommandParser,
    ParsedLine,
    Redirect,
    RedirectionSpec,
    RedirectType,
    extract_redirections,
    tokenize,
)

from .completion import (
    CandidateIndex,
    Completion,
    CompletionKind,
    longest_common_prefix,
)

from .line_editor import (
    EditorState,
    EditorStatus,
    LineEditor,
    RawTerminal,
)

from .search_path import (
    HostFileSystem,
    SearchPath,
)

from .builtins import Builtins

from .terminal import (
    BuiltinCommand,
    CommandDescriptor,
    CommandExecutor,
    ExternalCommand,
    TerminalConfig,
    TerminalSession,
)

from .exceptions import (
    MissingRedirectionFilename,
    ParseError,
    RedirectionError,
    ShellError,
    ShellExit,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Parsing
    "CommandParser",
    "ParsedLine",
    "Redirect",
    "RedirectionSpec",
    "RedirectType",
    "extract_redirections",
    "tokenize",

    # Completion
    "CandidateIndex",
    "Completion",
    "CompletionKind",
    "longest_common_prefix",

    # Line editing
    "EditorState",
    "EditorStatus",
    "LineEditor",
    "RawTerminal",

    # PATH lookup
    "HostFileSystem",
    "SearchPath",

    # Execution
    "Builtins",
    "BuiltinCommand",
    "CommandDescriptor",
    "CommandExecutor",
    "ExternalCommand",
    "TerminalConfig",
    "TerminalSession",

    # Errors
    "MissingRedirectionFilename",
    "ParseError",
    "RedirectionError",
    "ShellError",
    "ShellExit",

    # Version info
    "__version__",
]
