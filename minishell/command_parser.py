#!/usr/bin/env python3
"""
Command parser for the minishell interpreter.

This module turns a raw terminal line into a structured command: a list of
tokens split under shell quoting rules, and the output redirections that
were pulled out of them.

Design Principles:
- Single responsibility: Parse commands, don't execute them
- Composable: Tokenizing and redirection extraction are independent steps
- Testable: Pure functions with predictable outputs
"""

from typing import List, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum

from .exceptions import MissingRedirectionFilename


# Characters a backslash may escape inside double quotes.
DOUBLE_QUOTE_ESCAPES = frozenset('$`"\\\n')


class RedirectType(Enum):
    """Types of output redirection, valued by their open() mode."""
    TRUNCATE = 'w'   # Overwrite file
    APPEND = 'a'     # Append to file


@dataclass
class Redirect:
    """Represents an output redirection."""
    target: str
    type: RedirectType = RedirectType.TRUNCATE
    fd: int = 1  # File descriptor (1=stdout, 2=stderr)

    @property
    def mode(self) -> str:
        return self.type.value


@dataclass
class RedirectionSpec:
    """Where stdout and stderr go. None means the inherited stream."""
    stdout: Optional[Redirect] = None
    stderr: Optional[Redirect] = None

    def __iter__(self):
        for redirect in (self.stdout, self.stderr):
            if redirect is not None:
                yield redirect


# Operator -> (fd, type). Matched against whole tokens only.
REDIRECT_OPERATORS = {
    '>': (1, RedirectType.TRUNCATE),
    '1>': (1, RedirectType.TRUNCATE),
    '>>': (1, RedirectType.APPEND),
    '1>>': (1, RedirectType.APPEND),
    '2>': (2, RedirectType.TRUNCATE),
    '2>>': (2, RedirectType.APPEND),
}


@dataclass
class ParsedLine:
    """
    A command line after tokenizing and redirection extraction.

    This is the unit handed to the dispatcher. An empty token list is a
    blank line and runs nothing.
    """
    tokens: List[str]
    redirections: RedirectionSpec = field(default_factory=RedirectionSpec)

    @property
    def name(self) -> Optional[str]:
        return self.tokens[0] if self.tokens else None

    @property
    def args(self) -> List[str]:
        return self.tokens[1:]

    def __str__(self) -> str:
        parts = list(self.tokens)
        for redirect in self.redirections:
            op = '>>' if redirect.type is RedirectType.APPEND else '>'
            if redirect.fd == 2:
                op = '2' + op
            parts.extend([op, redirect.target])
        return ' '.join(parts)


def tokenize(line: str) -> List[str]:
    """
    Split a line into tokens using shell-style quoting.

    Single quotes keep everything literal. Inside double quotes a backslash
    only escapes $, `, ", \\ and newline; before any other character the
    backslash is kept. Outside quotes a backslash escapes any character.
    Unquoted spaces delimit tokens, quotes never do, so 'foo'bar is one
    token. An unbalanced quote leaves whatever was collected as the last
    token.
    """
    tokens = []
    current = []
    in_single_quotes = False
    in_double_quotes = False
    escape_next = False

    for char in line:
        if in_single_quotes:
            if char == "'":
                in_single_quotes = False
            else:
                current.append(char)
            continue

        if escape_next:
            if in_double_quotes and char not in DOUBLE_QUOTE_ESCAPES:
                current.append('\\')
            current.append(char)
            escape_next = False
            continue

        if char == '\\':
            escape_next = True
        elif char == "'":
            if in_double_quotes:
                current.append(char)
            else:
                in_single_quotes = True
        elif char == '"':
            in_double_quotes = not in_double_quotes
        elif char == ' ' and not in_double_quotes:
            if current:
                tokens.append(''.join(current))
                current = []
        else:
            current.append(char)

    if current:
        tokens.append(''.join(current))

    return tokens


def extract_redirections(tokens: List[str]) -> Tuple[List[str], RedirectionSpec]:
    """
    Remove redirection operators and their file names from tokens.

    Returns (remaining_tokens, spec). The input list is left untouched.
    When the same stream is redirected twice the later one wins.

    Raises:
        MissingRedirectionFilename: an operator is the last token
    """
    remaining = list(tokens)
    spec = RedirectionSpec()

    i = 0
    while i < len(remaining):
        operator = remaining[i]
        if operator not in REDIRECT_OPERATORS:
            i += 1
            continue

        if i + 1 >= len(remaining):
            raise MissingRedirectionFilename(operator)

        fd, redirect_type = REDIRECT_OPERATORS[operator]
        redirect = Redirect(target=remaining[i + 1], type=redirect_type, fd=fd)
        if fd == 2:
            spec.stderr = redirect
        else:
            spec.stdout = redirect

        # Rescan the same index: the next token has shifted into it
        del remaining[i:i + 2]

    return remaining, spec


class CommandParser:
    """
    Parser for minishell command lines.

    This parser handles:
    - Quoting and escaping (single, double, backslash)
    - Output redirections (>, 1>, >>, 1>>, 2>, 2>>)

    Pipes, operators and expansions are not part of the grammar; their
    characters are ordinary token text.
    """

    def parse(self, command_line: str) -> ParsedLine:
        """
        Parse a complete command line into a ParsedLine.

        This is the main entry point for parsing shell commands.
        """
        if not command_line or command_line.strip() == '':
            return ParsedLine(tokens=[])

        tokens, redirections = extract_redirections(tokenize(command_line))
        return ParsedLine(tokens=tokens, redirections=redirections)
