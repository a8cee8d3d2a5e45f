#!/usr/bin/env python3
"""
Raw-mode line editing for minishell.

The terminal is put in a mode that hands over every keystroke without
buffering or echo, so the editor draws everything itself. Editing is a
small state machine: each key moves an EditorState forward and writes
whatever the display needs. Feeding it synthetic keys is how the tests
drive it.

Keys handled:
- printable characters are appended and echoed
- Backspace (DEL or ^H) removes the last character
- Tab completes the line against the candidate index
- Enter commits the line, Ctrl-C aborts
- escape sequences (arrow and function keys) are consumed and dropped
"""

import codecs
import os
import termios
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, TextIO

from .completion import CompletionKind
from .log import get_logger

logger = get_logger(__name__)

ENTER_KEYS = ('\r', '\n')
BACKSPACE_KEYS = ('\x7f', '\x08')
TAB = '\t'
INTERRUPT = '\x03'
ESCAPE = '\x1b'

CLEAR_LINE = '\r\x1b[K'
ERASE_CHAR = '\b \b'
NEWLINE = '\r\n'


class EditorStatus(Enum):
    """Where a single read stands."""
    READING = 'reading'
    COMMITTED = 'committed'
    ABORTED = 'aborted'


@dataclass
class EditorState:
    """
    Everything one interactive read knows.

    tab_presses counts consecutive Tab presses that found an ambiguous
    candidate set with nothing left to fill in. Any other key resets it.
    escape holds an escape sequence read so far, empty when none is open.
    """
    buffer: List[str] = field(default_factory=list)
    tab_presses: int = 0
    escape: str = ''
    status: EditorStatus = EditorStatus.READING

    @property
    def text(self) -> str:
        return ''.join(self.buffer)


class LineEditor:
    """Reads one line at a time from raw keystrokes."""

    def __init__(self, completer, output: TextIO, prompt: str = '$ ', bell: str = '\a'):
        """
        Args:
            completer: object with complete(prefix) -> Completion, or None
            output: text stream the editor draws on
            prompt: text shown before the buffer
            bell: what to write when a Tab press has nothing to offer
        """
        self.completer = completer
        self.output = output
        self.prompt = prompt
        self.bell = bell

    def _write(self, text: str):
        self.output.write(text)
        self.output.flush()

    def redraw(self, state: EditorState):
        """Clear the line and draw prompt and buffer from column 0."""
        self._write(CLEAR_LINE + self.prompt + state.text)

    def start(self) -> EditorState:
        """Show the prompt and return a fresh state."""
        state = EditorState()
        self.redraw(state)
        return state

    def line(self, state: EditorState) -> str:
        """The committed line, trimmed of surrounding whitespace."""
        return state.text.strip()

    def handle_key(self, state: EditorState, key: str) -> EditorState:
        """Apply one keystroke to state and return it."""
        if state.status is not EditorStatus.READING:
            return state

        if state.escape:
            if ord(key) >= 32:
                state.escape = '' if _escape_complete(state.escape + key) else state.escape + key
                return state
            # A control key cuts the sequence short and is handled normally
            state.escape = ''

        if key == TAB:
            self._complete(state)
            return state

        state.tab_presses = 0

        if key in ENTER_KEYS:
            self._write(NEWLINE)
            state.status = EditorStatus.COMMITTED
        elif key == INTERRUPT:
            self._write('^C' + NEWLINE)
            state.status = EditorStatus.ABORTED
        elif key == ESCAPE:
            state.escape = key
        elif key in BACKSPACE_KEYS:
            if state.buffer:
                state.buffer.pop()
                self._write(ERASE_CHAR)
        elif ord(key) >= 32:
            state.buffer.append(key)
            self._write(key)
        # Remaining control characters are ignored

        return state

    def _complete(self, state: EditorState):
        prefix = state.text
        if not prefix or self.completer is None:
            self._write(self.bell)
            return

        completion = self.completer.complete(prefix)

        if completion.kind is CompletionKind.NO_MATCH:
            state.tab_presses = 0
            self._write(self.bell)
        elif completion.kind in (CompletionKind.UNIQUE, CompletionKind.PARTIAL):
            state.tab_presses = 0
            state.buffer = list(completion.text)
            self.redraw(state)
        elif state.tab_presses == 0:
            state.tab_presses = 1
            self._write(self.bell)
        else:
            state.tab_presses += 1
            self._write(NEWLINE + '  '.join(completion.candidates) + NEWLINE)
            self.redraw(state)

    def read_line(self, stream) -> Optional[str]:
        """
        Read keystrokes from a binary stream until a line is committed.

        Returns the trimmed line, or None at end of input with nothing
        typed.

        Raises:
            KeyboardInterrupt: Ctrl-C was pressed
        """
        decoder = codecs.getincrementaldecoder('utf-8')(errors='replace')
        state = self.start()

        while state.status is EditorStatus.READING:
            byte = stream.read(1)
            if not byte:
                self._write(NEWLINE)
                if state.buffer:
                    return self.line(state)
                return None

            for key in decoder.decode(byte):
                state = self.handle_key(state, key)

        if state.status is EditorStatus.ABORTED:
            raise KeyboardInterrupt()

        return self.line(state)


def _escape_complete(sequence: str) -> bool:
    """
    True once sequence holds a whole escape sequence.

    CSI (ESC [) and SS3 (ESC O) run up to a final byte in 0x40-0x7e.
    Any other key after ESC is a two-key sequence such as Alt+x.
    """
    if len(sequence) == 2:
        return sequence[1] not in '[O'
    return 0x40 <= ord(sequence[-1]) <= 0x7e


class RawTerminal:
    """
    Context manager holding a terminal in raw input mode.

    Input is delivered per keystroke with no echo, and Ctrl-C arrives as a
    character instead of a signal. Output processing stays on so a bare
    newline still returns the carriage. The saved settings are restored on
    exit, however the block ends. Streams that are not a TTY are left
    alone.
    """

    def __init__(self, stream):
        self.stream = stream
        self.fd: Optional[int] = None
        self.saved = None

    @property
    def active(self) -> bool:
        return self.saved is not None

    def __enter__(self) -> 'RawTerminal':
        try:
            fd = self.stream.fileno()
        except (AttributeError, OSError, ValueError):
            return self

        if not os.isatty(fd):
            return self

        saved = termios.tcgetattr(fd)
        raw = list(saved)
        raw[6] = list(saved[6])
        raw[0] &= ~(termios.BRKINT | termios.ICRNL | termios.INPCK |
                    termios.ISTRIP | termios.IXON)
        raw[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
        raw[6][termios.VMIN] = 1
        raw[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSAFLUSH, raw)

        self.fd = fd
        self.saved = saved
        logger.debug(f"raw mode on fd {fd}")
        return self

    def __exit__(self, exc_type, exc, tb):
        self.restore()
        return False

    def restore(self):
        """Put the saved settings back. Safe to call more than once."""
        if self.saved is None:
            return
        termios.tcsetattr(self.fd, termios.TCSADRAIN, self.saved)
        logger.debug(f"terminal settings restored on fd {self.fd}")
        self.saved = None
