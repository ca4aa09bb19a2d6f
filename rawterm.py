#!/usr/bin/env python3

# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
rawterm -- raw-mode terminal primitives for termselect

Three small pieces, shared by the prompt loop and its tests:

  - RawMode: scoped switch of a terminal fd into raw mode, with the prior
    termios attributes restored on every exit path
  - Screen: emits the fixed set of VT100 control sequences the prompt
    needs (invert, reset, cursor up, clear line, cursor visibility)
  - classify(): maps one raw input chunk to a Key

Zero external dependencies. Uses only Python stdlib: termios, atexit, enum,
os, sys.

Platform support: Unix (Linux, macOS). Entering raw mode elsewhere raises
TerminalError.
"""

import atexit
import enum
import os
import sys

_IS_WINDOWS = os.name == "nt"

if not _IS_WINDOWS:
    import termios


class TerminalError(Exception):
    """
    The terminal can't be used for interactive input: raw mode couldn't be
    entered, or reading input failed.
    """


# ---------------------------------------------------------------------------
# Control sequences
# ---------------------------------------------------------------------------

INVERT = "\x1b[7m"
RESET = "\x1b[0m"
CURSOR_UP = "\x1b[1A"
# Erase the whole line and return to column 0
CLEAR_LINE = "\x1b[2K\r"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


def line_count(s):
    """Return the number of lines in s. A string without newlines is 1 line.

    Lines wider than the terminal wrap on screen but are still counted once.
    """
    return s.count("\n") + 1


# ---------------------------------------------------------------------------
# Input constants
# ---------------------------------------------------------------------------


class Key(enum.Enum):
    """Keys recognized by the prompt.

    NONE doubles as the "no signal" exit key of a confirmed prompt.
    """

    NONE = "key_none"
    UP = "key_up"
    DOWN = "key_down"
    ENTER = "key_enter"
    # Usually means the user wants to send SIGINT
    CTRL_C = "key_ctrl_c"


# Whole read chunks, compared exactly. Anything else is Key.NONE.
_KEY_SEQUENCES = {
    b"\x1b[A": Key.UP,
    b"\x1b[B": Key.DOWN,
    b"\r": Key.ENTER,
    b"\x03": Key.CTRL_C,
}


def classify(data):
    """Return the Key for one chunk of raw input bytes.

    The chunk is matched as a whole. Several key sequences delivered in a
    single read (fast typing, pasted input) are not split up and classify as
    Key.NONE.
    """
    return _KEY_SEQUENCES.get(bytes(data), Key.NONE)


# ---------------------------------------------------------------------------
# Screen -- control sequence output
# ---------------------------------------------------------------------------


class Screen:
    """Writes text and control sequences to a binary output stream."""

    def __init__(self, out=None):
        self._out = out if out is not None else sys.stdout.buffer

    def write(self, s):
        self._out.write(s.encode("utf-8"))

    def flush(self):
        self._out.flush()

    def invert(self):
        self.write(INVERT)

    def reset_style(self):
        self.write(RESET)

    def move_up(self):
        self.write(CURSOR_UP)

    def clear_line(self):
        self.write(CLEAR_LINE)

    def hide_cursor(self):
        self.write(HIDE_CURSOR)

    def show_cursor(self):
        self.write(SHOW_CURSOR)


# ---------------------------------------------------------------------------
# Raw mode
# ---------------------------------------------------------------------------


class RawMode:
    """Raw mode for the terminal on fd, held for the duration of a 'with'.

    Raw means: no echo, no canonical line editing, no signal characters
    (Ctrl-C arrives as 0x03), no output post-processing ('\\n' does not
    return the carriage), reads return as soon as one byte is available.
    """

    def __init__(self, fd):
        self._fd = fd
        self._prior = None

    @staticmethod
    def _set_raw(fd):
        """Apply raw terminal settings, matching cfmakeraw(3)."""
        new = termios.tcgetattr(fd)
        # IFLAG
        new[0] &= ~(
            termios.IGNBRK
            | termios.BRKINT
            | termios.PARMRK
            | termios.ISTRIP
            | termios.INLCR
            | termios.IGNCR
            | termios.ICRNL
            | termios.IXON
        )
        # OFLAG
        new[1] &= ~termios.OPOST
        # CFLAG
        new[2] &= ~(termios.CSIZE | termios.PARENB)
        new[2] |= termios.CS8
        # LFLAG
        new[3] &= ~(
            termios.ECHO | termios.ECHONL | termios.ICANON | termios.ISIG | termios.IEXTEN
        )
        new[6][termios.VMIN] = 1
        new[6][termios.VTIME] = 0
        termios.tcsetattr(fd, termios.TCSANOW, new)

    def enter(self):
        """Switch to raw mode. Returns the prior termios attributes."""
        if _IS_WINDOWS:
            raise TerminalError("raw mode is not supported on this platform")

        if not os.isatty(self._fd):
            raise TerminalError(f"fd {self._fd} is not a terminal")

        try:
            prior = termios.tcgetattr(self._fd)
            self._set_raw(self._fd)
        except termios.error as e:
            raise TerminalError(f"could not enter raw mode: {e}") from e

        self._prior = prior
        # Safety net if the interpreter exits while we hold the terminal
        atexit.register(self._restore_at_exit)
        return prior

    def restore(self, prior):
        """Revert to the termios attributes returned by enter()."""
        atexit.unregister(self._restore_at_exit)
        self._prior = None
        termios.tcsetattr(self._fd, termios.TCSANOW, prior)

    def _restore_at_exit(self):
        if self._prior is not None:
            termios.tcsetattr(self._fd, termios.TCSANOW, self._prior)

    def __enter__(self):
        return self.enter()

    def __exit__(self, exc_type, exc_value, tb):
        if self._prior is None:
            return

        if exc_type is None:
            self.restore(self._prior)
            return

        # Best effort while an exception is on its way out. A terminal that
        # failed (e.g. hung up) usually can't be restored either, and the
        # original exception is the one worth reporting.
        try:
            self.restore(self._prior)
        except termios.error:
            pass
