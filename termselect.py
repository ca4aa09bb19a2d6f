#!/usr/bin/env python3

# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC

"""
Overview
========

An interactive single-choice prompt for the terminal. A title is printed,
followed by the list of options with the current one shown in inverted
colors. The list is redrawn in place, without scrolling the terminal.

Keys:

  Up/Down : Move the selection (wraps around at both ends)
  Enter   : Pick the selected option
  Ctrl-C  : Cancel
  Other   : Show the help text below the options

The help text disappears again on the next Up/Down, and always before the
prompt returns.


Running
=======

As a command, the options are passed as arguments and the picked one is
printed on stdout. The prompt itself is drawn on stderr, so the command can
be used in a command substitution:

  $ color=$(termselect --title "Pick a color" red green blue)

The exit status is 130 if the prompt was cancelled with Ctrl-C, and 1 if the
terminal can't be used for interactive input (e.g. stdin is not a terminal).

From Python, build a Selection and pass it to prompt():

  selected, exit_key = prompt(Selection("Pick a color", ["red", "green"]))

prompt() returns the selected option and Key.NONE, or "" and Key.CTRL_C if the
user cancelled. Deciding what a cancel means (e.g. raising KeyboardInterrupt)
is up to the caller.
"""

import argparse
import collections
import os
import queue
import select
import sys
import threading

from rawterm import Key, RawMode, Screen, TerminalError, classify, line_count

# Bytes requested per read. An escape sequence normally arrives in one read.
_READ_SIZE = 128

# Acknowledgments sent from the prompt loop to the input reader
_CONTINUE = "continue"
_STOP = "stop"

_DEFAULT_HELP = "Use the arrow keys to move, Enter to select, Ctrl-C to cancel"


class Selection:
    """
    What to ask: a title, the options to choose from, and a help text shown
    when an unrecognized key is pressed.

    title:
      Printed above the options. May span several lines.

    options:
      Sequence of option strings. Must not be empty. Each option should fit
      on a single line.

    help:
      Printed below the options on request. May span several lines.
    """

    __slots__ = ("title", "options", "help")

    def __init__(self, title, options, help=""):
        options = tuple(options)
        if not options:
            raise ValueError("a selection needs at least one option")

        self.title = title
        self.options = options
        self.help = help

    def __repr__(self):
        return "Selection({!r}, {!r}, help={!r})".format(
            self.title, self.options, self.help
        )


# Returned by prompt(). exit_key is Key.NONE for a normal pick and Key.CTRL_C
# for a cancel, in which case selected is "".
Result = collections.namedtuple("Result", "selected exit_key")


def frame_height(selection, show_help):
    """
    Returns the number of lines a frame of 'selection' occupies on screen.

    Without help, the cursor ends up on an empty line below the last option,
    which counts as well. With help, it ends up on the last help line.
    """
    lines = line_count(selection.title) + len(selection.options)
    if show_help:
        return lines + line_count(selection.help)
    return lines + 1


#
# Input reader
#


class _ReadInterrupted(Exception):
    """
    Raised by a read that was woken up with _TerminalInput.interrupt()
    """


class _TerminalInput:
    """
    Reads chunks from a terminal fd. A read blocked waiting for input can be
    woken up from another thread with interrupt().

    The wake-up goes through a pipe, so the file descriptors must be released
    with close(), or by using the instance in a 'with' statement.
    """

    def __init__(self, fd):
        self._fd = fd
        self._wake_r, self._wake_w = os.pipe()

    def read(self):
        # Checked first, so that an interrupt always wins over pending input
        ready, _, _ = select.select([self._fd, self._wake_r], [], [])
        if self._wake_r in ready:
            raise _ReadInterrupted()
        return os.read(self._fd, _READ_SIZE)

    def interrupt(self):
        # The byte is never consumed, so every later read() is interrupted
        # too
        os.write(self._wake_w, b"\0")

    def close(self):
        os.close(self._wake_r)
        os.close(self._wake_w)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()


class _InputReader:
    """
    Reads and classifies input on a background thread, handing over one Key
    at a time.

    After each Key the reader waits for ack() before it reads again, so there
    is never more than one Key in flight and the prompt loop never redraws
    while another key is being handled.
    """

    def __init__(self, read, interrupt=None):
        # 'read' blocks and returns the next chunk of input bytes. If given,
        # 'interrupt' makes a blocked 'read' raise _ReadInterrupted.
        self._read = read
        self._interrupt = interrupt
        self._keys = queue.Queue(maxsize=1)
        self._acks = queue.Queue(maxsize=1)
        self._thread = threading.Thread(
            target=self._loop, name="termselect-input", daemon=True
        )

    def start(self):
        self._thread.start()

    def _loop(self):
        while True:
            try:
                data = self._read()
            except _ReadInterrupted:
                return
            except OSError as e:
                # Raised again by next_key(), on the prompt thread
                self._keys.put(e)
                return

            if not data:
                self._keys.put(EOFError("end of input"))
                return

            self._keys.put(classify(data))
            if self._acks.get() == _STOP:
                return

    def next_key(self):
        """
        Blocks until the next Key arrives. Raises TerminalError if reading
        failed.
        """
        item = self._keys.get()
        if isinstance(item, Exception):
            self._thread.join()
            raise TerminalError(f"could not read input: {item}") from item
        return item

    def ack(self, stop):
        """
        Acknowledges the last Key. With stop=True the reader exits, and this
        call returns only after it has.
        """
        self._acks.put(_STOP if stop else _CONTINUE)
        if stop:
            self._thread.join()

    def close(self):
        """
        Stops the reader wherever it is and waits for it to exit. Used when
        the prompt loop ends abnormally. A reader blocked in 'read' is only
        reached if an 'interrupt' was given.
        """
        if not self._thread.is_alive():
            return

        try:
            self._acks.put_nowait(_STOP)
        except queue.Full:
            # Already acknowledged, and about to read again
            pass
        if self._interrupt is not None:
            self._interrupt()
        self._thread.join()


#
# Prompt loop
#


class _Prompt:
    """
    Owns the selection index and help visibility, and keeps the frame on
    screen in sync with them.
    """

    def __init__(self, selection, screen):
        self._sel = selection
        self._screen = screen

        # Index in options of the selected option
        self.index = 0

        # True if the frame currently on screen shows the help text. The next
        # erase needs it, since it decides the height of that frame.
        self.show_help = False

    def run(self, keys):
        """
        Draws the first frame and handles Keys from 'keys' until the user
        picks an option or cancels. Returns a Result.

        'keys' provides next_key() and ack(stop), see _InputReader.
        """
        n = len(self._sel.options)

        self._draw(False)

        while True:
            key = keys.next_key()

            if key is Key.ENTER:
                keys.ack(stop=True)
                # Also clears the help text if it's showing
                self._redraw(False)
                return Result(self._sel.options[self.index], Key.NONE)

            if key is Key.CTRL_C:
                keys.ack(stop=True)
                self._redraw(False)
                return Result("", Key.CTRL_C)

            if key is Key.UP:
                self.index = (self.index - 1 + n) % n
                self._redraw(False)

            elif key is Key.DOWN:
                self.index = (self.index + 1) % n
                self._redraw(False)

            elif key is Key.NONE:
                self._redraw(True)

            else:
                raise AssertionError(f"unhandled key {key!r}")

            keys.ack(stop=False)

    def _redraw(self, show_help):
        # Erase what's on screen, which was drawn with the old flag, then draw
        # with the new one
        self._clear(self.show_help)
        self.show_help = show_help
        self._draw(show_help)

    def _draw(self, show_help):
        screen = self._screen

        # Raw mode: '\n' only moves down, '\r' returns to column 0
        screen.write(self._sel.title + "\n")
        screen.write("\r")
        for i, option in enumerate(self._sel.options):
            screen.write("  ")
            if i == self.index:
                screen.invert()
            screen.write(option + "\n")
            if i == self.index:
                screen.reset_style()
            screen.write("\r")

        if show_help:
            screen.write(self._sel.help)

        screen.flush()

    def _clear(self, show_help):
        # The cursor is already on the bottom line of the frame, so move up
        # one less than its height
        for _ in range(frame_height(self._sel, show_help) - 1):
            self._screen.clear_line()
            self._screen.move_up()


#
# Entry points
#


def prompt(selection, infd=None, outfile=None):
    """
    Asks the user to pick one of selection.options, returning once they have
    picked one or cancelled.

    Returns a Result (selected, exit_key). On a pick, 'selected' is the option
    and 'exit_key' is Key.NONE. If the user pressed Ctrl-C, 'selected' is ""
    and 'exit_key' is Key.CTRL_C.

    selection:
      Selection to prompt for

    infd:
      File descriptor of the terminal to read keys from. Defaults to stdin.

    outfile:
      Binary stream the prompt is drawn on. Defaults to sys.stdout.buffer.

    Raises TerminalError if infd can't be put into raw mode or reading from it
    fails. The terminal is restored to its previous mode either way, unless
    it has become unusable (e.g. hung up), in which case the restore is
    skipped and the original error is raised.
    """
    if infd is None:
        infd = sys.stdin.fileno()

    screen = Screen(outfile)

    with RawMode(infd):
        screen.hide_cursor()
        try:
            result = _run_prompt(selection, screen, infd)
        except BaseException:
            # Best effort. The terminal may be what failed, and the error
            # that got us here is the one to report.
            try:
                _leave_screen(screen)
            except OSError:
                pass
            raise
        _leave_screen(screen)
        return result


def _run_prompt(selection, screen, infd):
    # The reader has exited by the time this returns, whatever happened, so
    # that no keys typed after the prompt are read by it
    with _TerminalInput(infd) as source:
        reader = _InputReader(source.read, source.interrupt)
        reader.start()
        try:
            return _Prompt(selection, screen).run(reader)
        finally:
            reader.close()


def _leave_screen(screen):
    # Leave the cursor at the start of a line, so that whatever is printed
    # next (e.g. the shell prompt) lands where expected
    screen.write("\r")
    screen.show_cursor()
    screen.flush()


def _main():
    parser = argparse.ArgumentParser(
        formatter_class=argparse.RawDescriptionHelpFormatter, description=__doc__
    )

    parser.add_argument(
        "--title", default="", help="Text shown above the options (default: none)"
    )

    parser.add_argument(
        "--help-text",
        default=_DEFAULT_HELP,
        help="Text shown below the options when an unrecognized key is pressed",
    )

    parser.add_argument(
        "options", metavar="OPTION", nargs="+", help="An option to choose from"
    )

    args = parser.parse_args()

    for option in args.options:
        if "\n" in option:
            _warn(
                f"option {option!r} spans several lines, the prompt may leave "
                "stray text behind when redrawing"
            )

    selection = Selection(args.title, args.options, args.help_text)

    try:
        selected, exit_key = prompt(selection, outfile=sys.stderr.buffer)
    except TerminalError as e:
        sys.exit(f"error: {e}")

    if exit_key is Key.CTRL_C:
        # Same status as a shell command interrupted by SIGINT
        sys.exit(130)

    print(selected)


def _warn(*args):
    # Only called before raw mode is entered. Output in raw mode would end up
    # in the middle of the frame.
    print("termselect warning: ", end="", file=sys.stderr)
    print(*args, file=sys.stderr)


if __name__ == "__main__":
    _main()
