#!/usr/bin/env python3
"""Validate rawterm and termselect on the CI runner.

Exercises line counting, key classification and the control sequences
without a terminal, the prompt loop with scripted keys, and RawMode
enter/restore when stdin is a TTY.

Run from the project root: python .ci/validate-rawterm.py
"""

import io
import os
import sys

# Ensure the project root (CWD) is on the import path, since Python
# adds the script's directory (.ci/) rather than CWD by default.
sys.path.insert(0, os.getcwd())


def check_rawterm_units():
    """rawterm line_count, classify, Screen -- no terminal required."""
    from rawterm import Key, Screen, classify, line_count

    assert line_count("") == 1, "empty string is one line"
    assert line_count("a\nb\nc") == 3, "three lines"

    assert classify(b"\x1b[A") is Key.UP, "arrow up"
    assert classify(b"\x1b[B") is Key.DOWN, "arrow down"
    assert classify(b"\r") is Key.ENTER, "carriage return"
    assert classify(b"\x03") is Key.CTRL_C, "ETX"
    assert classify(b"q") is Key.NONE, "unrecognized"

    out = io.BytesIO()
    screen = Screen(out)
    screen.invert()
    screen.reset_style()
    screen.move_up()
    screen.clear_line()
    screen.hide_cursor()
    screen.show_cursor()
    assert (
        out.getvalue() == b"\x1b[7m\x1b[0m\x1b[1A\x1b[2K\r\x1b[?25l\x1b[?25h"
    ), "control sequences"

    print("rawterm unit checks passed")


class _Keys:
    # Scripted stand-in for the input reader
    def __init__(self, keys):
        self._keys = iter(keys)
        self.acks = []

    def next_key(self):
        return next(self._keys)

    def ack(self, stop):
        self.acks.append(stop)


def check_prompt_loop():
    """termselect prompt loop over scripted keys."""
    from rawterm import Key, Screen
    from termselect import Selection, _Prompt

    sel = Selection("Pick", ["a", "b", "c"], "h")

    keys = _Keys([Key.NONE, Key.DOWN, Key.ENTER])
    result = _Prompt(sel, Screen(io.BytesIO())).run(keys)
    assert result == ("b", Key.NONE), "help, down, enter"
    assert keys.acks == [False, False, True], "acknowledgments"

    result = _Prompt(sel, Screen(io.BytesIO())).run(_Keys([Key.UP, Key.ENTER]))
    assert result == ("c", Key.NONE), "up wraps to the last option"

    result = _Prompt(sel, Screen(io.BytesIO())).run(_Keys([Key.CTRL_C]))
    assert result == ("", Key.CTRL_C), "abort"

    print("prompt loop checks passed")


def check_raw_mode():
    """RawMode enter/restore. Requires a real TTY on stdin."""
    if os.name == "nt" or not os.isatty(sys.stdin.fileno()):
        print("RawMode checks skipped (no TTY)")
        return

    import termios

    from rawterm import RawMode

    fd = sys.stdin.fileno()
    before = termios.tcgetattr(fd)
    with RawMode(fd):
        assert not termios.tcgetattr(fd)[3] & termios.ICANON, "ICANON cleared"
    assert termios.tcgetattr(fd) == before, "attributes restored"

    print("RawMode checks passed")


if __name__ == "__main__":
    check_rawterm_units()
    check_prompt_loop()
    check_raw_mode()
    print("All checks passed")
