# Copyright (c) 2026 termselect contributors
# SPDX-License-Identifier: ISC
#
# Shared fixtures and helpers for the termselect pytest suite.

import io
import os
import sys

import pytest

# Ensure rawterm and termselect are importable from the project root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from rawterm import Screen  # noqa: E402
from termselect import Selection  # noqa: E402

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def selection():
    """The three-option selection used by most scenarios."""
    return Selection("Pick", ["a", "b", "c"], "h")


@pytest.fixture
def out():
    """In-memory binary stream standing in for the terminal's output."""
    return io.BytesIO()


@pytest.fixture
def screen(out):
    return Screen(out)


@pytest.fixture
def pty_pair():
    """A pseudo-terminal as (master fd, slave fd).

    The slave behaves like a real terminal (termios works on it), and
    whatever is written to the master arrives as input on the slave.
    """
    pty = pytest.importorskip("pty")
    try:
        master, slave = pty.openpty()
    except OSError as e:
        pytest.skip(f"no pseudo-terminals available: {e}")
    yield master, slave
    os.close(master)
    os.close(slave)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class ScriptedKeys:
    """Stand-in for termselect._InputReader handing out a fixed list of Keys.

    Enforces the handoff protocol: a Key is only handed out after the
    previous one was acknowledged, and never after a stop acknowledgment.
    """

    def __init__(self, keys):
        self._keys = list(keys)
        self.delivered = 0
        self.acks = []

    @property
    def stopped(self):
        return bool(self.acks) and self.acks[-1]

    def next_key(self):
        assert not self.stopped, "Key requested after the reader was stopped"
        assert len(self.acks) == self.delivered, "previous Key not acknowledged"
        assert self.delivered < len(self._keys), "prompt asked for more Keys"

        key = self._keys[self.delivered]
        self.delivered += 1
        return key

    def ack(self, stop):
        assert len(self.acks) == self.delivered - 1, "acknowledged twice"
        self.acks.append(stop)
