# Asks for one of the files in a directory and prints its size. Ctrl-C
# cancels, and is turned into a KeyboardInterrupt like a SIGINT would be.
#
# Usage: python examples/pick.py [DIRECTORY]

import os
import sys

from rawterm import Key
from termselect import Selection, prompt

directory = sys.argv[1] if len(sys.argv) > 1 else "."
files = sorted(f for f in os.listdir(directory) if os.path.isfile(os.path.join(directory, f)))
if not files:
    sys.exit(f"no files in {directory}")

selected, exit_key = prompt(
    Selection(
        f"Files in {os.path.abspath(directory)}:",
        files,
        "Up/Down to move, Enter to pick, Ctrl-C to cancel",
    )
)
if exit_key is Key.CTRL_C:
    raise KeyboardInterrupt

print(
    "{} is {} bytes".format(selected, os.path.getsize(os.path.join(directory, selected)))
)
