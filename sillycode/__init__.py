# pylint: disable=wrong-import-position

from __future__ import annotations

import platform
import sys


def verify_python_version() -> None:
    if sys.version_info < (3, 9):
        print(
            """Sillycode requires Python 3.9 or higher; you are on {}.""".format(
                platform.python_version(),
            ),
        )
        sys.exit(1)


verify_python_version()

from .cli import main
from .dom import diff, renderTree, reverse
from .parser import length, parse
from .parts import Color, Emote, EmoteKind, Escape, Newline, Style, StyleKind, Text, unparse
from .renderer import render
