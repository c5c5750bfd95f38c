from __future__ import annotations

import os

from . import t


def scriptPath(*pathSegs: str) -> str:
    startPath = os.path.dirname(os.path.realpath(__file__))
    path = os.path.join(startPath, *pathSegs)
    return path


def englishFromList(items: t.Iterable[str], conjunction: str = "or") -> str:
    # Format a list of strings into an English list.
    items = list(items)
    assert len(items) > 0
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return "{0} {2} {1}".format(items[0], items[1], conjunction)
    return "{0}, {2} {1}".format(", ".join(items[:-1]), items[-1], conjunction)


def semver() -> str:
    try:
        with open(scriptPath("semver.txt"), encoding="utf-8") as fh:
            return fh.read().strip()
    except FileNotFoundError:
        return "???"
