# pylint: skip-file
# Module for holding types, for easy importing into the rest of the codebase
from __future__ import annotations

import sys

# The only things that should be available during runtime.
from typing import TYPE_CHECKING, Generic, TypeVar, cast, overload

# Only available in 3.11, so stub them out for earlier versions
if sys.version_info >= (3, 11):
    from typing import assert_never
else:
    from typing_extensions import assert_never


if TYPE_CHECKING:
    from typing import (
        Any,
        Callable,
        Generator,
        Iterable,
        Iterator,
        Literal,
        Mapping,
        Sequence,
        TextIO,
        TypeAlias,
        TypeGuard,
    )

    from lxml import etree

    ElementT: TypeAlias = etree._Element
    NodeT: TypeAlias = str | ElementT

    from .parts import Color, Emote, Escape, Newline, Style, Text

    PartT: TypeAlias = Text | Escape | Newline | Style | Color | Emote

    # Same as Python's json module
    JSONT: TypeAlias = dict[str, Any]
