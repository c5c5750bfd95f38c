from __future__ import annotations

from . import constants, t
from .parts import Emote, Escape, Newline, Text, partFromTag


class Parser:
    """
    Single left-to-right pass over the input.

    Literal characters collect in a buffer until something forces them out.
    Every "]" looks backwards through the buffer for the nearest "[";
    if the text between them is a tag, the tag replaces it,
    otherwise everything stays buffered as literal text,
    so a later "]" can still pair up with an earlier "[".
    """

    def __init__(self) -> None:
        self.parts: list[t.PartT] = []
        self.buffer: list[str] = []
        # whether the next character was escaped by a backslash
        self.escape = False

    def emit(self, part: t.PartT) -> None:
        self.parts.append(part)

    def flush(self) -> None:
        if self.buffer:
            self.emit(Text("".join(self.buffer)))
            self.buffer = []

    def openBracketIndex(self) -> int | None:
        for i in range(len(self.buffer) - 1, -1, -1):
            if self.buffer[i] == "[":
                return i
        return None

    def tag(self) -> bool:
        index = self.openBracketIndex()
        if index is None:
            return False

        # An escaped "[" is always the first thing in the buffer,
        # since the escape flushed everything before it.
        if index == 0 and self.parts and isinstance(self.parts[-1], Escape):
            return False

        body = self.buffer[index + 1 :]
        if not body or len(body) > constants.maxTagLength:
            return False
        part = partFromTag("".join(body))
        if part is None:
            return False

        del self.buffer[index:]
        self.flush()
        self.emit(part)
        return True

    def parse(self, text: str) -> list[t.PartT]:
        for char in text:
            if not self.escape:
                if char == "\\":
                    self.escape = True
                    self.flush()
                    self.emit(Escape())
                    continue
                if char == "]" and self.tag():
                    continue

            self.escape = False

            # Escaping never swallows a line break.
            if char == "\n":
                self.flush()
                self.emit(Newline())
                continue

            self.buffer.append(char)

        self.flush()
        return self.parts


def parse(text: str) -> list[t.PartT]:
    """
    Turns sillycode markup into a list of parts.
    Never fails; anything that isn't a tag is text.
    """
    return Parser().parse(text)


def length(parts: t.Iterable[t.PartT]) -> int:
    """
    The visible length of some parts:
    one per character of text, one per line break, one per emote.
    Toggles and escapes are free.
    """
    total = 0
    for part in parts:
        if isinstance(part, Text):
            total += len(part.text)
        elif isinstance(part, (Newline, Emote)):
            total += 1
    return total
