from __future__ import annotations

import contextlib
import dataclasses
import json
import sys
from collections import Counter

from . import t

MESSAGE_LEVELS = {
    "everything": 0,
    "message": 1,
    "lint": 2,
    "warning": 3,
    "fatal": 4,
    "nothing": 5,
}

DEATH_TIMING = [
    "early",  # die as soon as the first disallowed error occurs
    "late",  # die once the whole input has been checked
]

PRINT_MODES = [
    "plain",
    "console",
    "markup",
    "json",
]

# Heading and console color for each reportable category.
HEADINGS = {
    "fatal": ("FATAL ERROR", "red"),
    "lint": ("LINT", "yellow"),
    "warning": ("WARNING", "light cyan"),
}

COLORS = {
    "red": 31,
    "green": 32,
    "yellow": 33,
    "light cyan": 96,
}

STYLES = {
    "bold": 1,
    "invert": 7,
}


@dataclasses.dataclass()
class MessagesState:
    # What message category (or higher) to stop processing on
    dieOn: str = "fatal"
    # When to stop processing when an error that trips failure happens
    dieWhen: str = "late"
    # What message category (or higher) to print
    printOn: str = "everything"
    # Suppress *all* categories, *plus* the final success/fail message
    silent: bool = False
    printMode: str = "console"
    asciiOnly: bool = False
    fh: t.TextIO = t.cast("t.TextIO", sys.stdout)  # noqa: RUF009
    # Name of the sillycode file being processed, prefixed to line numbers
    source: str | None = None
    # Whether p() has written the "[" that starts a json message stream
    jsonOpen: bool = False
    # Set once the final success or failure message has been given
    finished: bool = False
    seenMessages: set[str | tuple[str, str]] = dataclasses.field(default_factory=set)
    categoryCounts: Counter[str] = dataclasses.field(default_factory=Counter)

    def record(self, category: str, message: str | tuple[str, str]) -> None:
        self.categoryCounts[category] += 1
        self.seenMessages.add(message)

    def replace(self, **kwargs: t.Any) -> MessagesState:
        return dataclasses.replace(
            self,
            seenMessages=set(),
            categoryCounts=Counter(),
            jsonOpen=False,
            finished=False,
            **kwargs,
        )

    def shouldDie(self, category: str, timing: str = "early") -> bool:
        if self.dieWhen == "late" and timing == "early":
            return False
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.dieOn]

    def shouldPrint(self, category: str) -> bool:
        if self.silent:
            return False
        if category in ("success", "failure"):
            return True
        return MESSAGE_LEVELS[category] >= MESSAGE_LEVELS[self.printOn]

    @staticmethod
    def categoryName(categoryNum: int) -> str:
        assert categoryNum >= 0
        if categoryNum >= len(MESSAGE_LEVELS):
            return "nothing"
        return list(MESSAGE_LEVELS.keys())[categoryNum]


state = MessagesState()


def p(msg: str | tuple[str, str]) -> None:
    # A tuple carries its own ASCII rendering; anything else gets "?"s.
    if isinstance(msg, tuple):
        msg, ascii = msg
    else:
        if state.printMode == "json" and not state.jsonOpen:
            msg = "[\n" + msg
            state.jsonOpen = True
        ascii = msg.encode("ascii", "replace").decode()
    if state.asciiOnly:
        msg = ascii
    try:
        print(msg, file=state.fh)
    except UnicodeEncodeError:
        print(ascii, file=state.fh)


def report(category: str, msg: str, lineNum: int | None = None) -> None:
    formattedMsg = formatMessage(category, msg, lineNum=lineNum)
    if formattedMsg not in state.seenMessages:
        state.record(category, formattedMsg)
        if state.shouldPrint(category):
            p(formattedMsg)
    if state.shouldDie(category):
        errorAndExit()


def die(msg: str, lineNum: int | None = None) -> None:
    report("fatal", msg, lineNum)


def lint(msg: str, lineNum: int | None = None) -> None:
    report("lint", msg, lineNum)


def warn(msg: str, lineNum: int | None = None) -> None:
    report("warning", msg, lineNum)


def say(msg: str) -> None:
    if state.shouldPrint("message"):
        p(formatMessage("message", msg))


def success(msg: str) -> None:
    if state.finished:
        return
    state.finished = True
    if state.shouldPrint("success"):
        p(formatMessage("success", msg))


def failure(msg: str) -> None:
    if state.finished:
        return
    state.finished = True
    if state.shouldPrint("failure"):
        p(formatMessage("failure", msg))


def retroactivelyCheckErrorLevel() -> None:
    for category, count in state.categoryCounts.items():
        if count > 0 and state.shouldDie(category, timing="late"):
            errorAndExit()


def printColor(text: str, color: str, *styles: str) -> str:
    if state.printMode != "console":
        return text
    codes = [str(STYLES[style]) for style in styles] + [str(COLORS[color])]
    return f"\033[{';'.join(codes)}m{text}\033[0m"


def location(lineNum: int | None) -> str | None:
    """
    Where a message points: "post.sc:3" when the source file is known,
    "LINE 3" otherwise, or None for messages about the whole input.
    """
    if lineNum is None:
        return state.source
    if state.source is None:
        return f"LINE {lineNum}"
    return f"{state.source}:{lineNum}"


def formatMessage(category: str, text: str, lineNum: int | None = None) -> str | tuple[str, str]:
    final = category in ("success", "failure")
    if state.printMode == "markup":
        text = text.replace("<", "&lt;")
        tag = f"final-{category}" if final else category
        where = location(lineNum)
        attr = f' at="{where}"' if where is not None and not final else ""
        return f"<{tag}{attr}>{text}</{tag}>"
    if state.printMode == "json":
        msg = {"source": state.source, "lineNum": lineNum, "messageType": category, "text": text}
        jsonText = "  " + json.dumps(msg)
        jsonText += "\n]" if final else ", "
        return jsonText

    if category == "message":
        return text
    if category == "success":
        return (
            printColor(" ✔ ", "green", "invert") + " " + text,
            printColor("YAY", "green", "invert") + " " + text,
        )
    if category == "failure":
        return (
            printColor(" ✘ ", "red", "invert") + " " + text,
            printColor("ERR", "red", "invert") + " " + text,
        )
    headingText, color = HEADINGS[category]
    where = location(lineNum)
    if lineNum is not None:
        headingText = t.cast(str, where)
    elif where is not None:
        headingText = f"{where}: {headingText}"
    return printColor(headingText + ":", color, "bold") + " " + text


def errorAndExit() -> None:
    failure("Stopped, due to errors exceeding the allowed error level.")
    sys.exit(2)


@contextlib.contextmanager
def withMessageState(fh: t.TextIO, **kwargs: t.Any) -> t.Generator[t.TextIO, None, None]:
    global state
    oldState = state
    state = oldState.replace(fh=fh, **kwargs)
    try:
        yield fh
    finally:
        state = oldState
