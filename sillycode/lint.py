from __future__ import annotations

from . import config, t
from . import messages as m
from .parser import length
from .parts import Color, Newline, Style, StyleKind


def lintParts(parts: t.Sequence[t.PartT], maxLength: int | None = None) -> bool:
    """
    Complains about toggles that close without having opened,
    toggles that never close, and text that's too long.
    None of these stop rendering; they're just probably not what was meant.
    Returns True if nothing was reported.
    """
    clean = True
    lineNum = 1
    # b/i/u/s are either on or off, but links and colors nest,
    # so those remember the line of every open instance.
    openStyles: dict[str, int] = {}
    openStacks: dict[str, list[int]] = {"url": [], "color": []}

    for part in parts:
        if isinstance(part, Newline):
            lineNum += 1
            continue
        if isinstance(part, Style) and part.style is not StyleKind.LINK:
            tag = part.style.value
            if part.enable:
                openStyles.setdefault(tag, lineNum)
                continue
            if tag in openStyles:
                del openStyles[tag]
                continue
        elif isinstance(part, (Style, Color)):
            tag = "color" if isinstance(part, Color) else "url"
            if part.enable:
                openStacks[tag].append(lineNum)
                continue
            if openStacks[tag]:
                openStacks[tag].pop()
                continue
        else:
            continue
        m.lint(f"[/{tag}] closes a [{tag}] that was never opened.", lineNum=lineNum)
        clean = False

    unclosed = {f"[{tag}]": line for tag, line in openStyles.items()}
    unclosed.update({f"[{tag}]": lines[0] for tag, lines in openStacks.items() if lines})
    if unclosed:
        m.lint(f"Never closed {config.englishFromList(unclosed, 'and')}.", lineNum=min(unclosed.values()))
        clean = False

    if maxLength is not None:
        visibleLength = length(parts)
        if visibleLength > maxLength:
            m.die(f"Text is {visibleLength} characters long, but only {maxLength} are allowed.")
            clean = False

    return clean
