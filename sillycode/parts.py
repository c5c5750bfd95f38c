from __future__ import annotations

import dataclasses
import enum
import re

from . import t


class StyleKind(enum.Enum):
    """
    The independent style toggles.
    Each value is the tag body that opens it; prefix with "/" to close.
    """

    BOLD = "b"
    ITALIC = "i"
    UNDERLINE = "u"
    STRIKETHROUGH = "s"
    LINK = "url"


class EmoteKind(enum.Enum):
    """
    The fixed set of emoticons.
    Each value is the tag body that produces it, like "[:)]".
    """

    SMILE = ":)"
    SAD = ":("
    COLON_D = ":D"
    COLON_THREE = ":3"
    FEARFUL = "D:"
    SUNGLASSES = "B)"
    CRYING = ";("
    WINKING = ";)"

    @property
    def assetName(self) -> str:
        return EMOTE_ASSET_NAMES[self]


EMOTE_ASSET_NAMES: t.Mapping[EmoteKind, str] = {
    EmoteKind.SMILE: "smile",
    EmoteKind.SAD: "sad",
    EmoteKind.COLON_D: "colond",
    EmoteKind.COLON_THREE: "colonthree",
    EmoteKind.FEARFUL: "fearful",
    EmoteKind.SUNGLASSES: "sunglasses",
    EmoteKind.CRYING: "crying",
    EmoteKind.WINKING: "winking",
}


@dataclasses.dataclass(frozen=True)
class Text:
    text: str

    def toMarkup(self) -> str:
        return self.text

    def toJSON(self) -> t.JSONT:
        return {"type": "text", "text": self.text}


@dataclasses.dataclass(frozen=True)
class Escape:
    def toMarkup(self) -> str:
        return "\\"

    def toJSON(self) -> t.JSONT:
        return {"type": "escape"}


@dataclasses.dataclass(frozen=True)
class Newline:
    def toMarkup(self) -> str:
        return "\n"

    def toJSON(self) -> t.JSONT:
        return {"type": "newline"}


@dataclasses.dataclass(frozen=True)
class Style:
    style: StyleKind
    enable: bool

    def toMarkup(self) -> str:
        if self.enable:
            return f"[{self.style.value}]"
        return f"[/{self.style.value}]"

    def toJSON(self) -> t.JSONT:
        return {"type": "style", "style": self.style.value, "enable": self.enable}


@dataclasses.dataclass(frozen=True)
class Color:
    enable: bool
    # Only present when enabling; always "#rrggbb" in lowercase.
    color: str | None = None

    def toMarkup(self) -> str:
        if self.enable:
            return f"[color={self.color}]"
        return "[/color]"

    def toJSON(self) -> t.JSONT:
        if self.enable:
            return {"type": "color", "enable": True, "color": self.color}
        return {"type": "color", "enable": False}


@dataclasses.dataclass(frozen=True)
class Emote:
    emote: EmoteKind

    def toMarkup(self) -> str:
        return f"[{self.emote.value}]"

    def toJSON(self) -> t.JSONT:
        return {"type": "emote", "emote": self.emote.assetName}


# Built once; tag recognition only ever reads these.
STYLE_TAGS: t.Mapping[str, Style] = {
    **{kind.value: Style(kind, True) for kind in StyleKind},
    **{"/" + kind.value: Style(kind, False) for kind in StyleKind},
}

EMOTE_TAGS: t.Mapping[str, Emote] = {kind.value: Emote(kind) for kind in EmoteKind}

COLOR_TAG_RE = re.compile(r"color=(#[0-9a-fA-F]{6})")

COLOR_CLOSE_TAG = "/color"


def partFromTag(body: str) -> t.PartT | None:
    """
    Returns the Part a tag body stands for,
    or None if the body isn't a tag at all.
    Styles win over emotes, which win over colors.
    """
    if body in STYLE_TAGS:
        return STYLE_TAGS[body]
    if body in EMOTE_TAGS:
        return EMOTE_TAGS[body]
    match = COLOR_TAG_RE.fullmatch(body)
    if match:
        return Color(True, match.group(1).lower())
    if body == COLOR_CLOSE_TAG:
        return Color(False)
    return None


def unparse(parts: t.Iterable[t.PartT]) -> str:
    """
    Writes parts back out as markup.
    For parts that came from parse(), this is the original source,
    except that color values come back lowercased.
    """
    return "".join(part.toMarkup() for part in parts)
