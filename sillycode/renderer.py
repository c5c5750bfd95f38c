from __future__ import annotations

import dataclasses
import re

from . import constants, t
from .parts import Color, Emote, EmoteKind, Escape, Newline, Style, StyleKind, Text

STYLE_ELEMENTS: t.Mapping[StyleKind, str] = {
    StyleKind.BOLD: "strong",
    StyleKind.ITALIC: "em",
    StyleKind.UNDERLINE: "ins",
    StyleKind.STRIKETHROUGH: "del",
}


def escapeHTML(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def normalizeHref(href: str) -> str:
    href = href.strip()
    if not re.match(r"https?://", href, re.IGNORECASE):
        href = constants.defaultProtocol + href
    return href


@dataclasses.dataclass(eq=False)
class LinkRef:
    # Stands in for the href until the whole document is rendered.
    placeholder: str
    href: str = ""


@dataclasses.dataclass(eq=False)
class Element:
    """
    An entry in the stack of open elements.
    Style elements are just a tag name;
    spans carry their color, and anchors carry the link they feed.
    """

    tag: str
    color: str | None = None
    link: LinkRef | None = None

    def startTag(self) -> str:
        if self.tag == "span":
            return f'<span style="color: {self.color}">'
        if self.tag == "a":
            assert self.link is not None
            return f'<a href="{self.link.placeholder}">'
        return f"<{self.tag}>"

    def endTag(self) -> str:
        return f"</{self.tag}>"


class Renderer:
    def __init__(self, parts: t.Sequence[t.PartT], editorMode: bool = False) -> None:
        self.parts = parts
        self.editorMode = editorMode
        self.html: list[str] = []
        self.elements: list[Element] = []
        self.links: list[LinkRef] = []
        self.linkCounter = 0
        self.placeholderStart, self.placeholderEnd = placeholderBrackets(parts)

    def write(self, html: str) -> None:
        self.html.append(html)

    def markup(self, source: str) -> None:
        # Source tokens are only visible to editors.
        if self.editorMode:
            self.write(f'<span class="{constants.markupClass}">{escapeHTML(source)}</span>')

    def open(self, el: Element) -> None:
        self.write(el.startTag())

    def close(self, el: Element) -> None:
        self.write(el.endTag())

    def openAll(self) -> None:
        for el in self.elements:
            self.open(el)

    def closeAll(self) -> None:
        for el in reversed(self.elements):
            self.close(el)

    def push(self, el: Element) -> None:
        self.open(el)
        self.elements.append(el)

    def remove(self, pred: t.Callable[[Element], bool]) -> bool:
        """
        Closes the topmost element matching pred.
        Anything opened after it gets closed first and reopened afterwards,
        so the output stays properly nested.
        """
        for i in range(len(self.elements) - 1, -1, -1):
            if not pred(self.elements[i]):
                continue
            target = self.elements.pop(i)
            preserved = self.elements[i:]
            for el in reversed(preserved):
                self.close(el)
            self.close(target)
            for el in preserved:
                self.open(el)
            return True
        return False

    def apply(self, tag: str, enable: bool) -> None:
        if enable:
            if not any(el.tag == tag for el in self.elements):
                self.push(Element(tag))
        else:
            self.remove(lambda el: el.tag == tag)

    def pushLink(self) -> None:
        link = LinkRef(f"{self.placeholderStart}HREF{self.linkCounter}{self.placeholderEnd}")
        self.linkCounter += 1
        self.links.append(link)
        self.push(Element("a", link=link))

    def onText(self, part: Text) -> None:
        text = escapeHTML(part.text)
        self.write(text)
        for el in self.elements:
            if el.link is not None:
                el.link.href += text

    def onEscape(self, part: Escape) -> None:
        self.markup(part.toMarkup())

    def onNewline(self, part: Newline) -> None:
        self.closeAll()
        self.write("</div><div>")
        self.openAll()

    def onStyle(self, part: Style) -> None:
        if part.enable:
            self.markup(part.toMarkup())
        if part.style is StyleKind.LINK:
            if part.enable:
                self.pushLink()
            else:
                self.remove(lambda el: el.tag == "a")
        else:
            self.apply(STYLE_ELEMENTS[part.style], part.enable)
        if not part.enable:
            self.markup(part.toMarkup())

    def onColor(self, part: Color) -> None:
        if part.enable:
            self.markup(part.toMarkup())
            self.push(Element("span", color=part.color))
        else:
            self.remove(lambda el: el.tag == "span")
            self.markup(part.toMarkup())

    def onEmote(self, part: Emote) -> None:
        self.write(emoteHTML(part.emote, self.editorMode))

    def render(self) -> str:
        self.write("<div>")
        for part in self.parts:
            if isinstance(part, Text):
                self.onText(part)
            elif isinstance(part, Escape):
                self.onEscape(part)
            elif isinstance(part, Newline):
                self.onNewline(part)
            elif isinstance(part, Style):
                self.onStyle(part)
            elif isinstance(part, Color):
                self.onColor(part)
            elif isinstance(part, Emote):
                self.onEmote(part)
            else:
                t.assert_never(part)
        self.closeAll()
        self.write("</div>")

        html = "".join(self.html)
        for link in self.links:
            html = html.replace(link.placeholder, normalizeHref(link.href))

        # Keep leading/trailing spaces and empty lines visible in a contenteditable.
        return (
            html.replace("<div> ", "<div>&nbsp;")
            .replace(" </div>", " <br></div>")
            .replace("<div></div>", "<div><br></div>")
        )


def emoteHTML(emote: EmoteKind, editorMode: bool = False) -> str:
    name = emote.assetName
    path = f"{constants.emotePath}/{name}.png"
    if editorMode:
        return (
            f'<span class="{constants.emoteClass}" style="background-image: url({path})">'
            f"[{escapeHTML(emote.value)}]</span>"
        )
    return f'<img class="{constants.emoteClass}" src="{path}" alt="{name}">'


def placeholderBrackets(parts: t.Iterable[t.PartT]) -> tuple[str, str]:
    # The placeholder start must not appear in any text,
    # or the final substitution could rewrite the user's words.
    texts = [part.text for part in parts if isinstance(part, Text)]
    start = constants.hrefStartChar
    while any(start in text for text in texts):
        start += constants.hrefStartChar
    return start, constants.hrefEndChar


def render(parts: t.Iterable[t.PartT], editorMode: bool = False) -> str:
    """
    Renders parts as HTML, one <div> per line.
    With editorMode, the source tokens are shown too,
    wrapped in <span class="sillycode-markup">.
    """
    return Renderer(list(parts), editorMode).render()
