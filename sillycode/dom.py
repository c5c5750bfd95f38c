from __future__ import annotations

import copy

import html5lib
from lxml import etree
from lxml.html import tostring

from . import t
from .renderer import render


def parseHTML(text: str) -> list[t.NodeT]:
    doc = html5lib.parse(text, treebuilder="lxml", namespaceHTMLElements=False)
    body = doc.getroot()[1]
    contents: list[t.NodeT] = [body.text] if body.text is not None else []
    contents.extend(childElements(body))
    return contents


def renderTree(parts: t.Iterable[t.PartT], editorMode: bool = False) -> t.ElementT:
    """
    Renders parts and parses the result,
    returning a detached <div> holding one child <div> per line.
    """
    return parseFragment(render(parts, editorMode))


def parseFragment(text: str) -> t.ElementT:
    root = etree.Element("div")
    appendChild(root, *parseHTML(text))
    return root


def childElements(parentEl: t.ElementT) -> t.Generator[t.ElementT, None, None]:
    for child in parentEl:
        if isinstance(child.tag, str):
            yield child


def appendChild(parent: t.ElementT, *els: t.NodeT) -> t.ElementT:
    for el in els:
        if isinstance(el, str):
            if len(parent) > 0:
                parent[-1].tail = (parent[-1].tail or "") + el
            else:
                parent.text = (parent.text or "") + el
        else:
            parent.append(el)
    return parent


def textContent(el: t.ElementT) -> str:
    return t.cast(str, tostring(el, method="text", with_tail=False, encoding="unicode"))


def innerHTML(el: t.ElementT | None) -> str:
    if el is None:
        return ""
    return escapeText(el.text or "") + "".join(tostring(x, encoding="unicode") for x in el)


def outerHTML(el: t.ElementT | None, with_tail: bool = False) -> str:
    if el is None:
        return ""
    return t.cast(str, tostring(el, with_tail=with_tail, encoding="unicode"))


def escapeText(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def reverse(root: t.ElementT) -> str:
    """
    Rebuilds sillycode from a rendered tree, like the live contents of an editor.
    Loose text continues the current line; every element is a line of its own.
    Only an editor-mode rendering keeps the tags,
    so reversing one of those gives back the source.
    """
    lines: list[str] = []

    def addText(text: str | None) -> None:
        if not text:
            return
        text = text.replace("\xa0", " ")
        if lines:
            lines[-1] += text
        else:
            lines.append(text)

    addText(root.text)
    for child in root:
        if isinstance(child.tag, str):
            lines.append(textContent(child).replace("\xa0", " "))
        addText(child.tail)

    return "\n".join(lines)


def diff(expectedRoot: t.ElementT, actualRoot: t.ElementT) -> bool:
    """
    Updates actualRoot's children in place until they match expectedRoot's.
    Elements are reused where they line up;
    only the differing text, tags, and attributes get touched.
    Returns whether anything had to change.
    """
    dirty = False

    def diffText(expected: str | None, actual: str | None) -> bool:
        nonlocal dirty
        if (expected or "") != (actual or ""):
            dirty = True
            return True
        return False

    def diffChildren(expected: t.ElementT, actual: t.ElementT) -> None:
        nonlocal dirty
        if diffText(expected.text, actual.text):
            actual.text = expected.text

        expectedChildren = list(expected)
        actualChildren = list(actual)
        for i, expectedChild in enumerate(expectedChildren):
            if i >= len(actualChildren):
                actual.append(copy.deepcopy(expectedChild))
                dirty = True
                continue
            actualChild = actualChildren[i]
            diffElement(expectedChild, actualChild)
            if diffText(expectedChild.tail, actualChild.tail):
                actualChild.tail = expectedChild.tail

        for extraChild in actualChildren[len(expectedChildren) :]:
            # lxml takes the tail along with the element
            actual.remove(extraChild)
            dirty = True

    def diffElement(expected: t.ElementT, actual: t.ElementT) -> None:
        nonlocal dirty
        if expected.tag != actual.tag:
            # Retagging in place keeps the existing children for the recursive diff.
            actual.tag = expected.tag
            dirty = True

        for name, value in expected.attrib.items():
            if actual.get(name) != value:
                actual.set(name, value)
                dirty = True

        for name in list(actual.attrib.keys()):
            if name not in expected.attrib:
                del actual.attrib[name]
                dirty = True

        diffChildren(expected, actual)

    diffChildren(expectedRoot, actualRoot)
    return dirty
