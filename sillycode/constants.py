from __future__ import annotations

# Where emote images live; rendered as f"{emotePath}/{name}.png".
emotePath: str = "/static/emoticons"

# Prepended to link destinations that don't already name http(s).
defaultProtocol: str = "https://"

# Tag bodies longer than this are never tags.
maxTagLength: int = 32

markupClass = "sillycode-markup"
emoteClass = "sillycode-emote"

# Private-use characters bracketing link placeholders during a render.
hrefStartChar = "\uebb0"
hrefEndChar = "\uebb1"
