"""Image stages: static-asset path normalization and raw floating <img> conversion"""

from collections.abc import Iterator

from bs4 import BeautifulSoup
from markdown_it import MarkdownIt
from markdown_it.rules_core import StateCore
from markdown_it.token import Token


EXTERNAL_SCHEMES = ("http://", "https://")
FLOATING_CLASS = "floating-image"


def normalize_src(src: str, mode: str = "publish", prefix: str = "/public") -> str:
    """Strip the static-asset prefix from a local path in publish mode."""
    if src.startswith(EXTERNAL_SCHEMES) or mode != "publish":
        return src
    prefix = prefix.rstrip("/")
    if src.startswith(prefix + "/"):
        return "/" + src[len(prefix):].lstrip("/")
    return src


def _iter_images(tokens: list[Token]) -> Iterator[Token]:
    for token in tokens:
        if token.type == "image":
            yield token
        if token.children:
            yield from _iter_images(token.children)


def image_paths_plugin(md: MarkdownIt, mode: str = "publish", prefix: str = "/public") -> None:
    def image_paths_rule(state: StateCore) -> None:
        for token in _iter_images(state.tokens):
            src = token.attrGet("src")
            if isinstance(src, str):
                token.attrSet("src", normalize_src(src, mode, prefix))

    md.core.ruler.push("blog_image_paths", image_paths_rule)


def declares_float(style: str) -> bool:
    """True when any declaration in an inline style sets the float property."""
    for declaration in style.split(";"):
        prop, sep, _ = declaration.partition(":")
        if sep and prop.strip().lower() == "float":
            return True
    return False


def parse_img_tag(markup: str) -> dict[str, str] | None:
    """Return src/alt/style of markup that is exactly one <img> tag with a src.

    Quoting style and whitespace inside the tag are irrelevant; anything else
    (other tags, surrounding text, a missing or empty src) yields None.
    """
    if not markup.strip().lower().startswith("<img"):
        return None
    soup = BeautifulSoup(markup, "html.parser")
    tags = soup.find_all(True)
    if len(tags) != 1 or tags[0].name != "img" or soup.get_text().strip():
        return None
    img = tags[0]
    src = img.get("src")
    if not src:
        return None
    return {"src": src, "alt": img.get("alt") or "", "style": img.get("style") or ""}


def make_image_token(attrs: dict[str, str]) -> Token:
    token = Token("image", "img", 0, content=attrs["alt"])
    token.attrSet("src", attrs["src"])
    token.attrSet("alt", "")
    token.children = [Token("text", "", 0, content=attrs["alt"])]
    if attrs["style"]:
        token.attrSet("style", attrs["style"])
        if declares_float(attrs["style"]):
            token.attrSet("class", FLOATING_CLASS)
    return token


def floating_images_rule(state: StateCore) -> None:
    """Replace raw <img> markup with image tokens; unparseable markup stays raw."""
    tokens = state.tokens
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token.type == "inline" and token.children:
            for j, child in enumerate(token.children):
                if child.type == "html_inline" and (attrs := parse_img_tag(child.content)):
                    token.children[j] = make_image_token(attrs)
        elif token.type == "html_block" and (attrs := parse_img_tag(token.content)):
            inline = Token("inline", "", 0, level=token.level + 1, content=token.content.strip(),
                           children=[make_image_token(attrs)])
            tokens[i:i + 1] = [
                Token("paragraph_open", "p", 1, level=token.level, block=True),
                inline,
                Token("paragraph_close", "p", -1, level=token.level, block=True),
            ]
            i += 2
        i += 1


def floating_images_plugin(md: MarkdownIt) -> None:
    md.core.ruler.push("blog_floating_images", floating_images_rule)
