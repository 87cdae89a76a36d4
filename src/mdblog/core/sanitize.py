"""Sanitization gates: the build-time article policy and the runtime diagram policy

The two policies are independent allow-lists. The article policy is broad and
prose oriented and runs through nh3 (ammonia). The diagram policy is narrow and
SVG structural; it runs as a BeautifulSoup walk so SVG-only constructs such as
<foreignObject> and xml:space survive it.
"""

import re

import nh3
from bs4 import BeautifulSoup
from bs4.element import CData, Comment, Declaration, Doctype, ProcessingInstruction


# --- article policy ---------------------------------------------------------

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
CLASSED_TAGS = ("code", "pre", "span", "div")
IMAGE_ATTRIBUTES = {"src", "alt", "style", "width", "height"}
IMAGE_CLASSES = {"floating-image"}


def _article_attributes() -> dict[str, set[str]]:
    attributes = {tag: set(attrs) for tag, attrs in nh3.ALLOWED_ATTRIBUTES.items()}
    for tag in HEADING_TAGS:
        attributes.setdefault(tag, set()).add("id")
    for tag in CLASSED_TAGS:
        attributes.setdefault(tag, set()).add("class")
    # img classes are governed by allowed_classes, so class stays out of this set
    attributes["img"] = (attributes.get("img", set()) | IMAGE_ATTRIBUTES) - {"class"}
    return attributes


ARTICLE_CLEANER = nh3.Cleaner(
    tags=nh3.ALLOWED_TAGS | {"span", "div"},
    attributes=_article_attributes(),
    generic_attribute_prefixes={"data-"},
    allowed_classes={"img": IMAGE_CLASSES},
)


def sanitize_article(markup: str) -> str:
    """Filter built article markup through the article allow-list; rejects are dropped silently."""
    return ARTICLE_CLEANER.clean(markup)


# --- diagram policy ---------------------------------------------------------

DIAGRAM_FORBIDDEN_TAGS = ["script"]

DIAGRAM_TAGS = {
    # svg structure (html.parser lowercases names, so camelCase tags appear lowercased)
    "svg", "g", "defs", "symbol", "use", "title", "desc", "style", "switch",
    "path", "rect", "circle", "ellipse", "line", "polyline", "polygon",
    "text", "tspan", "textpath", "marker", "clippath", "mask", "pattern",
    "lineargradient", "radialgradient", "stop", "filter", "fegaussianblur",
    "feoffset", "feblend", "feflood", "fecomposite", "femerge", "femergenode",
    "foreignobject",
    # html labels nested in foreignObject
    "div", "span", "p", "br", "b", "i", "em", "strong", "code", "small",
    "sub", "sup", "ul", "ol", "li", "table", "thead", "tbody", "tr", "th", "td",
}

DIAGRAM_ATTRIBUTES = {
    "id", "class", "style", "role", "transform", "version",
    "xmlns", "xmlns:xlink", "xml:space", "href", "xlink:href",
    "x", "y", "x1", "x2", "y1", "y2", "dx", "dy", "cx", "cy", "r", "rx", "ry",
    "width", "height", "d", "points", "viewbox", "preserveaspectratio",
    "fill", "fill-opacity", "fill-rule", "clip-rule", "clip-path", "mask", "filter",
    "stroke", "stroke-width", "stroke-dasharray", "stroke-dashoffset",
    "stroke-linecap", "stroke-linejoin", "stroke-miterlimit", "stroke-opacity",
    "opacity", "font-family", "font-size", "font-weight", "font-style",
    "text-anchor", "dominant-baseline", "alignment-baseline", "text-decoration",
    "textlength", "lengthadjust", "letter-spacing",
    "marker-start", "marker-mid", "marker-end", "markerwidth", "markerheight",
    "markerunits", "refx", "refy", "orient", "offset", "stop-color", "stop-opacity",
    "gradientunits", "gradienttransform", "patternunits", "stddeviation", "in", "in2",
    "result", "mode", "requiredextensions",
    "aria-label", "aria-labelledby", "aria-describedby", "aria-roledescription", "aria-hidden",
}

URL_ATTRIBUTES = {"href", "xlink:href"}
UNSAFE_URL_RE = re.compile(r'^\s*(javascript|vbscript|data):', re.IGNORECASE)
UNSAFE_STYLE_RE = re.compile(r'expression\s*\(|javascript:|url\s*\(\s*[\'"]?\s*javascript:', re.IGNORECASE)

_MARKUP_NOISE = (Comment, CData, Declaration, Doctype, ProcessingInstruction)


def _attribute_allowed(name: str, value: str) -> bool:
    if name.startswith("on"):
        return False
    if name.startswith("data-"):
        return True
    if name not in DIAGRAM_ATTRIBUTES:
        return False
    if name in URL_ATTRIBUTES and UNSAFE_URL_RE.match(value):
        return False
    if name == "style" and UNSAFE_STYLE_RE.search(value):
        return False
    return True


def sanitize_diagram(markup: str) -> str:
    """Filter rendered diagram markup through the diagram allow-list.

    <script> elements are removed with their content, event-handler attributes
    are dropped, and unknown elements are unwrapped so their text content stays.
    """
    soup = BeautifulSoup(markup, "html.parser")
    for node in soup.find_all(string=lambda s: isinstance(s, _MARKUP_NOISE)):
        node.extract()
    for tag in soup.find_all(DIAGRAM_FORBIDDEN_TAGS):
        tag.decompose()
    for tag in soup.find_all(True):
        if tag.name not in DIAGRAM_TAGS:
            tag.unwrap()
            continue
        for name in list(tag.attrs):
            value = tag.get(name)
            if isinstance(value, list):
                value = " ".join(value)
            if not _attribute_allowed(name.lower(), value or ""):
                del tag[name]
    return str(soup)
