"""Syntax highlighting of fenced code with Pygments"""

import logging

from bs4 import BeautifulSoup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from mdblog.core.transform.context import LANGUAGE_PREFIX, StageContext, add_class, code_language


logger = logging.getLogger(__name__)

_FORMATTER = HtmlFormatter(nowrap=True)


def highlight_code(soup: BeautifulSoup, ctx: StageContext) -> None:
    """Tag every <pre><code> with its language and highlight it in place.

    Diagram sources and blocks that already contain markup keep their text
    verbatim; unknown languages are tagged but not highlighted.
    """
    for code in soup.select("pre > code"):
        pre = code.parent
        if not ctx.visit("highlight", pre):
            continue
        lang = code_language(pre)
        add_class(code, LANGUAGE_PREFIX + lang)
        add_class(pre, LANGUAGE_PREFIX + lang)
        pre["data-language"] = lang

        if lang == ctx.diagram_language or code.find(True) is not None:
            continue
        try:
            lexer = get_lexer_by_name(lang, stripnl=False, ensurenl=False)
        except ClassNotFound:
            logger.debug("No lexer for language '%s'; leaving block plain", lang)
            continue
        fragment = BeautifulSoup(highlight(code.get_text(), lexer, _FORMATTER), "html.parser")
        code.clear()
        for node in list(fragment.contents):
            code.append(node)
