"""Labeled wrapper containers around code blocks"""

from bs4 import BeautifulSoup

from mdblog.core.transform.context import StageContext, code_language, has_class


WRAPPER_CLASS = "code-block-wrapper"
LABEL_CLASS = "code-block-label"
DIAGRAM_LABEL = "diagram"


def wrap_code_blocks(soup: BeautifulSoup, ctx: StageContext) -> None:
    for pre in soup.find_all("pre"):
        if not ctx.visit("code_blocks", pre) or has_class(pre.parent, WRAPPER_CLASS):
            continue
        lang = code_language(pre)
        is_diagram = lang == ctx.diagram_language
        pre["data-language"] = lang
        if is_diagram:
            pre["data-diagram"] = ctx.diagram_language

        wrapper = soup.new_tag("div", attrs={"class": [WRAPPER_CLASS]})
        label = soup.new_tag("div", attrs={"class": [LABEL_CLASS]})
        label.string = DIAGRAM_LABEL if is_diagram else lang.upper()
        pre.wrap(wrapper)
        pre.insert_before(label)
