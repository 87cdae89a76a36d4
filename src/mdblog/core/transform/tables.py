"""Horizontal scroll regions around tables"""

from bs4 import BeautifulSoup

from mdblog.core.transform.context import StageContext, has_class


REGION_CLASS = "table-scroll-region"
FADE_CLASS = "table-right-fade"


def wrap_tables(soup: BeautifulSoup, ctx: StageContext) -> None:
    """Wrap each table with an empty fade sibling in a scroll region, once."""
    for table in soup.find_all("table"):
        if not ctx.visit("tables", table) or has_class(table.parent, REGION_CLASS):
            continue
        region = soup.new_tag("div", attrs={"class": [REGION_CLASS]})
        table.wrap(region)
        region.append(soup.new_tag("div", attrs={"class": [FADE_CLASS]}))
