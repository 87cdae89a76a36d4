"""Table-of-contents extraction from built markup and the navigation panel markup"""

from bs4 import BeautifulSoup

from mdblog.core.models import TocItem
from mdblog.core.utils.slug import heading_slug


TOC_LEVELS = ["h2", "h3", "h4"]


def extract_toc(markup: str) -> list[TocItem]:
    """Return one entry per h2-h4 heading in document order.

    Headings normally carry an id from the build; one without gets the slug
    of its text so entries stay addressable.
    """
    soup = BeautifulSoup(markup, "html.parser")
    items = []
    for heading in soup.find_all(TOC_LEVELS):
        text = " ".join(heading.get_text().split())
        items.append(TocItem(id=heading.get("id") or heading_slug(text), text=text, level=int(heading.name[1])))
    return items


def render_toc_nav(items: list[TocItem], label: str = "Table of contents") -> str:
    """Markup for the navigation panel driven by the scroll spy: one button per entry."""
    soup = BeautifulSoup("", "html.parser")
    nav = soup.new_tag("nav", attrs={"class": ["toc"], "aria-label": label})
    region = soup.new_tag("div", attrs={"class": ["toc-scroll"], "tabindex": "0"})
    listing = soup.new_tag("ul")
    for item in items:
        entry = soup.new_tag("li", attrs={"class": [f"toc-level-{item.level}"]})
        button = soup.new_tag("button", attrs={"type": "button", "data-id": item.id})
        button.string = item.text
        entry.append(button)
        listing.append(entry)
    region.append(listing)
    nav.append(region)
    soup.append(nav)
    return str(soup)
