"""slides/extract.py — Pull content out of slide fragments and the landing page.

Fragments have a fixed shape; this is not a general HTML reader:

  <span class="chapter-title">Ch 6 — Vector Algebra</span>
  <div class="slide-content">
    <section class="card topic-vectors"> ... </section>
  </div>

The landing page carries an <h1> title and a <main> block.
"""

import re

from bs4 import BeautifulSoup

SLIDE_LINK = re.compile(r"^slides/(\d+)-[^\"/]+\.html$")
CHAPTER_HEADING = re.compile(r"Ch\s+(\d+)\s*[—-]\s*(.+)")


def _soup(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, features="lxml")


def _fragment(markup: str) -> BeautifulSoup:
    # html.parser leaves fragments unwrapped (no <html><body><p> added)
    return BeautifulSoup(markup, features="html.parser")


def extract_slide_content(markup: str) -> str | None:
    """Inner markup of div.slide-content, or None if the fragment has none."""
    container = _soup(markup).select_one("div.slide-content")
    if container is None:
        return None
    return container.decode_contents().strip()


def extract_topic_class(content: str) -> str:
    """'card topic-vectors' on the first section.card → 'topic-vectors'."""
    card = _fragment(content).select_one("section.card")
    if card is None:
        return ""
    return " ".join(c for c in card.get("class", []) if c != "card")


def extract_label_title(markup: str) -> str:
    label = _soup(markup).select_one("span.chapter-title")
    return label.get_text(strip=True) if label else ""


def extract_landing(markup: str) -> tuple[str, str]:
    """Return (title, inner markup of <main>). Either may be empty."""
    soup = _soup(markup)
    h1 = soup.find("h1")
    title = h1.get_text(strip=True) if h1 else ""
    main = soup.find("main")
    return title, (main.decode_contents().strip() if main else "")


def rewrite_slide_links(content: str, positions: dict[str, int]) -> str:
    """
    Point landing-page links at in-document anchors.
    'slides/02-topic.html' → '#slide-N' where N is that fragment's deck position;
    for fragments not in the deck, N is the ordinal prefix + 1.
    """
    soup = _fragment(content)
    rewritten = 0
    for a in soup.find_all("a", href=True):
        m = SLIDE_LINK.match(a["href"])
        if not m:
            continue
        file_name = a["href"].split("/", 1)[1]
        position = positions.get(file_name, int(m.group(1)) + 1)
        a["href"] = f"#slide-{position}"
        rewritten += 1

    return soup.decode().strip() if rewritten else content


def page_title_from(chapter_title: str) -> str:
    """'Ch 6 — Vector Algebra' → 'Vector Algebra'; other titles pass through."""
    m = CHAPTER_HEADING.search(chapter_title)
    return m.group(2).strip() if m else chapter_title
