"""slides/ — Assemble a chapter's landing page and slide fragments into one deck."""

from pathlib import Path

from models import SlideFragment
from slides.base import AssembledDeck, ChapterSources, SlideAssemblyError, find_chapter_sources
from slides.extract import (
    extract_label_title,
    extract_landing,
    extract_slide_content,
    extract_topic_class,
    page_title_from,
    rewrite_slide_links,
)
from slides.render import render_deck

__all__ = [
    "AssembledDeck",
    "ChapterSources",
    "SlideAssemblyError",
    "assemble_chapter",
    "build_chapter",
    "find_chapter_sources",
    "output_path_for",
]


def _read_css(sources: ChapterSources) -> list[str]:
    css = []
    for label, path in (("Chapter CSS", sources.chapter_css), ("Slides CSS", sources.slides_css)):
        if path is not None:
            css.append(f"/* {label} */\n{path.read_text(encoding='utf-8')}")
            print(f"  Loaded {label.lower()}: {path.name}")
    return css


def assemble_chapter(name: str, chapters_root: Path) -> AssembledDeck:
    """
    Collect and extract everything for one chapter.
    Unparsable fragments are skipped with a warning; zero usable slides is fatal.
    """
    sources = find_chapter_sources(name, chapters_root)
    print(f"  Found {len(sources.slide_files)} slides")

    title, landing_content = "", ""
    if sources.landing_page is not None:
        title, landing_content = extract_landing(sources.landing_page.read_text(encoding="utf-8"))
        print(f"  Loaded chapter landing page: {sources.landing_page.name}")

    first_position = 2 if landing_content else 1
    slides: list[SlideFragment] = []
    for i, slide_path in enumerate(sources.slide_files):
        markup = slide_path.read_text(encoding="utf-8")
        if i == 0 and not title:
            title = extract_label_title(markup)

        content = extract_slide_content(markup)
        if content is None:
            print(f"  Warning: could not extract content from {slide_path.name}")
            continue

        slides.append(SlideFragment(
            position=first_position + len(slides),
            file_name=slide_path.name,
            content=content,
            topic_class=extract_topic_class(content),
        ))

    if not slides:
        raise SlideAssemblyError(f"No slide content could be extracted for chapter {name}")
    print(f"  Extracted {len(slides)} slide contents")

    if landing_content:
        positions = {s.file_name: s.position for s in slides}
        landing_content = rewrite_slide_links(landing_content, positions)

    title = title or name
    return AssembledDeck(
        name=name,
        title=title,
        page_title=page_title_from(title),
        slides=slides,
        landing_content=landing_content,
        css=_read_css(sources),
    )


def output_path_for(name: str, build_dir: Path) -> Path:
    return Path(build_dir) / f"{name}_standalone.html"


def build_chapter(name: str, chapters_root: Path = Path("chapters"), build_dir: Path = Path("build")) -> Path:
    """Assemble a chapter and write build/<name>_standalone.html. Returns the output path."""
    print(f"Building standalone HTML for chapter {name}...")
    deck = assemble_chapter(name, chapters_root)

    output_path = output_path_for(name, build_dir)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_deck(deck), encoding="utf-8")

    extra = f" (1 landing page + {len(deck.slides)} content slides)" if deck.landing_content else ""
    print(f"  Chapter: {deck.title}")
    print(f"  Total slides: {deck.total_slides}{extra}")
    print(f"  Output: {output_path}")
    return output_path
