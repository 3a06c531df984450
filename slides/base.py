"""slides/base.py — Shared assembler types and chapter source discovery."""

from dataclasses import dataclass, field
from pathlib import Path

from models import SlideFragment


class SlideAssemblyError(RuntimeError):
    """Raised when a chapter cannot produce a deck at all."""


@dataclass
class ChapterSources:
    name: str
    chapter_dir: Path
    slide_files: list[Path]              # sorted by file name
    landing_page: Path | None = None
    chapter_css: Path | None = None
    slides_css: Path | None = None


@dataclass
class AssembledDeck:
    name: str
    title: str                           # e.g. "Ch 6 — Vector Algebra"
    page_title: str                      # e.g. "Vector Algebra"
    slides: list[SlideFragment]
    landing_content: str = ""
    css: list[str] = field(default_factory=list)

    @property
    def total_slides(self) -> int:
        return len(self.slides) + (1 if self.landing_content else 0)


def _optional(path: Path) -> Path | None:
    return path if path.is_file() else None


def find_chapter_sources(name: str, chapters_root: Path) -> ChapterSources:
    """
    Locate a chapter's inputs:
      <root>/<name>/<name>.html           landing page (optional)
      <root>/<name>/<name>.css            chapter stylesheet (optional)
      <root>/<name>/slides/*.html         slide fragments, sorted by file name
      <root>/<name>/slides/slides.css     slide stylesheet (optional)
    """
    chapter_dir = Path(chapters_root) / name
    slides_dir = chapter_dir / "slides"

    if not chapter_dir.is_dir():
        raise SlideAssemblyError(f"Chapter not found: {chapter_dir}")
    if not slides_dir.is_dir():
        raise SlideAssemblyError(f"Slides directory not found: {slides_dir}")

    # Plain string sort: ordinal prefixes must be zero-padded to order correctly.
    slide_files = sorted(
        (p for p in slides_dir.iterdir() if p.is_file() and p.suffix == ".html"),
        key=lambda p: p.name,
    )
    if not slide_files:
        raise SlideAssemblyError(f"No HTML slide files found in {slides_dir}")

    return ChapterSources(
        name=name,
        chapter_dir=chapter_dir,
        slide_files=slide_files,
        landing_page=_optional(chapter_dir / f"{name}.html"),
        chapter_css=_optional(chapter_dir / f"{name}.css"),
        slides_css=_optional(slides_dir / "slides.css"),
    )
