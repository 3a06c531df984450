"""Pytest configuration and shared fixtures."""

import pytest


class FakeStorage:
    """Records puts in memory; keys listed in `reject` raise like a failed PUT."""

    def __init__(self, reject=()):
        self.reject = set(reject)
        self.puts = []

    def put(self, bucket, key, body, content_type):
        if key in self.reject:
            raise RuntimeError(f"AccessDenied: {key}")
        self.puts.append({"bucket": bucket, "key": key, "body": body, "content_type": content_type})


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def mappings_path(tmp_path):
    return tmp_path / "state" / "chapter-mappings.json"


SLIDE_TEMPLATE = """<!DOCTYPE html>
<html>
<body>
<div class="slide-header">
  <span class="chapter-title">{title}</span>
</div>
<div class="slide-container">
  <div class="slide-content">
    <section class="card {topic}"><h2>{heading}</h2><p>Body of {heading}</p></section>
  </div>
</div>
<nav class="slide-nav"><a href="02.html">Next</a></nav>
</body>
</html>
"""

LANDING_PAGE = """<!DOCTYPE html>
<html>
<body>
<h1>Ch 6 &mdash; Vector Algebra</h1>
<main>
  <ul>
    <li><a href="slides/01-overview.html">Overview</a></li>
    <li><a href="slides/02-topic.html">Dot and cross products</a></li>
    <li><a href="https://example.com/ref.html">Reference</a></li>
  </ul>
</main>
</body>
</html>
"""


def write_slide(slides_dir, name, heading, topic="topic-basic", title="Ch 6 — Vector Algebra"):
    path = slides_dir / name
    path.write_text(SLIDE_TEMPLATE.format(title=title, topic=topic, heading=heading), encoding="utf-8")
    return path


@pytest.fixture
def chapters_root(tmp_path):
    """chapters/06-app-vector-algebra with a landing page, CSS and two slides."""
    root = tmp_path / "chapters"
    chapter = root / "06-app-vector-algebra"
    slides = chapter / "slides"
    slides.mkdir(parents=True)
    (chapter / "06-app-vector-algebra.html").write_text(LANDING_PAGE, encoding="utf-8")
    (chapter / "06-app-vector-algebra.css").write_text(".card { color: navy; }", encoding="utf-8")
    (slides / "slides.css").write_text(".slide-nav { display: flex; }", encoding="utf-8")
    write_slide(slides, "01-overview.html", "Overview", topic="topic-vectors")
    write_slide(slides, "02-topic.html", "Products", topic="topic-products")
    return root
