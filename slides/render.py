"""slides/render.py — Render an AssembledDeck as one standalone HTML page."""

import html

from slides.base import AssembledDeck

KATEX_VERSION = "0.16.28"
KATEX_CDN = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist"

# Show/hide rules appended after the chapter and slide stylesheets.
DECK_CSS = """
.slide {
    display: none;
}

.slide.active {
    display: block;
}
"""

# Navigation script. Identical for every chapter; the slide count comes from the DOM.
DECK_SCRIPT = r"""
const totalSlides = document.querySelectorAll('.slide').length;
let currentSlide = 1;

document.addEventListener("DOMContentLoaded", function() {
  renderMathInElement(document.body, {
    delimiters: [
      {left: "$$", right: "$$", display: true},
      {left: "$", right: "$", display: false}
    ],
    throwOnError: false,
    trust: true
  });
});

function getSlideFromHash() {
  const hash = window.location.hash;
  if (hash.startsWith('#slide-')) {
    const num = parseInt(hash.replace('#slide-', ''));
    if (num >= 1 && num <= totalSlides) {
      return num;
    }
  }
  return 1;
}

function goTo(slideNum) {
  window.location.hash = '#slide-' + slideNum;
}

function showSlide(slideNum) {
  if (slideNum < 1 || slideNum > totalSlides) return;
  currentSlide = slideNum;

  document.querySelectorAll('.slide').forEach(slide => slide.classList.remove('active'));
  const el = document.getElementById('slide-' + currentSlide);
  if (el) el.classList.add('active');

  document.getElementById('slide-progress').style.width = (currentSlide / totalSlides) * 100 + '%';
  document.getElementById('slide-badge').textContent = currentSlide + ' / ' + totalSlides;

  const prevBtn = document.getElementById('prev-btn');
  const nextBtn = document.getElementById('next-btn');
  if (currentSlide === 1) {
    prevBtn.classList.add('disabled');
    prevBtn.removeAttribute('href');
  } else {
    prevBtn.classList.remove('disabled');
    prevBtn.href = '#slide-' + (currentSlide - 1);
  }
  if (currentSlide === totalSlides) {
    nextBtn.textContent = '↻ Start Over';
    nextBtn.href = '#slide-1';
  } else {
    nextBtn.textContent = 'Next →';
    nextBtn.href = '#slide-' + (currentSlide + 1);
  }

  document.querySelectorAll('.slide-dot').forEach((dot, index) => {
    dot.classList.toggle('active', index + 1 === currentSlide);
  });
}

window.addEventListener('hashchange', () => showSlide(getSlideFromHash()));
window.addEventListener('load', () => showSlide(getSlideFromHash()));

document.addEventListener('keydown', function(e) {
  if (e.key === 'ArrowLeft' && currentSlide > 1) {
    goTo(currentSlide - 1);
  } else if (e.key === 'ArrowRight') {
    goTo(currentSlide < totalSlides ? currentSlide + 1 : 1);
  }
});

(function() {
  let sx, sy;
  document.addEventListener('touchstart', function(e) {
    sx = e.touches[0].clientX;
    sy = e.touches[0].clientY;
  }, {passive: true});

  document.addEventListener('touchend', function(e) {
    const dx = e.changedTouches[0].clientX - sx;
    const dy = e.changedTouches[0].clientY - sy;
    if (Math.abs(dx) > 50 && Math.abs(dx) > Math.abs(dy) * 1.5) {
      if (dx < 0) {
        goTo(currentSlide < totalSlides ? currentSlide + 1 : 1);
      } else if (currentSlide > 1) {
        goTo(currentSlide - 1);
      }
    }
  }, {passive: true});
})();
"""


def _section(position: int, content: str, topic_class: str = "") -> str:
    topic = f' data-topic="{html.escape(topic_class)}"' if topic_class else ""
    return (
        f'  <section id="slide-{position}" class="slide" data-slide="{position}"{topic}>\n'
        f"{content}\n"
        f"  </section>"
    )


def _dots(total: int) -> str:
    return "\n".join(
        f'      <a class="slide-dot{" active" if n == 1 else ""}" href="#slide-{n}" data-slide="{n}"></a>'
        for n in range(1, total + 1)
    )


def render_deck(deck: AssembledDeck) -> str:
    total = deck.total_slides
    sections = []
    if deck.landing_content:
        sections.append(_section(1, deck.landing_content))
    sections += [_section(s.position, s.content, s.topic_class) for s in deck.slides]

    slide_sections = "\n\n".join(sections)
    styles = "\n\n".join(deck.css + [DECK_CSS])
    next_href = ' href="#slide-2"' if total > 1 else ' href="#slide-1"'

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(deck.page_title)} — Slides</title>

    <link rel="stylesheet" href="{KATEX_CDN}/katex.min.css">
    <script src="{KATEX_CDN}/katex.min.js"></script>
    <script src="{KATEX_CDN}/contrib/auto-render.min.js"></script>

    <style>
{styles}
    </style>
</head>
<body>

<div class="slide-progress" id="slide-progress" style="width:{100 / total:.1f}%"></div>

<div class="slide-header">
  <span class="spacer"></span>
  <span class="chapter-title">{html.escape(deck.title)}</span>
  <span class="slide-badge" id="slide-badge">1 / {total}</span>
</div>

<div class="slide-container">
  <div class="slide-content" id="slide-content">
{slide_sections}
  </div>
</div>

<nav class="slide-nav">
  <a id="prev-btn" class="nav-btn disabled">&#8592; Prev</a>
  <div class="slide-dots" id="slide-dots">
{_dots(total)}
  </div>
  <a id="next-btn"{next_href} class="nav-btn">Next &#8594;</a>
</nav>

<script>{DECK_SCRIPT}</script>

</body>
</html>
"""
