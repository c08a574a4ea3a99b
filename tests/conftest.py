"""
Pytest configuration and fixtures.
"""

import pytest


ARTICLE_HTML = """
<!DOCTYPE html>
<html>
  <head><title>Widget Guide</title></head>
  <body>
    <nav class="top-nav">
      <a href="/">Home</a>
      <a href="/docs">Docs</a>
      <a href="/blog">Blog</a>
    </nav>
    <main>
      <h1>Widget Guide</h1>
      <p>Widgets are small reusable components that make building pages a pleasant experience for everyone involved.</p>
      <p>This guide walks through the essentials of working with widgets in a real project from start to finish.</p>
      <h2>Installation Steps</h2>
      <p>Install the widget package with your package manager and import it in the entry point of your app.</p>
      <p>After installing, restart the development server so the new components are picked up correctly.</p>
      <ul>
        <li>Download the package archive</li>
        <li>Run the installer script</li>
      </ul>
      <h2>Pricing Details</h2>
      <p>The community edition is free forever and the team edition costs ten dollars per seat each month.</p>
      <p>Enterprise customers receive volume discounts together with a dedicated support engineer.</p>
      <pre><code>widget install --team</code></pre>
      <p style="display:none">Secret hidden paragraph that must never appear anywhere.</p>
    </main>
    <aside class="sidebar">
      <h3>Related reading</h3>
      <p>Read our companion article about gadgets and how they relate to widgets in larger systems.</p>
    </aside>
    <footer><p>Copyright Widget Corp</p></footer>
  </body>
</html>
"""


@pytest.fixture
def article_html():
    """Well-structured article page with nav, main, sidebar and a hidden paragraph."""
    return ARTICLE_HTML


@pytest.fixture
def make_snapshot():
    """Build a DocumentSnapshot from inline HTML."""
    from page_lens.providers import HtmlSnapshotProvider
    
    def _make(html, url="https://example.com/guide"):
        return HtmlSnapshotProvider(html, url=url).parse()
    
    return _make


@pytest.fixture
def make_document(make_snapshot):
    """Build an unscored PageDocument from inline HTML."""
    from page_lens.tree import ASTBuilder
    
    def _make(html, url="https://example.com/guide", **settings):
        from page_lens.config import BuilderSettings
        return ASTBuilder(BuilderSettings(**settings)).build(make_snapshot(html, url))
    
    return _make


@pytest.fixture
def article_document(make_document, article_html):
    """Unscored document of the article page."""
    return make_document(article_html)


@pytest.fixture
def scored_document(article_document):
    """Scored document of the article page."""
    from page_lens.scoring import ImportanceScorer
    return ImportanceScorer().score(article_document)


class FakeClock:
    """Manually advanced time source for cache tests."""
    
    def __init__(self, start: float = 1000.0):
        self.now = start
    
    def __call__(self) -> float:
        return self.now
    
    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    """Controllable clock."""
    return FakeClock()


@pytest.fixture
def settings():
    """Provide test settings."""
    from page_lens.config import Settings, CacheSettings, ExtractionSettings
    
    return Settings(
        cache=CacheSettings(max_size=5, ttl_seconds=60),
        extraction=ExtractionSettings(max_chars=5000),
    )
