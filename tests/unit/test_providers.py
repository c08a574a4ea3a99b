"""
Tests for document providers and snapshot types.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, PropertyMock

from page_lens.interfaces import DocumentSnapshot, ElementSnapshot, Rect
from page_lens.providers import HtmlSnapshotProvider, PlaywrightSnapshotProvider


def find(element, tag):
    """First descendant with the given tag."""
    for node in element.iter_descendants():
        if node.tag == tag:
            return node
    return None


class TestHtmlSnapshotProvider:
    """Test the BeautifulSoup-backed provider."""
    
    def test_title_and_body(self):
        """Test title and body are captured."""
        snapshot = HtmlSnapshotProvider(
            "<html><head><title> Docs </title></head><body><p>Hi</p></body></html>",
            url="https://example.com",
        ).parse()
        
        assert snapshot.title == "Docs"
        assert snapshot.url == "https://example.com"
        assert snapshot.body.tag == "body"
        assert snapshot.body.children[0].tag == "p"
    
    def test_fragment_without_body(self):
        """Test markup without html/body still yields a body."""
        snapshot = HtmlSnapshotProvider("<p>Loose paragraph</p>").parse()
        
        assert snapshot.body.tag == "body"
        assert find(snapshot.body, "p").text == "Loose paragraph"
    
    def test_block_children_separated(self):
        """Test block elements do not run together."""
        snapshot = HtmlSnapshotProvider("<body><p>Hello</p><p>World</p></body>").parse()
        
        assert snapshot.body.text.split() == ["Hello", "World"]
    
    def test_inline_children_join(self):
        """Test inline elements flow into the surrounding text."""
        snapshot = HtmlSnapshotProvider("<body><p>Fast <em>and</em> simple</p></body>").parse()
        
        assert find(snapshot.body, "p").text == "Fast and simple"
        assert find(snapshot.body, "p").own_text == "Fast simple"
    
    @pytest.mark.parametrize("markup", [
        '<p style="display:none">Secret</p>',
        '<p style="visibility: hidden">Secret</p>',
        '<p hidden>Secret</p>',
        '<div style="DISPLAY: NONE"><p>Secret</p></div>',
        '<script>var secret = 1;</script>',
        '<template><p>Secret</p></template>',
    ])
    def test_hidden_content_excluded(self, markup):
        """Test hidden content never reaches rendered text."""
        snapshot = HtmlSnapshotProvider(f"<body><p>Shown</p>{markup}</body>").parse()
        
        assert "Secret" not in snapshot.body.text
        assert "secret" not in snapshot.body.text
        assert "Shown" in snapshot.body.text
    
    def test_hidden_element_flagged(self):
        """Test visibility flag on hidden elements."""
        snapshot = HtmlSnapshotProvider('<body><p style="display:none">x</p></body>').parse()
        
        assert snapshot.body.children[0].visible is False
        assert snapshot.body.children[0].text == ""
    
    def test_markup_length_covers_tags(self):
        """Test markup length counts tags as well as text."""
        snapshot = HtmlSnapshotProvider("<body><p>Hello</p></body>").parse()
        paragraph = snapshot.body.children[0]
        
        assert paragraph.markup_length == len("Hello")
        assert snapshot.body.markup_length == len("<p>Hello</p>")
    
    def test_attributes_flattened(self):
        """Test multi-valued attributes become strings."""
        snapshot = HtmlSnapshotProvider('<body><div id="main" class="a b" role="Main">x</div></body>').parse()
        div = snapshot.body.children[0]
        
        assert div.element_id == "main"
        assert div.class_list == ["a", "b"]
        assert div.role == "main"
    
    def test_max_depth_drops_deep_elements(self):
        """Test nesting past max_depth is dropped."""
        html = "<body>" + "<div>" * 10 + "deep" + "</div>" * 10 + "</body>"
        snapshot = HtmlSnapshotProvider(html, max_depth=3).parse()
        
        depth = 0
        node = snapshot.body
        while node.children:
            node = node.children[0]
            depth += 1
        assert depth == 3
    
    def test_text_survives_depth_cut(self):
        """Test text below the depth cut still reaches the ancestors."""
        html = (
            "<body>" + "<div>" * 40
            + "<p>Deeply nested words</p><span hidden>secret</span><p>and more</p>"
            + "</div>" * 40 + "</body>"
        )
        snapshot = HtmlSnapshotProvider(html, max_depth=5).parse()
    
        assert "Deeply nested words" in snapshot.body.text
        assert "and more" in snapshot.body.text
        assert "secret" not in snapshot.body.text
        assert "wordsand" not in snapshot.body.text
    
    def test_deep_page_word_count(self):
        """Test a page deeper than the snapshot cap keeps its word count."""
        from page_lens.tree import ASTBuilder
    
        html = "<body>" + "<div>" * 3000 + "one two three" + "</div>" * 3000 + "</body>"
        snapshot = HtmlSnapshotProvider(html).parse()
    
        document = ASTBuilder().build(snapshot)
    
        assert document.page_meta.total_words == 3
    
    def test_from_file(self, tmp_path):
        """Test loading from disk."""
        path = tmp_path / "page.html"
        path.write_text("<title>File</title><p>From disk</p>", encoding="utf-8")
        
        provider = HtmlSnapshotProvider.from_file(path)
        
        assert provider.url.startswith("file://")
        assert provider.parse().title == "File"
    
    @pytest.mark.asyncio
    async def test_async_interface(self):
        """Test the provider contract methods."""
        provider = HtmlSnapshotProvider("<p>Hi</p>", url="https://example.com/a")
        
        assert await provider.current_url() == "https://example.com/a"
        snapshot = await provider.snapshot()
        assert snapshot.markup == "<p>Hi</p>"


class TestSnapshotDicts:
    """Test plain-dict conversion of snapshots."""
    
    def test_round_trip(self):
        """Test to_dict/from_dict preserve the tree."""
        body = ElementSnapshot(
            tag="body",
            text="Hello",
            markup_length=12,
            rect=Rect(800, 600),
            children=[ElementSnapshot(tag="p", own_text="Hello", text="Hello", markup_length=5)],
        )
        snapshot = DocumentSnapshot(url="https://example.com", title="T", body=body)
        
        restored = DocumentSnapshot.from_dict(snapshot.to_dict())
        
        assert restored.to_dict() == snapshot.to_dict()
        assert restored.body.rect.area == 480000
    
    def test_malformed_children_skipped(self):
        """Test bad children are dropped, good ones kept."""
        data = {
            "tag": "body",
            "children": [
                {"tag": "p", "text": "ok"},
                {"text": "no tag"},
                "not a mapping",
            ],
        }
        
        element = ElementSnapshot.from_dict(data)
        
        assert [child.tag for child in element.children] == ["p"]
    
    def test_malformed_root_raises(self):
        """Test a root that is not an element mapping."""
        with pytest.raises(ValueError):
            ElementSnapshot.from_dict({"children": []})
    
    def test_malformed_body_discarded(self):
        """Test a broken body yields an empty document."""
        snapshot = DocumentSnapshot.from_dict({"url": "u", "body": {"children": []}})
        
        assert snapshot.body is None
    
    def test_depth_limit(self):
        """Test nesting beyond max_depth is cut."""
        data = {"tag": "div", "children": [{"tag": "div", "children": [{"tag": "div"}]}]}
        
        element = ElementSnapshot.from_dict(data, max_depth=1)
        
        assert len(element.children) == 1
        assert element.children[0].children == []
    
    def test_iter_descendants_breaks_cycles(self):
        """Test a cyclic tree is walked once."""
        parent = ElementSnapshot(tag="div")
        child = ElementSnapshot(tag="p", children=[parent])
        parent.children.append(child)
        
        assert [node.tag for node in parent.iter_descendants()] == ["p"]


class TestPlaywrightSnapshotProvider:
    """Test the live provider with a mocked page."""
    
    def make_page(self, result=None, error=None):
        page = MagicMock()
        type(page).url = PropertyMock(return_value="https://example.com/live")
        page.evaluate = AsyncMock(return_value=result, side_effect=error)
        page.wait_for_load_state = AsyncMock()
        return page
    
    @pytest.mark.asyncio
    async def test_snapshot_from_serialized_tree(self):
        """Test the serialized tree becomes a DocumentSnapshot."""
        page = self.make_page({
            "url": "https://example.com/live",
            "title": "Live",
            "body": {
                "tag": "BODY",
                "text": "Hello",
                "markupLength": 12,
                "visible": True,
                "children": [{
                    "tag": "P",
                    "text": "Hello",
                    "markupLength": 5,
                    "visible": True,
                    "rect": {"width": 100, "height": 20},
                }],
            },
            "markup": "<html>...</html>",
        })
        provider = PlaywrightSnapshotProvider(page, max_depth=8)
        
        snapshot = await provider.snapshot()
        
        assert await provider.current_url() == "https://example.com/live"
        assert snapshot.title == "Live"
        assert snapshot.body.children[0].tag == "p"
        assert snapshot.body.children[0].rect.area == 2000
        page.evaluate.assert_awaited_once()
        assert page.evaluate.await_args.args[1] == 8
        page.wait_for_load_state.assert_not_awaited()
    
    @pytest.mark.asyncio
    async def test_waits_for_load(self):
        """Test wait_for_load waits for network idle."""
        page = self.make_page({"url": "u", "title": "", "body": None})
        provider = PlaywrightSnapshotProvider(page, wait_for_load=True)
        
        snapshot = await provider.snapshot()
        
        page.wait_for_load_state.assert_awaited_once()
        assert snapshot.body is None
    
    @pytest.mark.asyncio
    async def test_evaluate_failure_wrapped(self):
        """Test Playwright errors become SnapshotError."""
        from playwright.async_api import Error as PlaywrightError
        from page_lens.exceptions import SnapshotError
        
        page = self.make_page(error=PlaywrightError("Target closed"))
        provider = PlaywrightSnapshotProvider(page)
        
        with pytest.raises(SnapshotError):
            await provider.snapshot()
    
    @pytest.mark.asyncio
    async def test_unexpected_result(self):
        """Test non-dict results are rejected."""
        from page_lens.exceptions import SnapshotError
        
        provider = PlaywrightSnapshotProvider(self.make_page(result="nope"))
        
        with pytest.raises(SnapshotError):
            await provider.snapshot()
