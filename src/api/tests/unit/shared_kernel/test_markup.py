"""Unit tests for the markup registry and renderer."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from uuid import UUID

import pytest

from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.markup import (
    DEFAULT_MARKUP,
    MARKDOWN,
    PLAINTEXT,
    MarkupContent,
    MarkupRenderer,
    is_supported,
    nil_safe_get,
    require_supported,
)


class TestIsSupported:
    """Tests for is_supported."""

    @pytest.mark.parametrize("markup", [PLAINTEXT, MARKDOWN])
    def test_recognized_tags(self, markup: str):
        """plaintext and markdown are supported."""
        assert is_supported(markup) is True

    @pytest.mark.parametrize("markup", ["", "foo", None, "Markdown"])
    def test_other_values(self, markup):
        """Empty, unknown and differently-cased tags are not."""
        assert is_supported(markup) is False


class TestRequireSupported:
    """Tests for require_supported."""

    @pytest.mark.parametrize("markup", [PLAINTEXT, MARKDOWN, "", None])
    def test_accepts_known_or_missing_tags(self, markup):
        require_supported(markup)

    def test_rejects_unknown_tag(self):
        with pytest.raises(InvalidArgumentError):
            require_supported("foo")


class TestNilSafeGet:
    """Tests for nil_safe_get."""

    def test_none_gives_default(self):
        """A missing tag means plaintext."""
        assert nil_safe_get(None) == PLAINTEXT

    def test_empty_gives_default(self):
        """An empty tag means plaintext."""
        assert nil_safe_get("") == PLAINTEXT

    def test_value_is_returned_as_is(self):
        """A set tag is returned."""
        assert nil_safe_get(MARKDOWN) == MARKDOWN

    def test_value_is_not_validated(self):
        """Unknown tags pass through unchanged."""
        assert nil_safe_get("foo") == "foo"

    def test_default_is_plaintext(self):
        """The default tag is plaintext."""
        assert DEFAULT_MARKUP == PLAINTEXT


class TestMarkupContent:
    """Tests for the stored markup content document."""

    def test_from_mapping_keeps_supported_markup(self):
        """A stored markdown description stays markdown."""
        content = MarkupContent.from_mapping({"content": "# Hi", "markup": MARKDOWN})

        assert content == MarkupContent("# Hi", MARKDOWN)

    def test_from_mapping_defaults_unknown_markup(self):
        """An unknown stored tag reads back as plaintext."""
        content = MarkupContent.from_mapping({"content": "x", "markup": "asciidoc"})

        assert content.markup == PLAINTEXT

    def test_from_empty_mapping(self):
        """Nothing stored reads back as empty plaintext."""
        assert MarkupContent.from_mapping(None) == MarkupContent("")

    def test_to_mapping(self):
        """Serializes to the stored document shape."""
        assert MarkupContent("x", MARKDOWN).to_mapping() == {
            "content": "x",
            "markup": MARKDOWN,
        }


@dataclass
class _FakeWorkItem:
    id: UUID
    space_id: UUID
    title: str


class _FakeLookup:
    """In-memory work item lookup keyed by (space, number)."""

    def __init__(self, items: dict[tuple[UUID, int], _FakeWorkItem]):
        self.items = items
        self.calls: list[tuple[UUID, int]] = []

    async def load_by_number(self, space_id: UUID, number: int):
        self.calls.append((space_id, number))
        return self.items.get((space_id, number))


@pytest.fixture
def space_id() -> UUID:
    return uuid.uuid4()


@pytest.fixture
def work_item(space_id: UUID) -> _FakeWorkItem:
    return _FakeWorkItem(id=uuid.uuid4(), space_id=space_id, title="Fix login")


@pytest.fixture
def renderer(space_id: UUID, work_item: _FakeWorkItem) -> MarkupRenderer:
    lookup = _FakeLookup({(space_id, 1): work_item})
    return MarkupRenderer(work_items=lookup, api_base_url="http://api.test/")


class TestMarkupRenderer:
    """Tests for MarkupRenderer.render."""

    @pytest.mark.asyncio
    async def test_plaintext_is_escaped(self, renderer: MarkupRenderer, space_id):
        """Plaintext is returned HTML-escaped."""
        html = await renderer.render(space_id, "<b>bold</b> & #1", PLAINTEXT)

        assert html == "&lt;b&gt;bold&lt;/b&gt; &amp; #1"

    @pytest.mark.asyncio
    async def test_markdown_is_converted(self, renderer: MarkupRenderer, space_id):
        """Markdown becomes HTML."""
        html = await renderer.render(space_id, "**bold**", MARKDOWN)

        assert "<strong>bold</strong>" in html

    @pytest.mark.asyncio
    async def test_markdown_escapes_raw_html(self, renderer: MarkupRenderer, space_id):
        """Raw HTML in markdown is not passed through."""
        html = await renderer.render(space_id, "<script>x</script>", MARKDOWN)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    @pytest.mark.asyncio
    async def test_fenced_code_gets_language_class(
        self, renderer: MarkupRenderer, space_id
    ):
        """Fenced code blocks carry a language-* class."""
        html = await renderer.render(space_id, "```python\nx = 1\n```", MARKDOWN)

        assert 'class="language-python"' in html

    @pytest.mark.asyncio
    async def test_work_item_reference_becomes_link(
        self, renderer: MarkupRenderer, space_id, work_item
    ):
        """#<number> of an existing work item links to it."""
        html = await renderer.render(space_id, "see #1", MARKDOWN)

        expected_url = (
            f"http://api.test/api/spaces/{space_id}/workitems/{work_item.id}"
        )
        assert f'href="{expected_url}"' in html
        assert 'title="Fix login"' in html
        assert ">#1</a>" in html

    @pytest.mark.asyncio
    async def test_unknown_reference_is_left_alone(
        self, renderer: MarkupRenderer, space_id
    ):
        """References to missing work items stay text."""
        html = await renderer.render(space_id, "see #99", MARKDOWN)

        assert "<a" not in html
        assert "#99" in html

    @pytest.mark.asyncio
    async def test_references_need_a_space(self, renderer: MarkupRenderer):
        """Without a space no reference is resolved."""
        html = await renderer.render(None, "see #1", MARKDOWN)

        assert "<a" not in html

    @pytest.mark.asyncio
    async def test_repeated_reference_is_looked_up_once(self, space_id, work_item):
        """Each distinct reference costs one lookup."""
        lookup = _FakeLookup({(space_id, 1): work_item})
        renderer = MarkupRenderer(work_items=lookup, api_base_url="http://api.test")

        await renderer.render(space_id, "#1 and again #1", MARKDOWN)

        assert lookup.calls == [(space_id, 1)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("markup", ["", "foo"])
    async def test_unsupported_markup_is_rejected(
        self, renderer: MarkupRenderer, space_id, markup: str
    ):
        """Only supported tags can be rendered."""
        with pytest.raises(InvalidArgumentError):
            await renderer.render(space_id, "x", markup)
