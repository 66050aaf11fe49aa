"""Render markup content to HTML.

Markdown bodies may reference work items of the same space with ``#<number>``.
References to existing work items become links to the work item resource.
"""

from __future__ import annotations

import html
import re
from typing import Protocol
from uuid import UUID

import markdown

from shared_kernel.exceptions import InvalidArgumentError
from shared_kernel.markup.registry import MARKDOWN, PLAINTEXT, is_supported

# [#42](http://example.com/api/spaces/.../workitems/... "Title")
MARKDOWN_LINK_TEMPLATE = '[{text}]({url} "{title}")'

_WORK_ITEM_REFERENCE = re.compile(r"#(\d+)\b")


class ReferencedWorkItem(Protocol):
    """The parts of a work item the renderer needs to build a link."""

    id: UUID
    space_id: UUID
    title: str


class WorkItemLookup(Protocol):
    """Resolves ``#<number>`` references within a space."""

    async def load_by_number(
        self, space_id: UUID, number: int
    ) -> ReferencedWorkItem | None: ...


class MarkupRenderer:
    """Converts plaintext or markdown content into HTML."""

    def __init__(self, work_items: WorkItemLookup, api_base_url: str) -> None:
        self._work_items = work_items
        self._api_base_url = api_base_url.rstrip("/")

    async def render(self, space_id: UUID | None, content: str, markup: str) -> str:
        """Render ``content`` written in ``markup`` as HTML.

        Without a ``space_id`` work item references are left as text.

        Raises:
            InvalidArgumentError: If ``markup`` is not a supported tag
        """
        if not is_supported(markup):
            raise InvalidArgumentError("markup", markup, "unsupported markup")

        if markup == PLAINTEXT:
            return html.escape(content)

        assert markup == MARKDOWN
        escaped = html.escape(content, quote=False)
        linked = escaped
        if space_id is not None:
            linked = await self._insert_work_item_links(space_id, escaped)
        converter = markdown.Markdown(extensions=["fenced_code", "tables"])
        return converter.convert(linked)

    async def _insert_work_item_links(self, space_id: UUID, source: str) -> str:
        replacements: dict[str, str] = {}
        for match in _WORK_ITEM_REFERENCE.finditer(source):
            reference = match.group(0)
            if reference in replacements:
                continue
            work_item = await self._work_items.load_by_number(
                space_id, int(match.group(1))
            )
            if work_item is None:
                continue
            replacements[reference] = MARKDOWN_LINK_TEMPLATE.format(
                text=reference,
                url=(
                    f"{self._api_base_url}/api/spaces/{work_item.space_id}"
                    f"/workitems/{work_item.id}"
                ),
                title=html.escape(work_item.title, quote=True),
            )

        if not replacements:
            return source
        return _WORK_ITEM_REFERENCE.sub(
            lambda m: replacements.get(m.group(0), m.group(0)), source
        )
