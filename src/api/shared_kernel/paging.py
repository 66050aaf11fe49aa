"""Offset/limit paging helpers for list endpoints.

List endpoints accept ``page[offset]`` and ``page[limit]`` query parameters
and answer with ``first``/``prev``/``next``/``last`` links.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared_kernel.exceptions import InvalidArgumentError

PAGE_SIZE_DEFAULT = 20
PAGE_SIZE_MAX = 100


@dataclass(frozen=True)
class PagingLinks:
    """Navigation links of a paged list document."""

    first: str
    last: str
    prev: str | None = None
    next: str | None = None


def compute_paging_limits(
    offset: int | None, limit: int | None
) -> tuple[int, int]:
    """Clamp raw query parameters into a usable (offset, limit) pair.

    Negative offsets become 0. Missing or non-positive limits use the default
    page size, and limits above the maximum are capped.
    """
    offset = 0 if offset is None or offset < 0 else offset

    if limit is None or limit <= 0:
        limit = PAGE_SIZE_DEFAULT
    elif limit > PAGE_SIZE_MAX:
        limit = PAGE_SIZE_MAX
    return offset, limit


def pagination_links(
    base_path: str,
    result_len: int,
    offset: int,
    limit: int,
    total_count: int,
    *additional_query: str,
) -> PagingLinks:
    """Build the paging links for one page of a list.

    Args:
        base_path: Absolute URL of the list resource, without query string.
        result_len: Number of items in the current page.
        offset: Offset of the current page.
        limit: Page size of the current page (must be positive).
        total_count: Number of items in the whole list.
        additional_query: Extra ``key=value`` query parts appended to each link.
    """
    suffix = "&" + "&".join(additional_query) if additional_query else ""

    def link(start: int, size: int) -> str:
        return f"{base_path}?page[offset]={start}&page[limit]={size}{suffix}"

    prev = None
    if offset > 0 and total_count > 0:
        if offset <= total_count:
            prev_start = offset - limit
        else:
            # first page that still intersects the end of the list
            prev_start = offset - (((offset - total_count) // limit) + 1) * limit
        prev_limit = limit
        if prev_start < 0:
            prev_limit = limit + prev_start
            prev_start = 0
        prev = link(prev_start, prev_limit)

    next_ = None
    next_start = offset + result_len
    if next_start < total_count:
        next_ = link(next_start, limit)

    # with a non-aligned offset the first page ends where the current grid starts
    first_end = (offset % limit or limit) if offset > 0 else limit
    first = link(0, first_end)

    if offset < total_count:
        last_start = offset + ((total_count - offset - 1) // limit) * limit
    else:
        last_start = offset - (((offset - total_count) // limit) + 1) * limit
    last_limit = limit
    if last_start < 0:
        last_limit = limit + last_start
        last_start = 0
    last = link(last_start, last_limit)

    return PagingLinks(first=first, last=last, prev=prev, next=next_)


def check_page_bounds(offset: int, limit: int) -> None:
    """Reject a page request stores cannot serve.

    Stores do not clamp: the HTTP layer does that through
    ``compute_paging_limits`` before calling them.

    Raises:
        InvalidArgumentError: If offset < 0 or limit < 1
    """
    if offset < 0:
        raise InvalidArgumentError("offset", offset, "must be greater or equal to 0")
    if limit < 1:
        raise InvalidArgumentError("limit", limit, "must be greater than 0")
