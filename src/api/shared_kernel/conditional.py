"""Conditional GET support for single resources.

Responses carry an ``ETag`` built from the fields that change whenever the
representation changes, plus ``Last-Modified`` and ``Cache-Control``. A
request whose ``If-None-Match`` matches the tag is answered with 304; only
when no ``If-None-Match`` is sent is ``If-Modified-Since`` consulted, at
one-second precision.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from fastapi import HTTPException, Request, Response, status

IF_NONE_MATCH = "If-None-Match"
IF_MODIFIED_SINCE = "If-Modified-Since"


def entity_tag(*parts: object) -> str:
    """Strong, quoted entity tag over ``parts`` (``None`` counts as empty)."""
    value = "|".join("" if part is None else _fragment(part) for part in parts)
    return f'"{hashlib.sha256(value.encode()).hexdigest()}"'


def _fragment(part: object) -> str:
    if isinstance(part, datetime):
        return _as_utc(part).isoformat()
    return str(part)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def http_date(value: datetime) -> str:
    """Format ``value`` as an IMF-fixdate, e.g. ``Sat, 17 Oct 2026 09:30:00 GMT``."""
    return format_datetime(_as_utc(value), usegmt=True)


def _parse_http_date(value: str) -> datetime | None:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    return _as_utc(parsed)


@dataclass(frozen=True)
class Validators:
    """Cache validators of one representation."""

    etag: str
    last_modified: datetime | None = None

    def headers(self, cache_control: str) -> dict[str, str]:
        """Response headers announcing these validators."""
        headers = {"ETag": self.etag, "Cache-Control": cache_control}
        if self.last_modified is not None:
            headers["Last-Modified"] = http_date(self.last_modified)
        return headers

    def is_not_modified(self, request: Request) -> bool:
        """Whether the client's cached copy is still current."""
        if_none_match = request.headers.get(IF_NONE_MATCH)
        if if_none_match is not None:
            candidates = {
                tag.strip().removeprefix("W/") for tag in if_none_match.split(",")
            }
            return "*" in candidates or self.etag in candidates

        if_modified_since = request.headers.get(IF_MODIFIED_SINCE)
        if if_modified_since is None or self.last_modified is None:
            return False
        since = _parse_http_date(if_modified_since)
        if since is None:
            return False
        last_modified = _as_utc(self.last_modified).replace(microsecond=0)
        return not since.replace(microsecond=0) < last_modified


def conditional_get(
    request: Request,
    response: Response,
    validators: Validators,
    cache_control: str,
) -> None:
    """Set the caching headers, or answer 304 when the client is up to date.

    Raises:
        HTTPException 304: If the request's preconditions say nothing changed
    """
    headers = validators.headers(cache_control)
    if validators.is_not_modified(request):
        raise HTTPException(
            status_code=status.HTTP_304_NOT_MODIFIED, headers=headers
        )
    response.headers.update(headers)
