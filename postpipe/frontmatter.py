"""Parsing and rendering of fenced YAML front matter."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, time
from typing import Any, Dict, FrozenSet, List, Optional, Sequence, Tuple

import yaml

from .errors import EmptyBodyError, MalformedFieldError, MissingFenceError
from .models import FrontMatter, RawSegment

FENCE = "---"

_QUOTES = "\"'"
_SCALARS = (str, int, float, bool)
_DATE_KEY = re.compile(r"^date\s*:", re.MULTILINE)


class FrontMatterParser:
    """Splits a segment into its metadata header and body text."""

    def __init__(self, fence: str = FENCE) -> None:
        self.fence = fence

    def parse(self, segment: RawSegment) -> Tuple[FrontMatter, str]:
        """Return the parsed header and the body that follows it.

        A segment whose first non-blank line is not a fence has no header and
        is returned whole as body. Raises ``MissingFenceError`` when the
        header is never closed, ``MalformedFieldError`` when a known field
        cannot be decoded and ``EmptyBodyError`` when no body remains.

        Leading blank lines are dropped from the returned body, so parsing it
        again yields it unchanged. The one exception is a body that itself
        opens with a fence line (a markdown rule): re-parsing treats that line
        as a header and fails with ``MissingFenceError`` unless a second fence
        line follows.
        """
        lines = segment.text.splitlines(keepends=True)
        start = _first_content_line(lines)
        if start == len(lines):
            raise EmptyBodyError(f"Segment {segment.ordinal} of {segment.source_id} is empty")

        if not self._is_fence(lines[start]):
            return FrontMatter(), "".join(lines[start:])

        for end in range(start + 1, len(lines)):
            if self._is_fence(lines[end]):
                break
        else:
            raise MissingFenceError(
                f"Segment {segment.ordinal} of {segment.source_id} has no closing '{self.fence}'"
            )

        header = self._load_header("".join(lines[start + 1 : end]))
        remainder = lines[end + 1 :]
        body = "".join(remainder[_first_content_line(remainder) :])
        if not body.strip():
            raise EmptyBodyError(
                f"Segment {segment.ordinal} of {segment.source_id} has no body after its header"
            )
        return header, body

    def _is_fence(self, line: str) -> bool:
        return line.rstrip() == self.fence

    def _load_header(self, text: str) -> FrontMatter:
        if not text.strip():
            return FrontMatter()
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise MalformedFieldError(None, f"invalid YAML ({exc})") from exc
        except ValueError as exc:
            # Timestamps such as 2024-02-30 match the YAML pattern but fail in datetime.
            field = "date" if _DATE_KEY.search(text) else None
            raise MalformedFieldError(field, f"invalid value ({exc})") from exc
        if data is None:
            return FrontMatter()
        if not isinstance(data, dict):
            raise MalformedFieldError(None, "front matter must be a mapping")

        return FrontMatter(
            title=_parse_title(data.get("title")),
            date=_parse_date(data.get("date")),
            tags=_parse_tags(data.get("tags")),
            authors=_parse_authors(data.get("authors")),
        )


def dump_front_matter(front_matter: FrontMatter, fence: str = FENCE) -> str:
    """Render ``front_matter`` as a fenced YAML block."""
    data: Dict[str, Any] = {}
    if front_matter.title is not None:
        data["title"] = front_matter.title
    if front_matter.date is not None:
        data["date"] = front_matter.date.isoformat().replace("+00:00", "Z")
    if front_matter.tags:
        data["tags"] = sorted(front_matter.tags)
    if front_matter.authors:
        data["authors"] = list(front_matter.authors)

    dumped = ""
    if data:
        dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True, default_flow_style=None)
    return f"{fence}\n{dumped}{fence}\n"


def render_post(front_matter: FrontMatter, body: str, fence: str = FENCE) -> str:
    """Return a complete markdown document with header and body."""
    text = body if body.endswith("\n") else body + "\n"
    return dump_front_matter(front_matter, fence) + text


def _first_content_line(lines: Sequence[str]) -> int:
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    return index


def _parse_title(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, _SCALARS):
        raise MalformedFieldError("title", f"expected text, got {type(value).__name__}")
    title = str(value).strip().strip(_QUOTES).strip()
    if not title:
        raise MalformedFieldError("title", "title is empty")
    return title


def _parse_date(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=UTC)
    if isinstance(value, str):
        try:
            return _as_utc(datetime.fromisoformat(value.strip().strip(_QUOTES)))
        except ValueError as exc:
            raise MalformedFieldError("date", f"'{value}' is not an ISO-8601 timestamp") from exc
    raise MalformedFieldError("date", f"expected a timestamp, got {type(value).__name__}")


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _parse_tags(value: Any) -> FrozenSet[str]:
    tags = {item.lower() for item in _as_str_list("tags", value)}
    return frozenset(tags)


def _parse_authors(value: Any) -> Tuple[str, ...]:
    authors: List[str] = []
    for item in _as_str_list("authors", value):
        if item not in authors:
            authors.append(item)
    return tuple(authors)


def _as_str_list(field: str, value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        items: Sequence[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = list(value)
    else:
        raise MalformedFieldError(field, f"expected a list, got {type(value).__name__}")

    result: List[str] = []
    for item in items:
        if not isinstance(item, _SCALARS):
            raise MalformedFieldError(field, f"unsupported entry {item!r}")
        cleaned = str(item).strip().strip(_QUOTES).strip()
        if cleaned:
            result.append(cleaned)
    return result


__all__ = ["FENCE", "FrontMatterParser", "dump_front_matter", "render_post"]
