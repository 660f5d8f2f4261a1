"""Construction of validated post records from parsed segments."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import PurePosixPath
from unicodedata import normalize

from .errors import EmptyBodyBuildError, InvalidHeaderError, ParseError
from .frontmatter import FrontMatterParser
from .models import FrontMatter, Post, RawSegment


def slugify(text: str) -> str:
    """Return a lower-case, hyphen-separated ASCII slug for ``text``."""
    ascii_text = normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    slug = ascii_text.lower()
    slug = re.sub(r"[\s/_]+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


class PostRecordBuilder:
    """Turns header and body pairs into immutable ``Post`` values."""

    def build(self, source_id: str, ordinal: int, header: FrontMatter, body: str) -> Post:
        if not body.strip():
            raise EmptyBodyBuildError(f"Segment {ordinal} of {source_id} has an empty body")
        if header.date is not None and not isinstance(header.date, datetime):
            raise InvalidHeaderError(f"Segment {ordinal} of {source_id} has an invalid date")

        return Post(
            slug=self._slug_for(source_id, ordinal, header),
            front_matter=header,
            body=body,
            source_id=source_id,
            ordinal=ordinal,
            word_count=len(body.split()),
        )

    def build_segment(self, segment: RawSegment, parser: FrontMatterParser) -> Post:
        """Parse ``segment`` and build its post, wrapping parse failures."""
        try:
            header, body = parser.parse(segment)
        except ParseError as exc:
            raise InvalidHeaderError(str(exc), parse_error=exc) from exc
        return self.build(segment.source_id, segment.ordinal, header, body)

    @staticmethod
    def _slug_for(source_id: str, ordinal: int, header: FrontMatter) -> str:
        slug = slugify(header.title) if header.title else ""
        if slug:
            return slug
        suffix = PurePosixPath(source_id).suffix
        base = source_id[: -len(suffix)] if suffix else source_id
        return f"{slugify(base) or 'post'}-{ordinal}"


__all__ = ["PostRecordBuilder", "slugify"]
