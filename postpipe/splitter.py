"""Splitting of bundled content files into per-article segments."""

from __future__ import annotations

from typing import Iterable, Iterator

from .models import RawSegment, RawSource

SEPARATOR = "<!-- postpipe:split -->"


class DocumentSplitter:
    """Splits raw sources on a literal separator token.

    The token is opaque: it is matched verbatim and never parsed. Segment text
    is the exact substring between tokens, so joining the segments back with
    the token reproduces the source unchanged.
    """

    def __init__(self, separator: str = SEPARATOR) -> None:
        if not separator:
            raise ValueError("Separator token must be a non-empty string")
        self.separator = separator

    def split(self, source: RawSource) -> Iterator[RawSegment]:
        """Yield the segments of ``source`` in order."""
        text = source.text
        position = 0
        ordinal = 0
        while True:
            index = text.find(self.separator, position)
            if index == -1:
                break
            yield RawSegment(source_id=source.source_id, ordinal=ordinal, text=text[position:index])
            ordinal += 1
            position = index + len(self.separator)
        yield RawSegment(source_id=source.source_id, ordinal=ordinal, text=text[position:])

    def join(self, segments: Iterable[RawSegment]) -> str:
        """Re-insert the separator between segments."""
        return self.separator.join(segment.text for segment in segments)


__all__ = ["DocumentSplitter", "SEPARATOR"]
