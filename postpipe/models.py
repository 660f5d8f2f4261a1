"""Core data models shared across postpipe components."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple


@dataclass
class RawSource:
    """Raw text of one content file, keyed by its identifier."""

    source_id: str
    text: str


@dataclass(frozen=True)
class RawSegment:
    """A contiguous slice of a source between separator tokens."""

    source_id: str
    ordinal: int
    text: str


@dataclass(frozen=True)
class FrontMatter:
    """Metadata parsed from the fenced header of a segment."""

    title: Optional[str] = None
    date: Optional[datetime] = None
    tags: FrozenSet[str] = field(default_factory=frozenset)
    authors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Post:
    """A validated article ready for downstream renderers."""

    slug: str
    front_matter: FrontMatter
    body: str
    source_id: str
    ordinal: int
    word_count: int

    @property
    def title(self) -> Optional[str]:
        return self.front_matter.title

    @property
    def date(self) -> Optional[datetime]:
        return self.front_matter.date

    @property
    def tags(self) -> FrozenSet[str]:
        return self.front_matter.tags

    @property
    def authors(self) -> Tuple[str, ...]:
        return self.front_matter.authors


@dataclass
class SegmentFailure:
    """Records a segment that could not be parsed, built or ingested."""

    source_id: str
    ordinal: int
    error: Exception


@dataclass
class SourceFailure:
    """Records a content file that could not be read."""

    source_id: str
    error: Exception
