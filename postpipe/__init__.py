"""Content-ingestion pipeline turning front-matter markdown into post records."""

from .builder import PostRecordBuilder, slugify
from .errors import (
    BuildError,
    EmptyBodyBuildError,
    EmptyBodyError,
    IngestError,
    InvalidHeaderError,
    MalformedFieldError,
    MissingFenceError,
    ParseError,
    PostPipeError,
    RegistrySealedError,
    SourceReadError,
)
from .frontmatter import FENCE, FrontMatterParser, dump_front_matter, render_post
from .models import FrontMatter, Post, RawSegment, RawSource, SegmentFailure, SourceFailure
from .pipeline import BuildReport, IngestionPipeline
from .registry import PostRegistry
from .splitter import SEPARATOR, DocumentSplitter

__version__ = "0.1.0"

__all__ = [
    "BuildError",
    "BuildReport",
    "DocumentSplitter",
    "EmptyBodyBuildError",
    "EmptyBodyError",
    "FENCE",
    "FrontMatter",
    "FrontMatterParser",
    "IngestError",
    "IngestionPipeline",
    "InvalidHeaderError",
    "MalformedFieldError",
    "MissingFenceError",
    "ParseError",
    "Post",
    "PostPipeError",
    "PostRecordBuilder",
    "PostRegistry",
    "RawSegment",
    "RawSource",
    "RegistrySealedError",
    "SEPARATOR",
    "SegmentFailure",
    "SourceFailure",
    "SourceReadError",
    "dump_front_matter",
    "render_post",
    "slugify",
]
