"""Tests for postpipe.builder."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from postpipe.builder import PostRecordBuilder, slugify
from postpipe.errors import EmptyBodyBuildError, InvalidHeaderError, MissingFenceError
from postpipe.frontmatter import FrontMatterParser
from postpipe.models import FrontMatter, RawSegment


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Hello World", "hello-world"),
        ("  Leading   and trailing  ", "leading-and-trailing"),
        ("CI/CD Pipelines", "ci-cd-pipelines"),
        ("Café à Paris", "cafe-a-paris"),
        ("snake_case_names", "snake-case-names"),
        ("What's new in 3.12?", "whats-new-in-312"),
        ("!!!", ""),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


def test_build_computes_slug_and_word_count() -> None:
    header = FrontMatter(title="Introduction", date=datetime(2023, 1, 1, tzinfo=UTC))

    post = PostRecordBuilder().build("posts/intro.md", 0, header, "Three little words\n")

    assert post.slug == "introduction"
    assert post.word_count == 3
    assert post.title == "Introduction"
    assert post.source_id == "posts/intro.md"
    assert post.ordinal == 0


def test_build_falls_back_to_source_and_ordinal_without_title() -> None:
    builder = PostRecordBuilder()

    untitled = builder.build("2023/Notes Dump.md", 2, FrontMatter(), "Body")
    symbols = builder.build("2023/notes.md", 1, FrontMatter(title="???"), "Body")

    assert untitled.slug == "2023-notes-dump-2"
    assert symbols.slug == "2023-notes-1"


def test_fallback_slug_keeps_directories_apart() -> None:
    builder = PostRecordBuilder()

    first = builder.build("a/intro.md", 0, FrontMatter(), "Body")
    second = builder.build("b/intro.md", 0, FrontMatter(), "Body")
    bare = builder.build("README", 3, FrontMatter(), "Body")

    assert (first.slug, second.slug) == ("a-intro-0", "b-intro-0")
    assert bare.slug == "readme-3"


def test_build_rejects_blank_body() -> None:
    with pytest.raises(EmptyBodyBuildError):
        PostRecordBuilder().build("a.md", 0, FrontMatter(title="Empty"), "  \n\t")


def test_build_rejects_non_datetime_date() -> None:
    header = FrontMatter(title="Bad date", date="yesterday")  # type: ignore[arg-type]

    with pytest.raises(InvalidHeaderError):
        PostRecordBuilder().build("a.md", 0, header, "Body")


def test_build_segment_wraps_parse_errors() -> None:
    segment = RawSegment(source_id="a.md", ordinal=3, text="---\ntitle: Open\nBody\n")

    with pytest.raises(InvalidHeaderError) as excinfo:
        PostRecordBuilder().build_segment(segment, FrontMatterParser())

    assert isinstance(excinfo.value.parse_error, MissingFenceError)
    assert excinfo.value.__cause__ is excinfo.value.parse_error


def test_build_segment_returns_post() -> None:
    segment = RawSegment(source_id="a.md", ordinal=0, text="---\ntitle: Fine\ntags: [X]\n---\nBody text\n")

    post = PostRecordBuilder().build_segment(segment, FrontMatterParser())

    assert post.slug == "fine"
    assert post.tags == frozenset({"x"})
    assert post.body == "Body text\n"
