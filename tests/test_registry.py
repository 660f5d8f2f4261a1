"""Tests for postpipe.registry."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Optional

import pytest

from postpipe.errors import IngestError, RegistrySealedError
from postpipe.models import FrontMatter, Post
from postpipe.registry import PostRegistry


def _post(
    slug: str,
    *,
    date: Optional[datetime] = None,
    tags: tuple[str, ...] = (),
    source: str = "a.md",
    ordinal: int = 0,
) -> Post:
    header = FrontMatter(title=slug.title(), date=date, tags=frozenset(tags))
    return Post(
        slug=slug,
        front_matter=header,
        body="Body",
        source_id=source,
        ordinal=ordinal,
        word_count=1,
    )


def test_identical_slugs_are_suffixed_in_ingestion_order() -> None:
    registry = PostRegistry()

    stored = [registry.ingest(_post("notes", ordinal=index)) for index in range(4)]

    assert [post.slug for post in stored] == ["notes", "notes-2", "notes-3", "notes-4"]
    assert len(registry) == 4
    assert len({post.slug for post in registry.all()}) == 4
    assert registry.get("notes-3").ordinal == 2


def test_suffix_skips_slugs_already_taken() -> None:
    registry = PostRegistry()
    registry.ingest(_post("intro"))
    registry.ingest(_post("intro-2"))

    stored = registry.ingest(_post("intro"))

    assert stored.slug == "intro-3"


def test_collision_logs_warning(caplog: pytest.LogCaptureFixture) -> None:
    registry = PostRegistry()
    registry.ingest(_post("intro", source="one.md"))

    with caplog.at_level(logging.WARNING, logger="postpipe.registry"):
        registry.ingest(_post("intro", source="two.md"))

    assert "Duplicate slug 'intro'" in caplog.text
    assert "two.md" in caplog.text


def test_all_orders_by_date_descending_with_stable_ties() -> None:
    registry = PostRegistry()
    registry.ingest(_post("old", date=datetime(2020, 1, 1, tzinfo=UTC)))
    registry.ingest(_post("undated-first"))
    registry.ingest(_post("tie-a", date=datetime(2023, 5, 1, tzinfo=UTC)))
    registry.ingest(_post("new", date=datetime(2024, 2, 1, tzinfo=UTC)))
    registry.ingest(_post("tie-b", date=datetime(2023, 5, 1, tzinfo=UTC)))
    registry.ingest(_post("undated-second"))

    assert [post.slug for post in registry.all()] == [
        "new",
        "tie-a",
        "tie-b",
        "old",
        "undated-first",
        "undated-second",
    ]


def test_by_tag_filters_case_insensitively_with_same_order() -> None:
    registry = PostRegistry()
    registry.ingest(_post("a", date=datetime(2021, 1, 1, tzinfo=UTC), tags=("python",)))
    registry.ingest(_post("b", date=datetime(2022, 1, 1, tzinfo=UTC), tags=("rust",)))
    registry.ingest(_post("c", date=datetime(2023, 1, 1, tzinfo=UTC), tags=("python", "rust")))

    assert [post.slug for post in registry.by_tag("Python")] == ["c", "a"]
    assert registry.by_tag("go") == ()


def test_tag_counts_and_membership() -> None:
    registry = PostRegistry()
    registry.ingest(_post("a", tags=("python",)))
    registry.ingest(_post("b", tags=("python", "rust")))

    assert registry.tag_counts() == {"python": 2, "rust": 1}
    assert "a" in registry
    assert "z" not in registry
    assert [post.slug for post in registry] == ["a", "b"]


def test_sealed_registry_rejects_ingest() -> None:
    registry = PostRegistry()
    registry.ingest(_post("a"))
    registry.seal()

    with pytest.raises(RegistrySealedError) as excinfo:
        registry.ingest(_post("b"))

    assert isinstance(excinfo.value, IngestError)
    assert registry.sealed
    assert len(registry) == 1


def test_registries_are_independent() -> None:
    first = PostRegistry()
    second = PostRegistry()
    first.ingest(_post("intro"))

    assert second.ingest(_post("intro")).slug == "intro"
