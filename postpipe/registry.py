"""Aggregation of ingested posts for a single build."""

from __future__ import annotations

import threading
from collections import Counter
from dataclasses import replace
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import RegistrySealedError
from .logging import get_logger
from .models import Post


class PostRegistry:
    """Owns every post of one build and keeps slugs unique.

    Slug collisions are resolved by appending ``-2``, ``-3`` and so on in
    ingestion order, so ingest calls must arrive in a deterministic order.
    Once sealed the registry rejects further posts.
    """

    def __init__(self) -> None:
        self._posts: List[Post] = []
        self._by_slug: Dict[str, Post] = {}
        self._lock = threading.Lock()
        self._sealed = False
        self.logger = get_logger("registry")

    def ingest(self, post: Post) -> Post:
        """Store ``post`` and return it, renamed if its slug was taken."""
        with self._lock:
            if self._sealed:
                raise RegistrySealedError(f"Cannot ingest '{post.slug}': registry is sealed")
            slug = self._free_slug(post.slug)
            if slug != post.slug:
                self.logger.warning(
                    "Duplicate slug '%s' from %s#%d; stored as '%s'",
                    post.slug,
                    post.source_id,
                    post.ordinal,
                    slug,
                )
                post = replace(post, slug=slug)
            self._posts.append(post)
            self._by_slug[slug] = post
            return post

    def seal(self) -> None:
        with self._lock:
            self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def all(self) -> Tuple[Post, ...]:
        """Return posts newest first; ties and undated posts keep ingestion order."""
        return tuple(sorted(self._posts, key=_date_sort_key))

    def by_tag(self, tag: str) -> Tuple[Post, ...]:
        wanted = tag.strip().lower()
        return tuple(post for post in self.all() if wanted in post.tags)

    def get(self, slug: str) -> Optional[Post]:
        return self._by_slug.get(slug)

    def tag_counts(self) -> Dict[str, int]:
        counts: Counter[str] = Counter()
        for post in self._posts:
            counts.update(post.tags)
        return dict(sorted(counts.items()))

    def __len__(self) -> int:
        return len(self._posts)

    def __iter__(self) -> Iterator[Post]:
        return iter(list(self._posts))

    def __contains__(self, slug: object) -> bool:
        return slug in self._by_slug

    def _free_slug(self, slug: str) -> str:
        if slug not in self._by_slug:
            return slug
        suffix = 2
        while f"{slug}-{suffix}" in self._by_slug:
            suffix += 1
        return f"{slug}-{suffix}"


def _date_sort_key(post: Post) -> Tuple[int, float]:
    # sorted() is stable, so equal keys keep ingestion order.
    if post.date is None:
        return (1, 0.0)
    return (0, -post.date.timestamp())


__all__ = ["PostRegistry"]
