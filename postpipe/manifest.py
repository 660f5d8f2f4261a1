"""JSON manifest and per-post export for downstream site builders."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ManifestError
from .frontmatter import render_post
from .logging import get_logger
from .registry import PostRegistry

logger = get_logger("manifest")


class ManifestPost(BaseModel):
    """Summary of one post as listed in the manifest."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    slug: str
    title: Optional[str] = None
    date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    authors: List[str] = Field(default_factory=list)
    word_count: int = 0
    source: str
    ordinal: int = 0


class Manifest(BaseModel):
    """Index of every post in a build, newest first."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    posts: List[ManifestPost] = Field(default_factory=list)
    updated_at: datetime


def build_manifest(registry: PostRegistry, now: datetime | None = None) -> Manifest:
    posts = [
        ManifestPost(
            slug=post.slug,
            title=post.title,
            date=post.date,
            tags=sorted(post.tags),
            authors=list(post.authors),
            word_count=post.word_count,
            source=post.source_id,
            ordinal=post.ordinal,
        )
        for post in registry.all()
    ]
    return Manifest(posts=posts, updated_at=now or datetime.now(UTC))


def write_manifest(path: Path, manifest: Manifest) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(manifest.model_dump_json(by_alias=True, indent=2) + "\n", encoding="utf-8")
    logger.info("Wrote manifest with %d posts to %s", len(manifest.posts), path)
    return path


def read_manifest(path: Path) -> Manifest:
    """Load and validate a manifest previously written by ``write_manifest``."""
    text = path.read_text(encoding="utf-8")
    try:
        return Manifest.model_validate_json(text)
    except ValidationError as exc:
        raise ManifestError(f"Invalid manifest {path}: {exc}") from exc


def export_posts(registry: PostRegistry, directory: Path) -> List[Path]:
    """Write each post to ``<slug>.md`` with its front matter re-rendered."""
    directory.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    for post in registry.all():
        target = directory / f"{post.slug}.md"
        target.write_text(render_post(post.front_matter, post.body), encoding="utf-8")
        written.append(target)
    logger.info("Exported %d posts to %s", len(written), directory)
    return written


__all__ = [
    "Manifest",
    "ManifestPost",
    "build_manifest",
    "export_posts",
    "read_manifest",
    "write_manifest",
]
