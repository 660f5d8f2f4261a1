"""Pipeline driver tying splitting, parsing, building and ingestion together."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .builder import PostRecordBuilder
from .config import PostPipeConfig, load_config
from .errors import IngestError, PostPipeError, SourceReadError
from .frontmatter import FrontMatterParser
from .logging import get_logger
from .models import Post, RawSource, SegmentFailure, SourceFailure
from .registry import PostRegistry
from .sources import ContentScanner, load_source
from .splitter import DocumentSplitter


@dataclass
class BuildReport:
    """Outcome of one build: the sealed registry plus every recorded failure."""

    registry: PostRegistry
    sources: List[str] = field(default_factory=list)
    failures: List[SegmentFailure] = field(default_factory=list)
    source_failures: List[SourceFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.source_failures


class IngestionPipeline:
    """Runs sources through splitter, parser and builder into a registry."""

    def __init__(
        self,
        splitter: DocumentSplitter | None = None,
        parser: FrontMatterParser | None = None,
        builder: PostRecordBuilder | None = None,
        *,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.splitter = splitter or DocumentSplitter()
        self.parser = parser or FrontMatterParser()
        self.builder = builder or PostRecordBuilder()
        self.max_workers = max_workers
        self.logger = get_logger("pipeline")

    @classmethod
    def from_config(cls, config: PostPipeConfig, *, max_workers: Optional[int] = None) -> "IngestionPipeline":
        return cls(
            splitter=DocumentSplitter(config.separator),
            max_workers=max_workers or config.max_workers,
        )

    def process_source(self, source: RawSource) -> Tuple[List[Post], List[SegmentFailure]]:
        """Build every segment of ``source``; failures never affect siblings."""
        posts: List[Post] = []
        failures: List[SegmentFailure] = []
        for segment in self.splitter.split(source):
            try:
                posts.append(self.builder.build_segment(segment, self.parser))
            except PostPipeError as exc:
                self.logger.warning(
                    "Skipping %s#%d: %s", segment.source_id, segment.ordinal, exc
                )
                failures.append(
                    SegmentFailure(source_id=segment.source_id, ordinal=segment.ordinal, error=exc)
                )
        return posts, failures

    def run(
        self,
        sources: Iterable[RawSource],
        registry: PostRegistry | None = None,
    ) -> BuildReport:
        """Process ``sources`` and ingest their posts in source order."""
        registry = registry if registry is not None else PostRegistry()
        source_list = list(sources)
        report = BuildReport(registry=registry, sources=[source.source_id for source in source_list])

        for posts, failures in self._process_all(source_list):
            report.failures.extend(failures)
            for post in posts:
                try:
                    registry.ingest(post)
                except IngestError as exc:
                    self.logger.warning("Could not ingest %s#%d: %s", post.source_id, post.ordinal, exc)
                    report.failures.append(
                        SegmentFailure(source_id=post.source_id, ordinal=post.ordinal, error=exc)
                    )

        registry.seal()
        self.logger.info(
            "Ingested %d posts from %d sources (%d failed segments)",
            len(registry),
            len(source_list),
            len(report.failures),
        )
        return report

    def run_directory(
        self,
        path: str | Path,
        config: PostPipeConfig | None = None,
        *,
        output_dirs: Sequence[Path] = (),
    ) -> BuildReport:
        """Scan a content directory and run every readable file through the pipeline.

        Export directories inside the content root, from ``config.output`` or
        ``output_dirs``, are skipped so a rebuild never ingests its own output.
        """
        root = Path(path).expanduser().resolve()
        config = config or load_config(root)
        exclude_paths = list(config.exclude_paths)
        targets = [config.output.posts_dir, *output_dirs]
        exclude_paths.extend(_excluded_output(root, target) for target in targets if target is not None)
        scanner = ContentScanner(include=config.include, exclude_paths=[p for p in exclude_paths if p])
        paths = scanner.scan(root)
        self.logger.debug("Scanner discovered %d content files under %s", len(paths), root)

        sources: List[RawSource] = []
        source_failures: List[SourceFailure] = []
        for file_path in paths:
            try:
                sources.append(load_source(root, file_path))
            except SourceReadError as exc:
                self.logger.error("%s", exc)
                source_failures.append(SourceFailure(source_id=exc.source_id, error=exc))

        report = self.run(sources)
        report.source_failures.extend(source_failures)
        return report

    def _process_all(
        self, sources: Sequence[RawSource]
    ) -> Iterable[Tuple[List[Post], List[SegmentFailure]]]:
        if self.max_workers == 1 or len(sources) < 2:
            return [self.process_source(source) for source in sources]
        # Executor.map preserves input order, keeping slug resolution deterministic.
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self.process_source, sources))


def _excluded_output(root: Path, target: Path) -> str:
    """Return an anchored directory pattern for ``target`` when it lies under ``root``."""
    try:
        relative = target.expanduser().resolve().relative_to(root)
    except ValueError:
        return ""
    if not relative.parts:
        return ""
    return f"/{relative.as_posix()}/"


__all__ = ["BuildReport", "IngestionPipeline"]
