"""Exception hierarchy for the ingestion pipeline."""

from __future__ import annotations

from typing import Optional


class PostPipeError(RuntimeError):
    """Base class for recoverable pipeline errors."""


class ParseError(PostPipeError):
    """Raised when a segment header cannot be parsed."""


class MissingFenceError(ParseError):
    """Raised when a header is opened but never closed."""


class MalformedFieldError(ParseError):
    """Raised when a recognised header field cannot be decoded."""

    def __init__(self, field: Optional[str], detail: str) -> None:
        label = field if field is not None else "header"
        super().__init__(f"Malformed {label}: {detail}")
        self.field = field
        self.detail = detail


class EmptyBodyError(ParseError):
    """Raised when nothing but whitespace follows the header."""


class BuildError(PostPipeError):
    """Raised when a post record fails validation."""


class EmptyBodyBuildError(BuildError):
    """Raised when a post body is empty after trimming."""


class InvalidHeaderError(BuildError):
    """Raised when header data is unusable, wrapping any upstream parse error."""

    def __init__(self, message: str, parse_error: Optional[ParseError] = None) -> None:
        super().__init__(message)
        self.parse_error = parse_error


class IngestError(PostPipeError):
    """Raised when the registry refuses a post."""


class RegistrySealedError(IngestError):
    """Raised when ingesting into a registry whose build has finished."""


class ManifestError(PostPipeError):
    """Raised when a manifest file fails validation."""


class SourceReadError(PostPipeError):
    """Raised when a content file cannot be read or decoded."""

    def __init__(self, source_id: str, detail: str) -> None:
        super().__init__(f"Unable to read {source_id}: {detail}")
        self.source_id = source_id


__all__ = [
    "BuildError",
    "EmptyBodyBuildError",
    "EmptyBodyError",
    "IngestError",
    "InvalidHeaderError",
    "MalformedFieldError",
    "ManifestError",
    "MissingFenceError",
    "ParseError",
    "PostPipeError",
    "RegistrySealedError",
    "SourceReadError",
]
