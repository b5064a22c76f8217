"""Error classes for the Ruby visibility resolver.

This module provides:
- VisibilityResolverError: Base exception class for all resolver errors
- ParserError: Source parsing or language detection failed
- ResolverConfigError: Resolver configuration is invalid
- ResolverInputError: Source input cannot be read or is too large
- ClassificationError: A construct could not be classified (recoverable)
- MalformedStreamError: Declaration event stream is badly nested (fatal)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ruby_visibility.models import SourceSite


class VisibilityResolverError(Exception):
    """Base exception for all visibility resolver errors."""

    pass


class ParserError(VisibilityResolverError):
    """Raised when source code cannot be parsed or its language detected."""

    pass


class ResolverConfigError(VisibilityResolverError):
    """Raised when resolver configuration is invalid."""

    pass


class ResolverInputError(VisibilityResolverError):
    """Raised when a source file cannot be read or exceeds the size limit."""

    pass


class ClassificationError(VisibilityResolverError):
    """Raised when a syntactic construct has an unrecognised shape.

    Recoverable: the classifier records it as a diagnostic, drops the
    construct and carries on.
    """

    def __init__(self, message: str, site: SourceSite | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.site = site


class MalformedStreamError(VisibilityResolverError):
    """Raised when scope open/close events do not balance.

    Fatal: resolution aborts and no records are returned.
    """

    def __init__(
        self,
        message: str,
        position: int | None = None,
        site: SourceSite | None = None,
    ) -> None:
        location = ""
        if position is not None:
            location = f" (event {position}"
            if site is not None:
                location += f", line {site.line_start}"
            location += ")"
        super().__init__(f"{message}{location}")
        self.message = message
        self.position = position
        self.site = site
