"""Visibility resolver facade: source or events in, resolution result out."""

import logging
from collections.abc import Iterable
from pathlib import Path

from ruby_visibility.classifier import EventClassifier
from ruby_visibility.config import ResolverConfig
from ruby_visibility.driver import ResolverDriver
from ruby_visibility.errors import ResolverInputError
from ruby_visibility.events import DeclarationEvent
from ruby_visibility.models import ResolutionResult
from ruby_visibility.syntax.parser import RubySourceParser

logger = logging.getLogger(__name__)


class VisibilityResolver:
    """Resolves the effective visibility of every method in a Ruby file.

    Each call runs with its own classifier, frame stack and emitter, so a
    single instance can resolve many files, including from several threads.
    """

    def __init__(self, config: ResolverConfig | None = None) -> None:
        """Initialise the resolver.

        Args:
            config: Resolver configuration (defaults if None)

        """
        self._config = config or ResolverConfig()
        self._driver = ResolverDriver()

    def resolve_events(
        self, events: Iterable[DeclarationEvent], source: str | None = None
    ) -> ResolutionResult:
        """Resolve an already classified declaration event stream.

        Args:
            events: Declaration events in document order
            source: Optional label for the result (e.g. a file path)

        Returns:
            ResolutionResult with records and no diagnostics

        Raises:
            MalformedStreamError: If scope open/close events do not balance

        """
        return ResolutionResult(records=self._driver.run(events), source=source)

    def resolve_source(
        self, source_code: str, source: str | None = None
    ) -> ResolutionResult:
        """Parse, classify and resolve Ruby source code.

        Args:
            source_code: Ruby source text
            source: Optional label for the result (e.g. a file path)

        Returns:
            ResolutionResult with records and classification diagnostics

        """
        root = RubySourceParser().parse(source_code)
        classifier = EventClassifier(source_code, self._config)
        records = self._driver.run(classifier.events(root))

        if classifier.diagnostics:
            logger.info(
                f"{source or '<source>'}: ignored {len(classifier.diagnostics)} "
                "unrecognised construct(s)"
            )
        return ResolutionResult(
            records=records,
            diagnostics=classifier.diagnostics,
            source=source,
        )

    def resolve_file(self, file_path: Path) -> ResolutionResult:
        """Read and resolve a Ruby source file.

        Args:
            file_path: Path to a Ruby file

        Returns:
            ResolutionResult labelled with the file path

        Raises:
            ParserError: If the file extension is not a Ruby one
            ResolverInputError: If the file is unreadable or too large

        """
        RubySourceParser.detect_language_from_file(file_path)

        try:
            file_size = file_path.stat().st_size
            if file_size > self._config.max_file_size:
                logger.warning(f"Skipping oversize file {file_path}")
                raise ResolverInputError(
                    f"File too large: {file_path} ({file_size} bytes, "
                    f"limit {self._config.max_file_size})"
                )
            source_code = file_path.read_text(encoding=self._config.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise ResolverInputError(f"Cannot read {file_path}: {e}") from e

        return self.resolve_source(source_code, source=str(file_path))
