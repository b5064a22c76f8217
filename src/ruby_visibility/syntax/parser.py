"""Ruby source parser using tree-sitter."""

import logging
from pathlib import Path

import tree_sitter_ruby
from tree_sitter import Language, Node, Parser

from ruby_visibility.errors import ParserError

logger = logging.getLogger(__name__)

_LANGUAGE = "ruby"
_DEFAULT_ENCODING = "utf-8"


def _get_tree_sitter_language() -> Language:
    """Get the tree-sitter Language object for Ruby."""
    return Language(tree_sitter_ruby.language())


class RubySourceParser:
    """Parser for Ruby source code using tree-sitter."""

    _SUPPORTED_EXTENSIONS = [
        ".rb",
        ".rbw",
        ".rake",
        ".ru",
        ".gemspec",
        ".builder",
        ".jbuilder",
    ]

    def __init__(self) -> None:
        """Initialise the parser."""
        self.language = _LANGUAGE
        self.tree_sitter_language = _get_tree_sitter_language()
        self.parser = Parser()
        self.parser.language = self.tree_sitter_language

    @staticmethod
    def detect_language_from_file(file_path: Path) -> str:
        """Detect programming language from file extension.

        Args:
            file_path: Path to the source file

        Returns:
            Detected language name

        Raises:
            ParserError: If the extension is not a Ruby one

        """
        if RubySourceParser.is_supported_file(file_path):
            return _LANGUAGE
        raise ParserError(
            f"Cannot detect language for file extension: {file_path.suffix.lower()}"
        )

    @staticmethod
    def is_supported_file(file_path: Path) -> bool:
        """Check if file is supported for parsing."""
        return file_path.suffix.lower() in RubySourceParser._SUPPORTED_EXTENSIONS

    def parse(self, source_code: str) -> Node:
        """Parse source code string.

        Syntax errors do not raise: tree-sitter recovers and marks the
        damaged region with ERROR nodes, which the classifier walks like
        any other node.

        Args:
            source_code: Source code to parse

        Returns:
            AST root node

        """
        tree = self.parser.parse(bytes(source_code, _DEFAULT_ENCODING))
        root = tree.root_node
        if root.has_error:
            logger.warning(
                "Ruby source contains syntax errors; results may be partial"
            )
        return root
