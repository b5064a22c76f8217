"""Tree-sitter front end: Ruby parsing and syntax tree helpers."""

from ruby_visibility.syntax.base import (
    body_statements,
    find_child_by_type,
    get_node_text,
    node_site,
)
from ruby_visibility.syntax.parser import RubySourceParser

__all__ = [
    "RubySourceParser",
    "body_statements",
    "find_child_by_type",
    "get_node_text",
    "node_site",
]
