"""Utility functions for syntax tree traversal.

These functions work on any tree-sitter grammar; the Ruby specifics live in
the classifier.
"""

from tree_sitter import Node

from ruby_visibility.models import SourceSite

# Line index offset (tree-sitter uses 0-based, we want 1-based)
_LINE_INDEX_OFFSET = 1

# Field names that label the header of a body-carrying node rather than
# its statements
_HEADER_FIELDS = ("name", "superclass", "value", "parameters")

_BODY_NODE_TYPES = ("body_statement", "block_body")


def get_node_text(node: Node, source_bytes: bytes) -> str:
    """Get the text content of an AST node.

    Args:
        node: Tree-sitter node with start_byte and end_byte attributes
        source_bytes: Encoded source the tree was parsed from

    Returns:
        Text content of the node

    """
    return source_bytes[node.start_byte : node.end_byte].decode(
        "utf-8", errors="replace"
    )


def node_site(node: Node) -> SourceSite:
    """Build a 1-based source site from a node's position."""
    return SourceSite(
        line_start=node.start_point[0] + _LINE_INDEX_OFFSET,
        line_end=node.end_point[0] + _LINE_INDEX_OFFSET,
        column=node.start_point[1],
    )


def find_child_by_type(node: Node, child_type: str) -> Node | None:
    """Find the first direct child of a specific type.

    Args:
        node: Parent node to search in
        child_type: Type of child node to find

    Returns:
        First matching child node or None

    """
    for child in node.children:
        if child.type == child_type:
            return child
    return None


def body_statements(node: Node) -> list[Node]:
    """Return the statements of a class, module or block body.

    Handles grammars that wrap the body in a `body` field as well as those
    that attach statements directly to the parent. Comments are skipped.

    Args:
        node: A class, module, singleton_class, do_block or block node

    Returns:
        Statement nodes in document order

    """
    body = node.child_by_field_name("body")
    if body is None:
        for body_type in _BODY_NODE_TYPES:
            body = find_child_by_type(node, body_type)
            if body is not None:
                break

    if body is not None:
        return [child for child in body.named_children if child.type != "comment"]

    header = [node.child_by_field_name(name) for name in _HEADER_FIELDS]
    return [
        child
        for child in node.named_children
        if child.type not in ("comment", "block_parameters")
        and not any(child == h for h in header if h is not None)
    ]
