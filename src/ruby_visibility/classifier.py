"""Event classifier: turns a Ruby syntax tree into declaration events.

Visibility in Ruby is a side effect of running `private` and friends in
order, so the classifier's job is to reproduce that order. It walks the
tree depth-first and yields:

- scope events for `class`, `module`, `class << self` and the block forms
  configured as scope-introducing (`concerning`, `Class.new`, ...)
- definition events for `def` and `def self.`
- directive events for `public` / `private` / `protected`

Every other construct is transparent. An `each do ... end` block, a lambda
or an `if` contributes nothing of its own; definitions inside it are
classified exactly as if the wrapper were absent. Method bodies are opaque.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TypeAlias, assert_never

from tree_sitter import Node

from ruby_visibility.config import ResolverConfig
from ruby_visibility.errors import ClassificationError
from ruby_visibility.events import (
    DeclarationEvent,
    MethodDef,
    ScopeClose,
    ScopeKind,
    ScopeOpen,
    SingletonMethodDef,
    VisibilityDirective,
)
from ruby_visibility.models import (
    ClassificationDiagnosticModel,
    SourceSite,
    Visibility,
)
from ruby_visibility.syntax.base import body_statements, get_node_text, node_site

logger = logging.getLogger(__name__)

_DIRECTIVE_LEVELS = {
    "public": Visibility.PUBLIC,
    "private": Visibility.PRIVATE,
    "protected": Visibility.PROTECTED,
}

# Ruby AST node types
_TYPE_BODY_TYPES = frozenset({"class", "module"})
_SINGLETON_CLASS_TYPE = "singleton_class"
_METHOD_TYPE = "method"
_SINGLETON_METHOD_TYPE = "singleton_method"
_CALL_TYPES = frozenset({"call", "method_call", "command_call"})
_CONSTANT_TYPES = frozenset({"constant", "scope_resolution"})

# Nodes whose direct children are statements. A bare `private` only counts
# as a directive in statement position.
_STATEMENT_CONTAINERS = frozenset(
    {
        "program",
        "body_statement",
        "block_body",
        "do_block",
        "block",
        "begin",
        "then",
        "else",
        "ensure",
        "do",
        "parenthesized_statements",
    }
)

# Directive argument shapes
_SYMBOL_TYPE = "simple_symbol"
_LITERAL_TYPES = frozenset(
    {"string", "delimited_symbol", "bare_symbol", "bare_string"}
)
_LIST_TYPES = frozenset({"array", "symbol_array", "string_array"})


@dataclass(frozen=True, slots=True)
class _Visit:
    node: Node
    statement: bool


@dataclass(frozen=True, slots=True)
class _OpenScope:
    node: Node
    kind: ScopeKind
    name: str | None = None


@dataclass(frozen=True, slots=True)
class _CloseScope:
    site: SourceSite


_Task: TypeAlias = _Visit | _OpenScope | _CloseScope


def _schedule(tasks: list[_Task], nodes: Iterable[Node], statement: bool) -> None:
    """Push `nodes` so that they are popped in document order."""
    for node in reversed(list(nodes)):
        if node.type != "comment":
            tasks.append(_Visit(node, statement))


def _schedule_children(tasks: list[_Task], node: Node) -> None:
    _schedule(tasks, node.named_children, node.type in _STATEMENT_CONTAINERS)


class EventClassifier:
    """Classifies one parsed Ruby file into a declaration event stream.

    An instance is bound to a single source file. Diagnostics for ignored
    constructs accumulate in `diagnostics` as `events()` is consumed.
    """

    def __init__(self, source_code: str, config: ResolverConfig | None = None) -> None:
        """Initialise the classifier.

        Args:
            source_code: Source the syntax tree was parsed from
            config: Resolver configuration (defaults if None)

        """
        config = config or ResolverConfig()
        self._source_bytes = source_code.encode("utf-8")
        self._scope_block_calls = frozenset(config.scope_block_calls)
        self._type_constructor_calls = frozenset(config.type_constructor_calls)
        self._scopes: list[ScopeKind] = [ScopeKind.TOP_LEVEL]
        self.diagnostics: list[ClassificationDiagnosticModel] = []

    def events(self, root: Node) -> Iterator[DeclarationEvent]:
        """Yield declaration events for the tree rooted at `root`.

        The walk runs on an explicit task stack, so nesting depth is bounded
        by memory rather than the interpreter's recursion limit.

        Args:
            root: Root node of the parsed file (usually `program`)

        Returns:
            Lazy iterator of events in document order

        """
        tasks: list[_Task] = [_Visit(root, statement=False)]
        while tasks:
            match tasks.pop():
                case _Visit(node=node, statement=statement):
                    yield from self._visit(node, statement, tasks)
                case _OpenScope(node=node, kind=kind, name=name):
                    site = node_site(node)
                    yield ScopeOpen(kind, name, site)
                    self._scopes.append(kind)
                    tasks.append(_CloseScope(site))
                    _schedule(tasks, body_statements(node), statement=True)
                case _CloseScope(site=site):
                    self._scopes.pop()
                    yield ScopeClose(site)
                case never:
                    assert_never(never)

    def _visit(
        self, node: Node, statement: bool, tasks: list[_Task]
    ) -> Iterator[DeclarationEvent]:
        """Classify one node, scheduling its children on `tasks`."""
        node_type = node.type

        if node_type in _TYPE_BODY_TYPES:
            name = self._type_name(node)
            tasks.append(_OpenScope(node, ScopeKind.TYPE_BODY, name))
        elif node_type == _SINGLETON_CLASS_TYPE:
            tasks.append(_OpenScope(node, ScopeKind.SINGLETON_CONTEXT_BODY))
        elif node_type in (_METHOD_TYPE, _SINGLETON_METHOD_TYPE):
            definition = self._definition(node)
            if definition is not None:
                yield definition
        elif node_type in _CALL_TYPES:
            yield from self._call(node, tasks)
        elif node_type == "identifier":
            level = _DIRECTIVE_LEVELS.get(self._text(node))
            if statement and level is not None:
                yield VisibilityDirective.bare(level, node_site(node))
        else:
            _schedule_children(tasks, node)

    def _type_name(self, node: Node) -> str | None:
        name_node = node.child_by_field_name("name")
        return self._text(name_node) if name_node is not None else None

    def _definition(self, node: Node) -> MethodDef | None:
        """Classify a `def` node; `def self.x` is exempt outside `class << self`."""
        name_node = node.child_by_field_name("name")
        if name_node is None:
            logger.debug(f"Skipping unnamed method definition at {node.start_point}")
            return None

        identifier = self._text(name_node)
        site = node_site(node)
        if node.type == _SINGLETON_METHOD_TYPE and not self._in_singleton_context():
            return SingletonMethodDef(identifier, site)
        return MethodDef(identifier, site)

    def _in_singleton_context(self) -> bool:
        return self._scopes[-1] is ScopeKind.SINGLETON_CONTEXT_BODY

    def _call(self, node: Node, tasks: list[_Task]) -> Iterator[DeclarationEvent]:
        receiver = node.child_by_field_name("receiver")
        method_node = node.child_by_field_name("method")
        method_name = self._text(method_node) if method_node is not None else ""

        if receiver is None and method_name in _DIRECTIVE_LEVELS:
            yield from self._directive(node, method_name, tasks)
            return

        block = node.child_by_field_name("block")
        kind = (
            self._block_scope_kind(receiver, method_name)
            if block is not None
            else None
        )
        if block is None or kind is None:
            _schedule_children(tasks, node)
            return

        # Arguments belong to the enclosing scope and are walked first
        name = self._assigned_constant(node) if kind is ScopeKind.TYPE_BODY else None
        tasks.append(_OpenScope(block, kind, name))
        _schedule(
            tasks,
            [child for child in node.named_children if child != block],
            statement=False,
        )

    def _block_scope_kind(
        self, receiver: Node | None, method_name: str
    ) -> ScopeKind | None:
        if receiver is None:
            if method_name in self._scope_block_calls:
                return ScopeKind.TRANSPARENT_SUB_SCOPE
            return None
        if f"{self._text(receiver)}.{method_name}" in self._type_constructor_calls:
            return ScopeKind.TYPE_BODY
        return None

    def _assigned_constant(self, node: Node) -> str | None:
        """Name of the constant a `Foo = Class.new do ... end` is bound to."""
        parent = node.parent
        if parent is None or parent.type != "assignment":
            return None
        left = parent.child_by_field_name("left")
        if left is None or left.type not in _CONSTANT_TYPES:
            return None
        return self._text(left)

    def _directive(
        self, node: Node, keyword: str, tasks: list[_Task]
    ) -> Iterator[DeclarationEvent]:
        level = _DIRECTIVE_LEVELS[keyword]
        site = node_site(node)

        try:
            targets = self._directive_targets(node, keyword, site)
        except ClassificationError as e:
            self._report(e)
            # The directive is dropped; definitions in its arguments still count
            _schedule_children(tasks, node)
            return

        if not targets:
            yield VisibilityDirective.bare(level, site)
            return

        names: list[str] = []
        for target in targets:
            if isinstance(target, str):
                names.append(target)
                continue
            # `private def x`: the definition runs first, then the directive
            definition = self._definition(target)
            if definition is not None:
                yield definition
                names.append(definition.identifier)
        yield VisibilityDirective.targeted(level, tuple(names), site)

    def _directive_targets(
        self, node: Node, keyword: str, site: SourceSite
    ) -> list[str | Node]:
        """Collect the names (or inline definitions) a directive applies to.

        Returns:
            Empty list for a bare call such as `private()`

        Raises:
            ClassificationError: If an argument has an unsupported shape

        """
        if node.child_by_field_name("block") is not None:
            raise ClassificationError(f"'{keyword}' does not take a block", site)

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return []
        args = [child for child in arguments.named_children if child.type != "comment"]
        if not args:
            return []

        targets: list[str | Node] = []
        for arg in args:
            targets.extend(self._argument_targets(arg, keyword, nested=False))
        if not targets:
            raise ClassificationError(f"'{keyword}' names no methods", site)
        return targets

    def _argument_targets(
        self, arg: Node, keyword: str, nested: bool
    ) -> list[str | Node]:
        arg_type = arg.type

        if arg_type == _METHOD_TYPE and not nested:
            return [arg]
        if arg_type == _SINGLETON_METHOD_TYPE and not nested:
            if self._in_singleton_context():
                return [arg]
            raise ClassificationError(
                f"'{keyword}' cannot target a singleton method definition "
                "outside 'class << self'",
                node_site(arg),
            )
        if arg_type == _SYMBOL_TYPE:
            return [self._text(arg).removeprefix(":")]
        if arg_type in _LITERAL_TYPES:
            return [self._literal_name(arg, keyword)]
        if arg_type in _LIST_TYPES and not nested:
            targets: list[str | Node] = []
            for element in arg.named_children:
                if element.type != "comment":
                    targets.extend(
                        self._argument_targets(element, keyword, nested=True)
                    )
            return targets

        raise ClassificationError(
            f"Unsupported '{keyword}' argument: {arg_type}", node_site(arg)
        )

    def _literal_name(self, node: Node, keyword: str) -> str:
        parts = node.named_children
        if any(part.type != "string_content" for part in parts):
            raise ClassificationError(
                f"'{keyword}' argument must be a plain name, not an interpolated "
                "or escaped literal",
                node_site(node),
            )
        if parts:
            name = "".join(self._text(part) for part in parts)
        elif node.type.startswith("bare_"):
            name = self._text(node)
        else:
            name = ""
        if not name:
            raise ClassificationError(
                f"'{keyword}' argument is an empty name", node_site(node)
            )
        return name

    def _report(self, error: ClassificationError) -> None:
        line = error.site.line_start if error.site else "?"
        logger.warning(f"Ignoring visibility directive at line {line}: {error}")
        self.diagnostics.append(
            ClassificationDiagnosticModel(message=error.message, site=error.site)
        )

    def _text(self, node: Node) -> str:
        return get_node_text(node, self._source_bytes)
