"""Tests for the scope frame stack."""

import pytest

from ruby_visibility.errors import MalformedStreamError
from ruby_visibility.events import ScopeKind
from ruby_visibility.frames import ScopeFrameStack
from ruby_visibility.models import SourceSite, Visibility


def _site(line: int) -> SourceSite:
    return SourceSite(line_start=line)


class TestScopeFrameStackLifecycle:
    """Tests for push/pop/finish behaviour."""

    def test_new_stack_has_public_top_level_frame(self) -> None:
        """Test that the stack starts with a single public top-level frame."""
        stack = ScopeFrameStack()

        assert stack.depth == 1
        assert stack.current().kind is ScopeKind.TOP_LEVEL
        assert stack.current().current_default is Visibility.PUBLIC

    def test_push_creates_fresh_public_frame(self) -> None:
        """Test that a pushed frame ignores the parent's default."""
        stack = ScopeFrameStack()
        stack.current().current_default = Visibility.PRIVATE

        frame = stack.push(ScopeKind.TYPE_BODY, "Widget")

        assert stack.current() is frame
        assert frame.current_default is Visibility.PUBLIC
        assert frame.table == {}

    def test_pop_restores_parent_untouched(self) -> None:
        """Test that popping leaves the parent's default and table as they were."""
        stack = ScopeFrameStack()
        parent = stack.push(ScopeKind.TYPE_BODY, "Widget")
        parent.current_default = Visibility.PROTECTED
        parent.assign("before", Visibility.PROTECTED, _site(2))

        child = stack.push(ScopeKind.TRANSPARENT_SUB_SCOPE)
        child.current_default = Visibility.PRIVATE
        child.assign("inside", Visibility.PRIVATE, _site(4))
        closed = stack.pop()

        assert stack.current() is parent
        assert parent.current_default is Visibility.PROTECTED
        assert list(parent.table) == ["before"]
        assert list(closed.table) == ["inside"]

    def test_pop_top_level_raises(self) -> None:
        """Test that closing with only the top-level frame open is fatal."""
        stack = ScopeFrameStack()

        with pytest.raises(MalformedStreamError, match="without matching"):
            stack.pop()

    def test_push_top_level_raises(self) -> None:
        """Test that a second top-level frame cannot be opened."""
        stack = ScopeFrameStack()

        with pytest.raises(MalformedStreamError):
            stack.push(ScopeKind.TOP_LEVEL)

    def test_finish_with_open_scope_raises(self) -> None:
        """Test that finishing while a scope is open is fatal."""
        stack = ScopeFrameStack()
        stack.push(ScopeKind.TYPE_BODY, "Widget")

        with pytest.raises(MalformedStreamError, match="still open") as exc_info:
            stack.finish()

        assert "Widget" in str(exc_info.value)

    def test_finish_returns_top_level_table(self) -> None:
        """Test that finish hands back the top-level frame."""
        stack = ScopeFrameStack()
        stack.current().assign("helper", Visibility.PUBLIC, _site(1))

        closed = stack.finish()

        assert closed.kind is ScopeKind.TOP_LEVEL
        assert closed.owner is None
        assert list(closed.table) == ["helper"]


class TestScopeFrameOwnership:
    """Tests for owner names and singleton flags of pushed frames."""

    def test_type_bodies_build_qualified_owner(self) -> None:
        """Test that nested type bodies join their names with '::'."""
        stack = ScopeFrameStack()
        stack.push(ScopeKind.TYPE_BODY, "Outer")
        inner = stack.push(ScopeKind.TYPE_BODY, "Inner")

        assert inner.owner == "Outer::Inner"

    def test_singleton_context_keeps_owner_and_sets_flag(self) -> None:
        """Test that `class << self` frames belong to the enclosing type."""
        stack = ScopeFrameStack()
        stack.push(ScopeKind.TYPE_BODY, "Service")
        singleton = stack.push(ScopeKind.SINGLETON_CONTEXT_BODY)

        assert singleton.owner == "Service"
        assert singleton.singleton is True

    @pytest.mark.parametrize(
        ("parent_kind", "expected_singleton"),
        [
            (ScopeKind.SINGLETON_CONTEXT_BODY, True),
            (ScopeKind.TYPE_BODY, False),
        ],
        ids=["inside_singleton_context", "inside_type_body"],
    )
    def test_transparent_sub_scope_inherits_singleton_flag(
        self, parent_kind: ScopeKind, expected_singleton: bool
    ) -> None:
        """Test that sub-scopes inherit the singleton flag of their parent."""
        stack = ScopeFrameStack()
        stack.push(ScopeKind.TYPE_BODY, "Service")
        if parent_kind is ScopeKind.SINGLETON_CONTEXT_BODY:
            stack.push(parent_kind)

        sub_scope = stack.push(ScopeKind.TRANSPARENT_SUB_SCOPE)

        assert sub_scope.owner == "Service"
        assert sub_scope.singleton is expected_singleton

    def test_type_body_inside_singleton_context_is_not_singleton(self) -> None:
        """Test that a class nested in `class << self` has instance methods."""
        stack = ScopeFrameStack()
        stack.push(ScopeKind.TYPE_BODY, "Service")
        stack.push(ScopeKind.SINGLETON_CONTEXT_BODY)

        nested = stack.push(ScopeKind.TYPE_BODY, "Builder")

        assert nested.singleton is False
        assert nested.owner == "Service::Builder"


class TestScopeFrameAssign:
    """Tests for last-write-wins table updates."""

    def test_reassignment_keeps_first_site_and_position(self) -> None:
        """Test that a later write changes the level but not site or order."""
        stack = ScopeFrameStack()
        frame = stack.current()
        frame.assign("a", Visibility.PUBLIC, _site(1))
        frame.assign("b", Visibility.PUBLIC, _site(2))

        frame.assign("a", Visibility.PRIVATE, _site(9))

        assert list(frame.table) == ["a", "b"]
        assert frame.table["a"].visibility is Visibility.PRIVATE
        assert frame.table["a"].site == _site(1)

    def test_placeholder_site_is_filled_by_later_definition(self) -> None:
        """Test that a directive-created entry takes the first real site."""
        frame = ScopeFrameStack().current()
        frame.assign("later", Visibility.PRIVATE, None)

        frame.assign("later", Visibility.PUBLIC, _site(7))

        assert frame.table["later"].site == _site(7)
        assert frame.table["later"].visibility is Visibility.PUBLIC

    def test_placeholder_moves_to_definition_position(self) -> None:
        """Test that a forward-named method is ordered by its definition."""
        frame = ScopeFrameStack().current()
        frame.assign("b", Visibility.PRIVATE, None)
        frame.assign("a", Visibility.PUBLIC, _site(2))

        frame.assign("b", Visibility.PUBLIC, _site(3))

        assert list(frame.table) == ["a", "b"]

    def test_directive_write_does_not_move_defined_entry(self) -> None:
        """Test that a site-less write keeps an existing entry in place."""
        frame = ScopeFrameStack().current()
        frame.assign("a", Visibility.PUBLIC, _site(1))
        frame.assign("b", Visibility.PUBLIC, _site(2))

        frame.assign("a", Visibility.PRIVATE, None)

        assert list(frame.table) == ["a", "b"]
        assert frame.table["a"].site == _site(1)
