"""Scope frame stack used while resolving a declaration stream."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ruby_visibility.errors import MalformedStreamError
from ruby_visibility.events import ScopeKind
from ruby_visibility.models import SourceSite, Visibility

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TableEntry:
    """Latest visibility for a name plus the site of its first definition.

    `site` is None while the entry only exists because a targeted directive
    named a method that has not been defined in the frame.
    """

    visibility: Visibility
    site: SourceSite | None = None


@dataclass(slots=True)
class ScopeFrame:
    """Mutable resolution context for one open scope.

    Attributes:
        kind: Scope kind
        name: Declared type name (type bodies only)
        owner: Qualified name of the enclosing type, used in records
        singleton: Whether plain definitions here land on a singleton class
        current_default: Visibility applied to subsequent definitions
        table: Name to entry, ordered by first definition

    """

    kind: ScopeKind
    name: str | None = None
    owner: str | None = None
    singleton: bool = False
    current_default: Visibility = Visibility.PUBLIC
    table: dict[str, TableEntry] = field(default_factory=dict)

    def assign(
        self, identifier: str, visibility: Visibility, site: SourceSite | None
    ) -> None:
        """Record a write for `identifier`, keeping its first-definition site.

        Reassignment updates the value in place, so report order stays the
        order of first definition. An entry created by a directive naming a
        method not yet defined moves to the end when its definition arrives.
        """
        entry = self.table.get(identifier)
        if entry is None:
            self.table[identifier] = TableEntry(visibility, site)
            return
        entry.visibility = visibility
        if entry.site is None and site is not None:
            entry.site = site
            self.table[identifier] = self.table.pop(identifier)


@dataclass(frozen=True, slots=True)
class ClosedFrame:
    """Read-only view of a frame after it has been popped."""

    kind: ScopeKind
    owner: str | None
    singleton: bool
    table: Mapping[str, TableEntry]


class ScopeFrameStack:
    """Stack of open scope frames.

    The top-level frame is pushed on construction and is never popped;
    `finish()` closes it once the event stream is exhausted.
    """

    def __init__(self) -> None:
        self._frames: list[ScopeFrame] = [ScopeFrame(ScopeKind.TOP_LEVEL)]

    @property
    def depth(self) -> int:
        return len(self._frames)

    def current(self) -> ScopeFrame:
        """Return the innermost open frame."""
        return self._frames[-1]

    def push(self, kind: ScopeKind, name: str | None = None) -> ScopeFrame:
        """Open a new frame with a public default and an empty table."""
        if kind is ScopeKind.TOP_LEVEL:
            raise MalformedStreamError("Top-level scope cannot be reopened")

        parent = self.current()
        if kind is ScopeKind.TYPE_BODY:
            owner = f"{parent.owner}::{name}" if parent.owner and name else name
            singleton = False
        else:
            owner = parent.owner
            singleton = kind is ScopeKind.SINGLETON_CONTEXT_BODY or (
                kind is ScopeKind.TRANSPARENT_SUB_SCOPE and parent.singleton
            )

        frame = ScopeFrame(kind, name=name, owner=owner, singleton=singleton)
        self._frames.append(frame)
        logger.debug(f"Opened {kind.value} frame (owner={owner}, depth={self.depth})")
        return frame

    def pop(self) -> ClosedFrame:
        """Close the innermost frame; its default and table are discarded.

        Raises:
            MalformedStreamError: If only the top-level frame is open

        """
        if len(self._frames) == 1:
            raise MalformedStreamError("Scope close without matching scope open")
        frame = self._frames.pop()
        logger.debug(
            f"Closed {frame.kind.value} frame with {len(frame.table)} entries"
        )
        return _close(frame)

    def finish(self) -> ClosedFrame:
        """Close the top-level frame at end of stream.

        Raises:
            MalformedStreamError: If any scope is still open

        """
        if len(self._frames) > 1:
            unclosed = self._frames[-1]
            raise MalformedStreamError(
                f"{len(self._frames) - 1} scope(s) still open at end of stream "
                f"(innermost: {unclosed.kind.value}"
                + (f" {unclosed.name}" if unclosed.name else "")
                + ")"
            )
        return _close(self._frames[0])


def _close(frame: ScopeFrame) -> ClosedFrame:
    return ClosedFrame(
        kind=frame.kind,
        owner=frame.owner,
        singleton=frame.singleton,
        table=MappingProxyType(frame.table),
    )
