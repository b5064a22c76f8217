"""Resolver driver: a single left-to-right fold over declaration events."""

import logging
from collections.abc import Iterable
from typing import assert_never

from ruby_visibility.emitter import ResultEmitter
from ruby_visibility.errors import MalformedStreamError
from ruby_visibility.events import (
    DeclarationEvent,
    DirectiveForm,
    MethodDef,
    ScopeClose,
    ScopeKind,
    ScopeOpen,
    SingletonMethodDef,
    VisibilityDirective,
)
from ruby_visibility.frames import ScopeFrameStack
from ruby_visibility.models import ResolvedMethodModel

logger = logging.getLogger(__name__)


class ResolverDriver:
    """Resolves the visibility of every method definition in an event stream.

    The driver keeps no state between runs: each call to `run` owns a fresh
    frame stack and emitter, so one instance may serve many files.
    """

    def run(self, events: Iterable[DeclarationEvent]) -> list[ResolvedMethodModel]:
        """Consume `events` once, in order, and return the resolved records.

        Args:
            events: Declaration events in source document order. May be a
                lazy, non-restartable iterator.

        Returns:
            Records ordered by frame closure, top-level frame last

        Raises:
            MalformedStreamError: If scope open/close events do not balance

        """
        stack = ScopeFrameStack()
        emitter = ResultEmitter()
        position = -1

        for position, event in enumerate(events):
            self._apply(event, position, stack, emitter)

        try:
            emitter.emit_frame(stack.finish())
        except MalformedStreamError as e:
            raise MalformedStreamError(e.message, position=position + 1) from e

        records = emitter.records
        logger.debug(f"Resolved {len(records)} method(s) from {position + 1} events")
        return records

    def _apply(
        self,
        event: DeclarationEvent,
        position: int,
        stack: ScopeFrameStack,
        emitter: ResultEmitter,
    ) -> None:
        match event:
            case ScopeOpen(kind=kind, name=name):
                try:
                    stack.push(kind, name)
                except MalformedStreamError as e:
                    raise MalformedStreamError(
                        e.message, position=position, site=event.site
                    ) from e

            case ScopeClose():
                try:
                    closed = stack.pop()
                except MalformedStreamError as e:
                    raise MalformedStreamError(
                        e.message, position=position, site=event.site
                    ) from e
                emitter.emit_frame(closed)

            case VisibilityDirective(form=DirectiveForm.BARE, level=level):
                stack.current().current_default = level

            case VisibilityDirective(form=DirectiveForm.TARGETED, level=level):
                frame = stack.current()
                for name in event.targets:
                    frame.assign(name, level, None)

            case SingletonMethodDef() if (
                stack.current().kind is not ScopeKind.SINGLETON_CONTEXT_BODY
            ):
                emitter.emit_singleton(event, stack.current().owner)

            case MethodDef(identifier=identifier, site=site):
                frame = stack.current()
                frame.assign(identifier, frame.current_default, site)

            case never:
                assert_never(never)
