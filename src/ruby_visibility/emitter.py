"""Flattens closed frames into ordered resolution records."""

import logging

from ruby_visibility.events import SingletonMethodDef
from ruby_visibility.frames import ClosedFrame
from ruby_visibility.models import ResolvedMethodModel, Visibility

logger = logging.getLogger(__name__)


class ResultEmitter:
    """Collects records in the order frames close.

    Singleton method records are appended as soon as they are seen; frame
    tables are appended when their frame closes, top level last.
    """

    def __init__(self) -> None:
        self._records: list[ResolvedMethodModel] = []

    @property
    def records(self) -> list[ResolvedMethodModel]:
        return list(self._records)

    def emit_singleton(self, event: SingletonMethodDef, owner: str | None) -> None:
        """Record a `def self.x` definition, which is always public."""
        self._records.append(
            ResolvedMethodModel(
                identifier=event.identifier,
                site=event.site,
                visibility=Visibility.PUBLIC,
                owner=owner,
                singleton=True,
            )
        )

    def emit_frame(self, frame: ClosedFrame) -> None:
        """Append one record per defined name in first-definition order."""
        for identifier, entry in frame.table.items():
            if entry.site is None:
                # Named by a directive but never defined in this frame
                logger.debug(
                    f"Dropping undefined method '{identifier}' "
                    f"(owner={frame.owner}, visibility={entry.visibility.value})"
                )
                continue
            self._records.append(
                ResolvedMethodModel(
                    identifier=identifier,
                    site=entry.site,
                    visibility=entry.visibility,
                    owner=frame.owner,
                    singleton=frame.singleton,
                )
            )
