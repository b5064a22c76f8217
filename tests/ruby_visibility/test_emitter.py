"""Tests for the result emitter."""

from types import MappingProxyType

from ruby_visibility.emitter import ResultEmitter
from ruby_visibility.events import ScopeKind, SingletonMethodDef
from ruby_visibility.frames import ClosedFrame, TableEntry
from ruby_visibility.models import SourceSite, Visibility


def _closed(entries: dict[str, TableEntry], singleton: bool = False) -> ClosedFrame:
    return ClosedFrame(
        kind=ScopeKind.TYPE_BODY,
        owner="Billing::Invoice",
        singleton=singleton,
        table=MappingProxyType(entries),
    )


class TestResultEmitter:
    """Tests for flattening closed frames into records."""

    def test_emit_frame_preserves_table_order(self) -> None:
        """Test that records follow first-definition order."""
        emitter = ResultEmitter()
        emitter.emit_frame(
            _closed(
                {
                    "total": TableEntry(Visibility.PUBLIC, SourceSite(line_start=2)),
                    "tax": TableEntry(Visibility.PRIVATE, SourceSite(line_start=6)),
                }
            )
        )

        records = emitter.records

        assert [(r.identifier, r.visibility) for r in records] == [
            ("total", Visibility.PUBLIC),
            ("tax", Visibility.PRIVATE),
        ]
        assert all(r.owner == "Billing::Invoice" for r in records)
        assert records[1].site.line_start == 6

    def test_emit_frame_drops_entries_without_definition(self) -> None:
        """Test that names only mentioned by a directive are not reported."""
        emitter = ResultEmitter()
        emitter.emit_frame(
            _closed(
                {
                    "missing": TableEntry(Visibility.PRIVATE, None),
                    "present": TableEntry(Visibility.PUBLIC, SourceSite(line_start=3)),
                }
            )
        )

        assert [r.identifier for r in emitter.records] == ["present"]

    def test_emit_frame_marks_singleton_frames(self) -> None:
        """Test that records from `class << self` frames are flagged."""
        emitter = ResultEmitter()
        emitter.emit_frame(
            _closed(
                {"build": TableEntry(Visibility.PUBLIC, SourceSite(line_start=4))},
                singleton=True,
            )
        )

        assert emitter.records[0].singleton is True

    def test_emit_singleton_is_always_public(self) -> None:
        """Test that singleton method records are public and flagged."""
        emitter = ResultEmitter()

        emitter.emit_singleton(
            SingletonMethodDef("create", SourceSite(line_start=9)), "Invoice"
        )

        record = emitter.records[0]
        assert record.identifier == "create"
        assert record.visibility is Visibility.PUBLIC
        assert record.singleton is True
        assert record.owner == "Invoice"

    def test_records_returns_a_copy(self) -> None:
        """Test that callers cannot mutate the emitter's record list."""
        emitter = ResultEmitter()
        emitter.emit_singleton(SingletonMethodDef("x", SourceSite(line_start=1)), None)

        emitter.records.clear()

        assert len(emitter.records) == 1
