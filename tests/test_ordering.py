"""Tests for vacuum/ordering.py module."""

from datetime import datetime, timedelta, timezone

from brigade_vacuum.resources.models import RecordResource
from brigade_vacuum.vacuum.ordering import compare_by_creation, sort_by_creation

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _record(name: str, minutes: int) -> RecordResource:
    return RecordResource(name=name, created_at=T0 + timedelta(minutes=minutes))


class TestCompareByCreation:
    """Tests for compare_by_creation."""

    def test_newer_sorts_first(self) -> None:
        older, newer = _record("old", 0), _record("new", 5)
        assert compare_by_creation(newer, older) < 0
        assert compare_by_creation(older, newer) > 0

    def test_identical_timestamps_equal(self) -> None:
        assert compare_by_creation(_record("a", 1), _record("b", 1)) == 0


class TestSortByCreation:
    """Tests for sort_by_creation."""

    def test_sorts_newest_first(self) -> None:
        records = [
            _record("t2", 2),
            _record("t5", 5),
            _record("t1", 1),
            _record("t4", 4),
        ]

        ordered = sort_by_creation(records)

        assert [r.name for r in ordered] == ["t5", "t4", "t2", "t1"]

    def test_does_not_mutate_input(self) -> None:
        records = [_record("t1", 1), _record("t2", 2)]
        sort_by_creation(records)
        assert [r.name for r in records] == ["t1", "t2"]

    def test_empty(self) -> None:
        assert sort_by_creation([]) == []
