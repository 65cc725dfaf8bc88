"""Creation-order sorting for build records (newest first)."""

from functools import cmp_to_key

from brigade_vacuum.resources.models import RecordResource


def compare_by_creation(a: RecordResource, b: RecordResource) -> int:
    """Order records newest first.

    Returns a negative number when ``a`` was created after ``b``. Records
    with identical timestamps compare equal; there is no secondary key.
    """
    if a.created_at > b.created_at:
        return -1
    if a.created_at < b.created_at:
        return 1
    return 0


def sort_by_creation(records: list[RecordResource]) -> list[RecordResource]:
    """Return records sorted newest first (stable)."""
    return sorted(records, key=cmp_to_key(compare_by_creation))


__all__ = ["compare_by_creation", "sort_by_creation"]
