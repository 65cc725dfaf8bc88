"""Shared fixtures: an in-memory cluster implementing ResourceAccessor."""

from datetime import datetime, timedelta, timezone

import pytest

from brigade_vacuum.errors import (
    ResourceAccessError,
    ResourceListError,
    ResourceNotFoundError,
)
from brigade_vacuum.resources.models import (
    BUILD_LABEL,
    BUILD_RECORD_LABELS,
    RecordResource,
    WorkerResource,
)
from brigade_vacuum.types import WorkerPhase

NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _parse_selector(selector: str) -> dict[str, str]:
    labels = {}
    for part in selector.split(","):
        key, _, value = part.partition("=")
        labels[key.strip()] = value.strip()
    return labels


def _matches(labels: dict[str, str], selector: str | None) -> bool:
    if not selector:
        return True
    return all(labels.get(k) == v for k, v in _parse_selector(selector).items())


class FakeCluster:
    """In-memory namespace of Secrets (records) and Pods (workers).

    Records every accessor call in ``calls`` and can be told to fail
    individual deletions or every listing after a number of successes.
    """

    def __init__(self, now: datetime = NOW) -> None:
        self.now = now
        self.records: dict[str, RecordResource] = {}
        self.workers: dict[str, WorkerResource] = {}
        self.calls: list[tuple[str, str | None]] = []
        self.failing_deletes: set[str] = set()
        self.list_budget: int | None = None

    # Setup helpers

    def add_build(
        self,
        build_id: str,
        age: timedelta,
        workers: int = 1,
        phase: WorkerPhase = WorkerPhase.SUCCEEDED,
    ) -> None:
        """Add a candidate record plus ``workers`` worker pods for a build."""
        self.add_record(f"{build_id}-secret", build_id=build_id, age=age)
        for i in range(workers):
            self.add_worker(f"{build_id}-worker-{i}", build_id=build_id, phase=phase)

    def add_record(
        self,
        name: str,
        build_id: str | None = None,
        age: timedelta = timedelta(0),
        candidate: bool = True,
    ) -> RecordResource:
        labels = dict(BUILD_RECORD_LABELS) if candidate else {}
        if build_id is not None:
            labels[BUILD_LABEL] = build_id
        record = RecordResource(name=name, created_at=self.now - age, labels=labels)
        self.records[name] = record
        return record

    def add_worker(
        self,
        name: str,
        build_id: str | None = None,
        phase: WorkerPhase = WorkerPhase.SUCCEEDED,
    ) -> WorkerResource:
        labels = {BUILD_LABEL: build_id} if build_id is not None else {}
        worker = WorkerResource(name=name, labels=labels, phase=phase)
        self.workers[name] = worker
        return worker

    def fail_lists_after(self, successes: int) -> None:
        self.list_budget = successes

    # ResourceAccessor

    def _check_list(self, kind: str, selector: str | None) -> None:
        if self.list_budget is not None:
            if self.list_budget <= 0:
                raise ResourceListError(kind, selector, "connection refused")
            self.list_budget -= 1

    def list_records(self, selector: str | None = None) -> list[RecordResource]:
        self.calls.append(("list_records", selector))
        self._check_list("record", selector)
        return [r for r in self.records.values() if _matches(r.labels, selector)]

    def list_workers(self, selector: str | None = None) -> list[WorkerResource]:
        self.calls.append(("list_workers", selector))
        self._check_list("worker", selector)
        return [w for w in self.workers.values() if _matches(w.labels, selector)]

    def delete_record(self, name: str) -> None:
        self.calls.append(("delete_record", name))
        if name in self.failing_deletes:
            raise ResourceAccessError("record", name, "internal error")
        if name not in self.records:
            raise ResourceNotFoundError("record", name)
        del self.records[name]

    def delete_worker(self, name: str) -> None:
        self.calls.append(("delete_worker", name))
        if name in self.failing_deletes:
            raise ResourceAccessError("worker", name, "internal error")
        if name not in self.workers:
            raise ResourceNotFoundError("worker", name)
        del self.workers[name]

    # Inspection

    @property
    def deletions(self) -> list[tuple[str, str | None]]:
        return [c for c in self.calls if c[0].startswith("delete_")]

    @property
    def listings(self) -> list[tuple[str, str | None]]:
        return [c for c in self.calls if c[0].startswith("list_")]


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for the fake cluster."""
    return NOW


@pytest.fixture
def cluster(now: datetime) -> FakeCluster:
    """Create an empty in-memory cluster."""
    return FakeCluster(now)


@pytest.fixture
def make_cluster(now: datetime):
    """Factory for independent clusters sharing the same reference time."""
    return lambda: FakeCluster(now)
