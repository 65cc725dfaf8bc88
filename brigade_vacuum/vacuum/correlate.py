"""Build correlation.

Records and workers are joined purely on the ``build`` label. Filtered
listings only ever cover records, so correlation always runs against the
full, unfiltered listings of both kinds.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from brigade_vacuum.resources.models import (
    BUILD_SELECTOR,
    RecordResource,
    WorkerResource,
)

if TYPE_CHECKING:
    from brigade_vacuum.resources.accessor import ResourceAccessor

logger = logging.getLogger(__name__)


class BuildIndex:
    """Index of records and workers by build ID."""

    def __init__(
        self,
        workers: list[WorkerResource],
        records: list[RecordResource],
    ) -> None:
        self._workers: dict[str, list[WorkerResource]] = defaultdict(list)
        self._records: dict[str, list[RecordResource]] = defaultdict(list)
        for worker in workers:
            if worker.build_id is not None:
                self._workers[worker.build_id].append(worker)
        for record in records:
            if record.build_id is not None:
                self._records[record.build_id].append(record)

    def workers_for(self, build_id: str) -> list[WorkerResource]:
        return list(self._workers.get(build_id, []))

    def records_for(self, build_id: str) -> list[RecordResource]:
        return list(self._records.get(build_id, []))

    def correlate(
        self, build_id: str
    ) -> tuple[list[WorkerResource], list[RecordResource]]:
        """Return (workers, records) labelled with ``build_id``."""
        return self.workers_for(build_id), self.records_for(build_id)


def correlate(
    build_id: str,
    workers: list[WorkerResource],
    records: list[RecordResource],
) -> tuple[list[WorkerResource], list[RecordResource]]:
    """Find the workers and records belonging to one build.

    Args:
        build_id: Build identifier to match.
        workers: Full worker listing.
        records: Full record listing.

    Returns:
        Tuple of (matched workers, matched records).
    """
    return BuildIndex(workers, records).correlate(build_id)


@dataclass
class Snapshot:
    """One consistent view of the cluster for a single policy run.

    Attributes:
        candidates: Records matching the build selector.
        records: All records in the namespace.
        workers: All workers in the namespace.
    """

    candidates: list[RecordResource]
    records: list[RecordResource]
    workers: list[WorkerResource]
    index: BuildIndex = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.index = BuildIndex(self.workers, self.records)

    def exclude(self, build_ids: Collection[str]) -> Snapshot:
        """Return a copy without any resource labelled with ``build_ids``.

        Unlabelled resources are kept.
        """
        if not build_ids:
            return self
        gone = set(build_ids)
        return Snapshot(
            candidates=[r for r in self.candidates if r.build_id not in gone],
            records=[r for r in self.records if r.build_id not in gone],
            workers=[w for w in self.workers if w.build_id not in gone],
        )


def take_snapshot(accessor: ResourceAccessor) -> Snapshot:
    """List candidate records, all records and all workers.

    Raises:
        ResourceListError: If any listing fails.
    """
    candidates = accessor.list_records(BUILD_SELECTOR)
    records = accessor.list_records(None)
    workers = accessor.list_workers(None)
    logger.debug(
        "Snapshot: %d candidate records, %d records, %d workers",
        len(candidates),
        len(records),
        len(workers),
    )
    return Snapshot(candidates=candidates, records=records, workers=workers)


__all__ = ["BuildIndex", "Snapshot", "correlate", "take_snapshot"]
