"""Eviction policies.

This module provides the two retention policies:
- run_age_policy(): evict builds whose record predates a cutoff
- run_count_policy(): keep only the newest N builds

Each policy takes its own fresh snapshot of the cluster, so the count
policy sees the results of age-based deletions. In a dry run nothing is
deleted, so the caller passes the age policy's evicted builds to the count
policy as ``exclude``. Candidate records without a build label are
orphans: they are logged and ignored by both policies.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from datetime import datetime
from typing import TYPE_CHECKING

from brigade_vacuum.resources.models import RecordResource
from brigade_vacuum.types import (
    AgeLimit,
    AtMost,
    CountLimit,
    CreatedBefore,
    PolicyReport,
)
from brigade_vacuum.vacuum.correlate import Snapshot, take_snapshot
from brigade_vacuum.vacuum.executor import delete_build
from brigade_vacuum.vacuum.ordering import sort_by_creation

if TYPE_CHECKING:
    from brigade_vacuum.resources.accessor import ResourceAccessor

logger = logging.getLogger(__name__)


def _unique_build_ids(records: list[RecordResource]) -> list[str]:
    seen: set[str] = set()
    build_ids: list[str] = []
    for record in records:
        bid = record.build_id
        if bid is not None and bid not in seen:
            seen.add(bid)
            build_ids.append(bid)
    return build_ids


def split_orphans(
    candidates: list[RecordResource],
) -> tuple[list[RecordResource], list[RecordResource]]:
    """Split candidate records into (labelled, orphaned)."""
    labelled: list[RecordResource] = []
    orphans: list[RecordResource] = []
    for record in candidates:
        if record.build_id is None:
            logger.warning("Build %r has no build ID. Skipping.", record.name)
            orphans.append(record)
        else:
            labelled.append(record)
    return labelled, orphans


def select_expired(candidates: list[RecordResource], cutoff: datetime) -> list[str]:
    """Return build IDs of labelled records created strictly before cutoff."""
    return _unique_build_ids([r for r in candidates if cutoff > r.created_at])


def select_excess(candidates: list[RecordResource], keep: int) -> list[str]:
    """Return build IDs of labelled records beyond the ``keep`` newest."""
    if len(candidates) <= keep:
        return []
    return _unique_build_ids(sort_by_creation(candidates)[keep:])


def _evict(
    accessor: ResourceAccessor,
    snapshot: Snapshot,
    build_ids: list[str],
    report: PolicyReport,
    skip_running_builds: bool,
    dry_run: bool,
) -> None:
    for build_id in build_ids:
        workers, records = snapshot.index.correlate(build_id)
        report.evictions.append(
            delete_build(
                accessor,
                build_id,
                workers,
                records,
                skip_running_builds=skip_running_builds,
                dry_run=dry_run,
            )
        )


def run_age_policy(
    accessor: ResourceAccessor,
    limit: AgeLimit,
    skip_running_builds: bool = False,
    dry_run: bool = False,
) -> PolicyReport:
    """Evict every build whose record was created before the cutoff.

    Args:
        accessor: Cluster accessor.
        limit: NoAgeLimit disables the policy without listing anything.
        skip_running_builds: Keep Running/Pending workers.
        dry_run: Report only, delete nothing.

    Returns:
        PolicyReport for the age policy.

    Raises:
        ResourceListError: If listing fails.
    """
    report = PolicyReport(policy="age")
    if not isinstance(limit, CreatedBefore):
        return report

    logger.info("Pruning records older than %s", limit.cutoff.isoformat())
    snapshot = take_snapshot(accessor)
    report.ran = True

    labelled, orphans = split_orphans(snapshot.candidates)
    report.orphans = [r.name for r in orphans]
    report.considered = len(labelled)

    expired = select_expired(labelled, limit.cutoff)
    logger.info("%d build(s) older than cutoff", len(expired))
    _evict(accessor, snapshot, expired, report, skip_running_builds, dry_run)
    return report


def run_count_policy(
    accessor: ResourceAccessor,
    limit: CountLimit,
    skip_running_builds: bool = False,
    dry_run: bool = False,
    exclude: Collection[str] = (),
) -> PolicyReport:
    """Evict all but the newest builds.

    Args:
        accessor: Cluster accessor.
        limit: Unlimited disables the policy without listing anything.
        skip_running_builds: Keep Running/Pending workers.
        dry_run: Report only, delete nothing.
        exclude: Build IDs to treat as already gone, such as those a dry
            run of the age policy would have deleted.

    Returns:
        PolicyReport for the count policy.

    Raises:
        ResourceListError: If listing fails.
    """
    report = PolicyReport(policy="count")
    if not isinstance(limit, AtMost):
        return report

    snapshot = take_snapshot(accessor).exclude(exclude)
    report.ran = True

    labelled, orphans = split_orphans(snapshot.candidates)
    report.orphans = [r.name for r in orphans]
    report.considered = len(labelled)

    if len(labelled) <= limit.count:
        logger.info("Skipping vacuum. %d is <= max %d", len(labelled), limit.count)
        return report

    excess = select_excess(labelled, limit.count)
    logger.info(
        "%d build(s) over max %d, evicting %d",
        len(labelled),
        limit.count,
        len(excess),
    )
    _evict(accessor, snapshot, excess, report, skip_running_builds, dry_run)
    return report


__all__ = [
    "run_age_policy",
    "run_count_policy",
    "select_excess",
    "select_expired",
    "split_orphans",
]
