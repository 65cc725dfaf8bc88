"""Build deletion.

Deletes the workers and records correlated with one build. Individual
failures are logged and recorded in the returned BuildEviction; they
never abort the loop and are never raised to the caller.

With skip_running_builds set, Running and Pending workers are kept, but
the build's records and its other workers are still deleted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from brigade_vacuum.errors import ResourceAccessError, ResourceNotFoundError
from brigade_vacuum.resources.models import RecordResource, WorkerResource
from brigade_vacuum.types import (
    BuildEviction,
    DeletionStatus,
    ResourceKind,
    ResourceOutcome,
)

if TYPE_CHECKING:
    from brigade_vacuum.resources.accessor import ResourceAccessor

logger = logging.getLogger(__name__)


def _delete_one(
    delete: Callable[[str], None],
    kind: ResourceKind,
    name: str,
    build_id: str,
    dry_run: bool,
) -> ResourceOutcome:
    if dry_run:
        logger.info("[DRY RUN] Would delete %s %s", kind.value, name)
        return ResourceOutcome(kind, name, build_id, DeletionStatus.DRY_RUN)

    try:
        delete(name)
    except ResourceNotFoundError:
        logger.info("%s %s already deleted", kind.value.capitalize(), name)
        return ResourceOutcome(kind, name, build_id, DeletionStatus.MISSING)
    except ResourceAccessError as e:
        logger.error(
            "Failed to delete %s %s for build %s (continuing): %s",
            kind.value,
            name,
            build_id,
            e.reason,
        )
        return ResourceOutcome(
            kind, name, build_id, DeletionStatus.FAILED, reason=str(e.reason)
        )

    return ResourceOutcome(kind, name, build_id, DeletionStatus.DELETED)


def delete_build(
    accessor: ResourceAccessor,
    build_id: str,
    workers: list[WorkerResource],
    records: list[RecordResource],
    skip_running_builds: bool = False,
    dry_run: bool = False,
) -> BuildEviction:
    """Delete the correlated workers and records of a build.

    Args:
        accessor: Cluster accessor.
        build_id: Build being evicted.
        workers: Workers labelled with build_id.
        records: Records labelled with build_id.
        skip_running_builds: Keep Running/Pending workers.
        dry_run: Report only, delete nothing.

    Returns:
        BuildEviction with one outcome per resource.
    """
    eviction = BuildEviction(build_id=build_id)

    to_delete: list[WorkerResource] = []
    for worker in workers:
        if skip_running_builds and worker.phase.in_flight:
            logger.info(
                "Skipping pod %s for build %s because its status is %s",
                worker.name,
                build_id,
                worker.phase.value,
            )
            eviction.outcomes.append(
                ResourceOutcome(
                    ResourceKind.WORKER,
                    worker.name,
                    build_id,
                    DeletionStatus.SKIPPED,
                    reason=worker.phase.value,
                )
            )
        else:
            to_delete.append(worker)

    logger.info(
        "Build %s: pods %s, secrets %s",
        build_id,
        [w.name for w in to_delete],
        [r.name for r in records],
    )

    for worker in to_delete:
        eviction.outcomes.append(
            _delete_one(
                accessor.delete_worker,
                ResourceKind.WORKER,
                worker.name,
                build_id,
                dry_run,
            )
        )

    for record in records:
        eviction.outcomes.append(
            _delete_one(
                accessor.delete_record,
                ResourceKind.RECORD,
                record.name,
                build_id,
                dry_run,
            )
        )

    return eviction


__all__ = ["delete_build"]
