"""Vacuum service module.

Runs one retention pass: the age policy, then the count policy. Each
policy lists the cluster afresh. A dry run hides the builds the age
policy would have deleted from the count policy, so both modes report the
same evictions. Scheduling repeated passes is left to the caller (a
CronJob, a timer, ...).
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import TYPE_CHECKING

from brigade_vacuum.types import (
    AgeLimit,
    CountLimit,
    NoAgeLimit,
    Unlimited,
    VacuumReport,
)
from brigade_vacuum.vacuum.policies import run_age_policy, run_count_policy

if TYPE_CHECKING:
    from brigade_vacuum.config import Settings
    from brigade_vacuum.resources.accessor import ResourceAccessor

logger = logging.getLogger(__name__)


class Vacuum:
    """Cleans up expired Brigade builds.

    Attributes:
        accessor: Cluster accessor scoped to one namespace.
        age_limit: Age-based eviction limit.
        count_limit: Count-based eviction limit.
        skip_running_builds: Keep Running/Pending workers.
        dry_run: Report only, delete nothing.
    """

    def __init__(
        self,
        accessor: ResourceAccessor,
        age_limit: AgeLimit | None = None,
        count_limit: CountLimit | None = None,
        skip_running_builds: bool = False,
        dry_run: bool = False,
    ) -> None:
        self.accessor = accessor
        self.age_limit = age_limit if age_limit is not None else NoAgeLimit()
        self.count_limit = count_limit if count_limit is not None else Unlimited()
        self.skip_running_builds = skip_running_builds
        self.dry_run = dry_run

    @classmethod
    def from_settings(
        cls,
        accessor: ResourceAccessor,
        settings: Settings,
        now: datetime | None = None,
    ) -> Vacuum:
        """Build a Vacuum from application settings.

        Args:
            accessor: Cluster accessor.
            settings: Application settings.
            now: Reference time for the age cutoff (defaults to current UTC).
        """
        return cls(
            accessor,
            age_limit=settings.age_limit(now),
            count_limit=settings.count_limit(),
            skip_running_builds=settings.skip_running_builds,
            dry_run=settings.dry_run,
        )

    def run(self) -> VacuumReport:
        """Execute one pass, destroying resources that are expired.

        Deletion failures are logged and reported, not raised.

        Returns:
            VacuumReport with per-resource outcomes of both policies.

        Raises:
            ResourceListError: If any listing fails. Deletions already
                issued remain applied.
        """
        age = run_age_policy(
            self.accessor,
            self.age_limit,
            skip_running_builds=self.skip_running_builds,
            dry_run=self.dry_run,
        )
        count = run_count_policy(
            self.accessor,
            self.count_limit,
            skip_running_builds=self.skip_running_builds,
            dry_run=self.dry_run,
            exclude=age.evicted_builds if self.dry_run else (),
        )
        report = VacuumReport(age=age, count=count, dry_run=self.dry_run)

        if report.failures:
            logger.warning(
                "Vacuum finished with %d failed deletion(s)", len(report.failures)
            )
        else:
            logger.info(
                "Vacuum finished: %d build(s) evicted",
                len(age.evictions) + len(count.evictions),
            )
        return report


__all__ = ["Vacuum"]
