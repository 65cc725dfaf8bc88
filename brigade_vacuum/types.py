"""Shared type definitions for brigade_vacuum.

This module contains the retention limit variants, enums and report
dataclasses shared across subpackages to avoid circular imports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class WorkerPhase(str, Enum):
    """Lifecycle phase of a worker Pod."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> "WorkerPhase":
        """Map a raw phase string onto a WorkerPhase, defaulting to UNKNOWN."""
        if value is None:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    @property
    def in_flight(self) -> bool:
        """Whether a worker in this phase is still executing or about to."""
        return self in (WorkerPhase.PENDING, WorkerPhase.RUNNING)


class ResourceKind(str, Enum):
    """Kind of cluster resource handled by the vacuum."""

    RECORD = "record"
    WORKER = "worker"


class DeletionStatus(str, Enum):
    """Outcome of a single resource deletion attempt."""

    DELETED = "deleted"
    SKIPPED = "skipped"
    MISSING = "missing"
    FAILED = "failed"
    DRY_RUN = "dry_run"


# Retention limits


@dataclass(frozen=True)
class NoAgeLimit:
    """Age-based eviction is disabled."""


@dataclass(frozen=True)
class CreatedBefore:
    """Evict builds whose record was created strictly before ``cutoff``."""

    cutoff: datetime


AgeLimit = NoAgeLimit | CreatedBefore


@dataclass(frozen=True)
class Unlimited:
    """Count-based eviction is disabled."""


@dataclass(frozen=True)
class AtMost:
    """Retain at most ``count`` of the newest builds."""

    count: int

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")


CountLimit = Unlimited | AtMost


# Reports


@dataclass
class ResourceOutcome:
    """What happened to one resource during a build eviction."""

    kind: ResourceKind
    name: str
    build_id: str
    status: DeletionStatus
    reason: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, object] = {
            "kind": self.kind.value,
            "name": self.name,
            "build_id": self.build_id,
            "status": self.status.value,
        }
        if self.reason is not None:
            result["reason"] = self.reason
        return result


@dataclass
class BuildEviction:
    """Per-resource outcomes of evicting one build."""

    build_id: str
    outcomes: list[ResourceOutcome] = field(default_factory=list)

    def _with_status(self, status: DeletionStatus) -> list[ResourceOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def deleted(self) -> list[ResourceOutcome]:
        return self._with_status(DeletionStatus.DELETED)

    @property
    def skipped(self) -> list[ResourceOutcome]:
        return self._with_status(DeletionStatus.SKIPPED)

    @property
    def failed(self) -> list[ResourceOutcome]:
        return self._with_status(DeletionStatus.FAILED)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "build_id": self.build_id,
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


@dataclass
class PolicyReport:
    """Result of running one eviction policy.

    Attributes:
        policy: Policy name ("age" or "count").
        ran: False when the policy was disabled and nothing was listed.
        considered: Number of labelled candidate records evaluated.
        evictions: One entry per evicted build.
        orphans: Names of candidate records lacking a build label.
    """

    policy: str
    ran: bool = False
    considered: int = 0
    evictions: list[BuildEviction] = field(default_factory=list)
    orphans: list[str] = field(default_factory=list)

    @property
    def evicted_builds(self) -> list[str]:
        return [e.build_id for e in self.evictions]

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "policy": self.policy,
            "ran": self.ran,
            "considered": self.considered,
            "evictions": [e.to_dict() for e in self.evictions],
            "orphans": list(self.orphans),
        }


@dataclass
class VacuumReport:
    """Result of one vacuum pass (age policy, then count policy)."""

    age: PolicyReport
    count: PolicyReport
    dry_run: bool = False

    @property
    def outcomes(self) -> list[ResourceOutcome]:
        return [
            o
            for report in (self.age, self.count)
            for e in report.evictions
            for o in e.outcomes
        ]

    @property
    def failures(self) -> list[ResourceOutcome]:
        return [o for o in self.outcomes if o.status == DeletionStatus.FAILED]

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "dry_run": self.dry_run,
            "age": self.age.to_dict(),
            "count": self.count.to_dict(),
            "failures": len(self.failures),
        }


__all__ = [
    "AgeLimit",
    "AtMost",
    "BuildEviction",
    "CountLimit",
    "CreatedBefore",
    "DeletionStatus",
    "NoAgeLimit",
    "PolicyReport",
    "ResourceKind",
    "ResourceOutcome",
    "Unlimited",
    "VacuumReport",
    "WorkerPhase",
]
