"""Resource models.

Brigade stores one build as a record Secret plus zero or more worker
Pods. Both carry a ``build`` label whose value is the build ID; that
label is the only link between them.
"""

from dataclasses import dataclass, field
from datetime import datetime

from brigade_vacuum.types import WorkerPhase

# Label joining records and workers of the same build
BUILD_LABEL = "build"

# Labels Brigade puts on build record Secrets
BUILD_RECORD_LABELS = {"component": "build", "heritage": "brigade"}


def format_selector(labels: dict[str, str]) -> str:
    """Render an equality-based label selector string."""
    return ",".join(f"{k}={v}" for k, v in labels.items())


BUILD_SELECTOR = format_selector(BUILD_RECORD_LABELS)


@dataclass(frozen=True)
class RecordResource:
    """A build record (Kubernetes Secret).

    Attributes:
        name: Resource name.
        created_at: Creation timestamp (timezone-aware).
        labels: Resource labels.
    """

    name: str
    created_at: datetime
    labels: dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def build_id(self) -> str | None:
        return self.labels.get(BUILD_LABEL)


@dataclass(frozen=True)
class WorkerResource:
    """A build worker (Kubernetes Pod).

    Attributes:
        name: Resource name.
        labels: Resource labels.
        phase: Pod lifecycle phase.
    """

    name: str
    labels: dict[str, str] = field(default_factory=dict, hash=False)
    phase: WorkerPhase = WorkerPhase.UNKNOWN

    @property
    def build_id(self) -> str | None:
        return self.labels.get(BUILD_LABEL)


__all__ = [
    "BUILD_LABEL",
    "BUILD_RECORD_LABELS",
    "BUILD_SELECTOR",
    "RecordResource",
    "WorkerResource",
    "format_selector",
]
