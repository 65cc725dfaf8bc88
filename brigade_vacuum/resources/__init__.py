"""Cluster resource access.

This module handles:
- Record (Secret) and worker (Pod) resource models
- The accessor protocol consumed by the vacuum
- The Kubernetes-backed accessor
"""

from brigade_vacuum.resources.accessor import ResourceAccessor
from brigade_vacuum.resources.models import (
    BUILD_LABEL,
    BUILD_SELECTOR,
    RecordResource,
    WorkerResource,
)

__all__ = [
    "BUILD_LABEL",
    "BUILD_SELECTOR",
    "RecordResource",
    "ResourceAccessor",
    "WorkerResource",
]

# The kubernetes client is imported lazily, only when a cluster is needed
# Access via brigade_vacuum.resources.kube
