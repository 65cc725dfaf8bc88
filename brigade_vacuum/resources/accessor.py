"""Resource accessor interface.

The vacuum core talks to the cluster only through this protocol:
list by label selector and delete by name, for records and workers.
"""

from typing import Protocol

from brigade_vacuum.resources.models import RecordResource, WorkerResource


class ResourceAccessor(Protocol):
    """Cluster access needed by the vacuum.

    Listing raises ResourceListError. Deleting raises
    ResourceNotFoundError when the resource is already gone and
    ResourceAccessError for any other failure. Deletion is immediate.
    """

    def list_records(self, selector: str | None = None) -> list[RecordResource]:
        """List record resources, optionally restricted by label selector."""
        ...

    def list_workers(self, selector: str | None = None) -> list[WorkerResource]:
        """List worker resources, optionally restricted by label selector."""
        ...

    def delete_record(self, name: str) -> None:
        """Delete a record resource by name."""
        ...

    def delete_worker(self, name: str) -> None:
        """Delete a worker resource by name."""
        ...


__all__ = ["ResourceAccessor"]
