"""Kubernetes-backed resource accessor.

Build records are Secrets and workers are Pods, both scoped to a single
namespace. Transport errors are mapped onto brigade_vacuum.errors.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from brigade_vacuum.errors import (
    KubeConfigError,
    ResourceAccessError,
    ResourceListError,
    ResourceNotFoundError,
)
from brigade_vacuum.resources.models import RecordResource, WorkerResource
from brigade_vacuum.types import ResourceKind, WorkerPhase

logger = logging.getLogger(__name__)


def load_core_v1(
    kubeconfig: Path | None = None,
    context: str | None = None,
) -> client.CoreV1Api:
    """Create a CoreV1Api client.

    An explicit kubeconfig wins. Otherwise the in-cluster service account
    configuration is tried first, then the default kubeconfig.

    Args:
        kubeconfig: Optional path to a kubeconfig file.
        context: Optional kubeconfig context name.

    Returns:
        Configured CoreV1Api.

    Raises:
        KubeConfigError: If no configuration could be loaded.
    """
    try:
        if kubeconfig is not None:
            config.load_kube_config(config_file=str(kubeconfig), context=context)
            logger.info("Loaded kubeconfig file %s", kubeconfig)
        else:
            try:
                config.load_incluster_config()
                logger.info("Loaded in-cluster Kubernetes configuration")
            except config.ConfigException:
                config.load_kube_config(context=context)
                logger.info("Loaded kubeconfig file")
    except (config.ConfigException, OSError) as e:
        raise KubeConfigError(f"Could not configure Kubernetes client: {e}") from e

    return client.CoreV1Api()


def secret_to_record(secret: client.V1Secret) -> RecordResource:
    """Convert a V1Secret into a RecordResource."""
    meta = secret.metadata
    return RecordResource(
        name=meta.name,
        created_at=meta.creation_timestamp,
        labels=dict(meta.labels or {}),
    )


def pod_to_worker(pod: client.V1Pod) -> WorkerResource:
    """Convert a V1Pod into a WorkerResource."""
    phase = pod.status.phase if pod.status is not None else None
    return WorkerResource(
        name=pod.metadata.name,
        labels=dict(pod.metadata.labels or {}),
        phase=WorkerPhase.parse(phase),
    )


class KubeResourceAccessor:
    """ResourceAccessor over the Kubernetes core/v1 API."""

    def __init__(
        self,
        core_v1: client.CoreV1Api,
        namespace: str,
        request_timeout: int | None = None,
    ) -> None:
        self.core_v1 = core_v1
        self.namespace = namespace
        self.request_timeout = request_timeout

    def _list_kwargs(self, selector: str | None) -> dict[str, object]:
        kwargs: dict[str, object] = {"namespace": self.namespace}
        if selector:
            kwargs["label_selector"] = selector
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        return kwargs

    def _delete_kwargs(self, name: str) -> dict[str, object]:
        kwargs: dict[str, object] = {
            "name": name,
            "namespace": self.namespace,
            "body": client.V1DeleteOptions(grace_period_seconds=0),
        }
        if self.request_timeout is not None:
            kwargs["_request_timeout"] = self.request_timeout
        return kwargs

    def list_records(self, selector: str | None = None) -> list[RecordResource]:
        try:
            secrets = self.core_v1.list_namespaced_secret(**self._list_kwargs(selector))
        except (ApiException, HTTPError) as e:
            raise ResourceListError(ResourceKind.RECORD.value, selector, e) from e
        return [secret_to_record(s) for s in secrets.items]

    def list_workers(self, selector: str | None = None) -> list[WorkerResource]:
        try:
            pods = self.core_v1.list_namespaced_pod(**self._list_kwargs(selector))
        except (ApiException, HTTPError) as e:
            raise ResourceListError(ResourceKind.WORKER.value, selector, e) from e
        return [pod_to_worker(p) for p in pods.items]

    def delete_record(self, name: str) -> None:
        try:
            self.core_v1.delete_namespaced_secret(**self._delete_kwargs(name))
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError(ResourceKind.RECORD.value, name) from e
            raise ResourceAccessError(ResourceKind.RECORD.value, name, e) from e
        except HTTPError as e:
            raise ResourceAccessError(ResourceKind.RECORD.value, name, e) from e

    def delete_worker(self, name: str) -> None:
        try:
            self.core_v1.delete_namespaced_pod(**self._delete_kwargs(name))
        except ApiException as e:
            if e.status == 404:
                raise ResourceNotFoundError(ResourceKind.WORKER.value, name) from e
            raise ResourceAccessError(ResourceKind.WORKER.value, name, e) from e
        except HTTPError as e:
            raise ResourceAccessError(ResourceKind.WORKER.value, name, e) from e


__all__ = [
    "KubeResourceAccessor",
    "load_core_v1",
    "pod_to_worker",
    "secret_to_record",
]
