"""Lifecycle handler for the EKS cluster custom resource."""

import logging
from typing import Protocol

from clusterprovider.analyzer import plan_update
from clusterprovider.errors import ClusterNotFoundError, ValidationError
from clusterprovider.models import (
    Cluster,
    ClusterConfig,
    ClusterStatus,
    InPlaceUpdate,
    IsCompleteResult,
    OnEventResult,
    ResourceEvent,
    UpdateKind,
    VpcConfig,
)

logger = logging.getLogger(__name__)


class ClusterApi(Protocol):
    """The EKS calls the handler depends on."""

    def create_cluster(self, config: ClusterConfig) -> Cluster: ...

    def describe_cluster(self, name: str) -> Cluster: ...

    def delete_cluster(self, name: str) -> None: ...

    def update_cluster_config(
        self,
        name: str,
        logging_config: dict | None = None,
        resources_vpc_config: VpcConfig | None = None,
    ) -> None: ...

    def update_cluster_version(self, name: str, version: str) -> None: ...


def generate_cluster_name(request_id: str) -> str:
    """Derive a cluster name that is stable across redeliveries of one request."""
    return f"cluster-{request_id}"


class ClusterResourceHandler:
    """Creates, updates and deletes one EKS cluster and reports convergence.

    Every method is a single stateless activation: it issues at most the
    calls needed for this event and never waits for the cluster to settle.
    """

    def __init__(self, eks: ClusterApi):
        self._eks = eks

    # create

    def on_create(self, event: ResourceEvent) -> OnEventResult:
        props = event.properties
        if not props.role_arn:
            raise ValidationError('"roleArn" is required')

        name = props.name or generate_cluster_name(event.request_id)
        config = ClusterConfig(
            name=name,
            role_arn=props.role_arn,
            version=props.version,
            resources_vpc_config=props.resources_vpc_config,
            logging=props.logging,
        )
        logger.info("creating cluster %s", name)
        cluster = self._eks.create_cluster(config)
        return OnEventResult(physical_resource_id=cluster.name)

    def is_create_complete(self, event: ResourceEvent) -> IsCompleteResult:
        return self._is_active(event)

    # delete

    def on_delete(self, event: ResourceEvent) -> OnEventResult:
        name = event.physical_resource_id
        logger.info("deleting cluster %s", name)
        try:
            self._eks.delete_cluster(name)
        except ClusterNotFoundError:
            logger.info("cluster %s not found, idempotently succeeded", name)
        return OnEventResult(physical_resource_id=name)

    def is_delete_complete(self, event: ResourceEvent) -> IsCompleteResult:
        name = event.physical_resource_id
        logger.info("waiting for cluster %s to be deleted", name)
        try:
            cluster = self._eks.describe_cluster(name)
        except ClusterNotFoundError:
            logger.info("cluster %s not found, it has been deleted (or never existed)", name)
            return IsCompleteResult(is_complete=True)

        logger.info("cluster %s still exists with status %s", name, cluster.status)
        return IsCompleteResult(is_complete=False)

    # update

    def on_update(self, event: ResourceEvent) -> OnEventResult | None:
        """Apply an update. Returns None when the physical id is unchanged."""
        old = event.old_properties or ClusterConfig()
        new = event.properties
        plan = plan_update(old, new)

        match plan.kind:
            case UpdateKind.REPLACE:
                # The framework deletes the old cluster once it sees the new id.
                logger.info("update requires replacement of cluster %s", event.physical_resource_id)
                return self.on_create(event)

            case UpdateKind.IN_PLACE:
                name = event.physical_resource_id
                if InPlaceUpdate.VERSION in plan.updates:
                    if not new.version:
                        raise ValidationError(
                            "Cannot remove cluster version configuration. "
                            f"Current version is {old.version}"
                        )
                    self._update_cluster_version(name, new.version)

                if InPlaceUpdate.CONFIG in plan.updates:
                    logger.info("updating logging and endpoint access of cluster %s", name)
                    self._eks.update_cluster_config(
                        name,
                        logging_config=new.logging,
                        resources_vpc_config=new.resources_vpc_config,
                    )
                return None

            case UpdateKind.NO_OP:
                logger.info("no changes for cluster %s", event.physical_resource_id)
                return None

    def is_update_complete(self, event: ResourceEvent) -> IsCompleteResult:
        return self._is_active(event)

    def _update_cluster_version(self, name: str, version: str) -> None:
        # EKS rejects a version update to the current version.
        cluster = self._eks.describe_cluster(name)
        if cluster.version == version:
            logger.info("cluster %s already at version %s, skipping version update", name, version)
            return

        logger.info("updating cluster %s from version %s to %s", name, cluster.version, version)
        self._eks.update_cluster_version(name, version)

    def _is_active(self, event: ResourceEvent) -> IsCompleteResult:
        name = event.physical_resource_id
        logger.info("waiting for cluster %s to become ACTIVE", name)
        cluster = self._eks.describe_cluster(name)
        if cluster.status != ClusterStatus.ACTIVE:
            logger.info("cluster %s status is %s", name, cluster.status)
            return IsCompleteResult(is_complete=False)

        return IsCompleteResult.active(cluster)
