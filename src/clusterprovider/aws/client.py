"""Thin boto3 wrapper for the EKS cluster API calls used by the handler."""

import logging
from typing import Any

import boto3
from botocore.exceptions import ClientError

from clusterprovider.errors import ClusterNotFoundError
from clusterprovider.models import Cluster, ClusterConfig, VpcConfig

logger = logging.getLogger(__name__)

NOT_FOUND_CODE = "ResourceNotFoundException"
SESSION_NAME = "cluster-provider"


def _is_not_found(error: ClientError) -> bool:
    return error.response.get("Error", {}).get("Code") == NOT_FOUND_CODE


def _session(region: str | None, assume_role_arn: str | None) -> boto3.Session:
    """Build a session, optionally from temporary credentials of an assumed role."""
    kwargs: dict[str, Any] = {"region_name": region} if region else {}
    if not assume_role_arn:
        return boto3.Session(**kwargs)

    logger.info("assuming role %s for EKS calls", assume_role_arn)
    sts = boto3.client("sts", **kwargs)
    creds = sts.assume_role(RoleArn=assume_role_arn, RoleSessionName=SESSION_NAME)["Credentials"]
    return boto3.Session(
        aws_access_key_id=creds["AccessKeyId"],
        aws_secret_access_key=creds["SecretAccessKey"],
        aws_session_token=creds["SessionToken"],
        **kwargs,
    )


class EksClient:
    """Wraps boto3 EKS calls and returns clusterprovider dataclasses.

    ResourceNotFoundException is raised as ClusterNotFoundError; every other
    ClientError propagates unchanged.
    """

    def __init__(self, region: str | None = None, assume_role_arn: str | None = None):
        self._client = _session(region, assume_role_arn).client("eks")

    def create_cluster(self, config: ClusterConfig) -> Cluster:
        request = config.to_request()
        logger.debug("createCluster request: %s", request)
        resp = self._client.create_cluster(**request)
        return Cluster.from_response(resp["cluster"])

    def describe_cluster(self, name: str) -> Cluster:
        try:
            resp = self._client.describe_cluster(name=name)
        except ClientError as e:
            if _is_not_found(e):
                raise ClusterNotFoundError(name) from e
            raise
        logger.debug("describeCluster result: %s", resp["cluster"])
        return Cluster.from_response(resp["cluster"])

    def delete_cluster(self, name: str) -> None:
        try:
            self._client.delete_cluster(name=name)
        except ClientError as e:
            if _is_not_found(e):
                raise ClusterNotFoundError(name) from e
            raise

    def update_cluster_config(
        self,
        name: str,
        logging_config: dict[str, Any] | None = None,
        resources_vpc_config: VpcConfig | None = None,
    ) -> None:
        """Replace the logging and endpoint access blocks as a whole."""
        kwargs: dict[str, Any] = {"name": name}
        if logging_config is not None:
            kwargs["logging"] = logging_config
        if resources_vpc_config is not None:
            access = resources_vpc_config.access_request()
            if access:
                kwargs["resourcesVpcConfig"] = access
        logger.debug("updateClusterConfig request: %s", kwargs)
        self._client.update_cluster_config(**kwargs)

    def update_cluster_version(self, name: str, version: str) -> None:
        self._client.update_cluster_version(name=name, version=version)
