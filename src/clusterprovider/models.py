"""Core data models for the EKS cluster custom resource."""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class RequestType(StrEnum):
    """CloudFormation custom resource request type."""

    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"


class ClusterStatus(StrEnum):
    """EKS cluster status as reported by DescribeCluster."""

    CREATING = "CREATING"
    ACTIVE = "ACTIVE"
    DELETING = "DELETING"
    FAILED = "FAILED"
    UPDATING = "UPDATING"
    PENDING = "PENDING"


class UpdateKind(StrEnum):
    """How an update event must be applied."""

    REPLACE = "REPLACE"
    IN_PLACE = "IN_PLACE"
    NO_OP = "NO_OP"


class InPlaceUpdate(StrEnum):
    """A single in-place mutating call."""

    VERSION = "VERSION"
    CONFIG = "CONFIG"


@dataclass(frozen=True)
class VpcConfig:
    """Network placement of a cluster (EKS resourcesVpcConfig)."""

    subnet_ids: tuple[str, ...] | None = None
    security_group_ids: tuple[str, ...] | None = None
    endpoint_public_access: bool | None = None
    endpoint_private_access: bool | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "VpcConfig":
        data = data or {}
        subnets = data.get("subnetIds")
        groups = data.get("securityGroupIds")
        return cls(
            subnet_ids=tuple(subnets) if subnets is not None else None,
            security_group_ids=tuple(groups) if groups is not None else None,
            endpoint_public_access=data.get("endpointPublicAccess"),
            endpoint_private_access=data.get("endpointPrivateAccess"),
        )

    def to_request(self) -> dict[str, Any]:
        request: dict[str, Any] = {}
        if self.subnet_ids is not None:
            request["subnetIds"] = list(self.subnet_ids)
        if self.security_group_ids is not None:
            request["securityGroupIds"] = list(self.security_group_ids)
        if self.endpoint_public_access is not None:
            request["endpointPublicAccess"] = self.endpoint_public_access
        if self.endpoint_private_access is not None:
            request["endpointPrivateAccess"] = self.endpoint_private_access
        return request

    def access_request(self) -> dict[str, Any]:
        """Only the endpoint access flags, as accepted by UpdateClusterConfig."""
        request = self.to_request()
        request.pop("subnetIds", None)
        request.pop("securityGroupIds", None)
        return request


@dataclass(frozen=True)
class ClusterConfig:
    """Desired cluster configuration supplied by the caller."""

    name: str | None = None
    role_arn: str | None = None
    version: str | None = None
    resources_vpc_config: VpcConfig | None = None
    logging: dict[str, Any] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "ClusterConfig":
        """Build from an EKS CreateCluster-shaped dict. Missing config is empty."""
        data = data or {}
        vpc = data.get("resourcesVpcConfig")
        return cls(
            name=data.get("name"),
            role_arn=data.get("roleArn"),
            version=data.get("version"),
            resources_vpc_config=VpcConfig.from_dict(vpc) if vpc is not None else None,
            logging=data.get("logging"),
        )

    @classmethod
    def from_resource_properties(cls, properties: dict[str, Any] | None) -> "ClusterConfig":
        """Extract the config from custom resource properties (the `Config` key)."""
        return cls.from_dict((properties or {}).get("Config"))

    def to_request(self) -> dict[str, Any]:
        """Render as EKS CreateCluster request keys, omitting absent values."""
        request: dict[str, Any] = {}
        if self.name is not None:
            request["name"] = self.name
        if self.role_arn is not None:
            request["roleArn"] = self.role_arn
        if self.version is not None:
            request["version"] = self.version
        if self.resources_vpc_config is not None:
            request["resourcesVpcConfig"] = self.resources_vpc_config.to_request()
        if self.logging is not None:
            request["logging"] = self.logging
        return request


@dataclass(frozen=True)
class Cluster:
    """Live cluster state observed from EKS."""

    name: str
    status: ClusterStatus
    version: str | None = None
    arn: str | None = None
    endpoint: str | None = None
    certificate_authority_data: str | None = None

    @classmethod
    def from_response(cls, cluster: dict[str, Any]) -> "Cluster":
        return cls(
            name=cluster["name"],
            status=ClusterStatus(cluster["status"]),
            version=cluster.get("version"),
            arn=cluster.get("arn"),
            endpoint=cluster.get("endpoint"),
            certificate_authority_data=(cluster.get("certificateAuthority") or {}).get("data"),
        )


@dataclass(frozen=True)
class UpdateMap:
    """Which properties changed between two configs, and how each must be applied."""

    replace_name: bool
    replace_vpc: bool
    replace_role: bool
    update_version: bool
    update_logging: bool
    update_access: bool

    @property
    def requires_replacement(self) -> bool:
        return self.replace_name or self.replace_vpc or self.replace_role


@dataclass(frozen=True)
class UpdatePlan:
    """Tagged update decision: replace, in-place with sub-updates, or nothing."""

    kind: UpdateKind
    updates: frozenset[InPlaceUpdate] = field(default_factory=frozenset)

    @classmethod
    def replace(cls) -> "UpdatePlan":
        return cls(UpdateKind.REPLACE)

    @classmethod
    def in_place(cls, *updates: InPlaceUpdate) -> "UpdatePlan":
        return cls(UpdateKind.IN_PLACE, frozenset(updates))

    @classmethod
    def no_op(cls) -> "UpdatePlan":
        return cls(UpdateKind.NO_OP)


@dataclass(frozen=True)
class ResourceEvent:
    """A custom resource lifecycle event (onEvent or isComplete request)."""

    request_type: RequestType
    request_id: str
    properties: ClusterConfig
    physical_resource_id: str | None = None
    old_properties: ClusterConfig | None = None

    @classmethod
    def from_dict(cls, event: dict[str, Any]) -> "ResourceEvent":
        old = event.get("OldResourceProperties")
        return cls(
            request_type=RequestType(event["RequestType"]),
            request_id=event.get("RequestId", ""),
            properties=ClusterConfig.from_resource_properties(event.get("ResourceProperties")),
            physical_resource_id=event.get("PhysicalResourceId"),
            old_properties=ClusterConfig.from_resource_properties(old) if old is not None else None,
        )


@dataclass(frozen=True)
class OnEventResult:
    """Result of a mutating operation."""

    physical_resource_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"PhysicalResourceId": self.physical_resource_id}


@dataclass(frozen=True)
class IsCompleteResult:
    """Result of a completion check. `data` is set only once the cluster is ACTIVE."""

    is_complete: bool
    data: dict[str, Any] | None = None

    @classmethod
    def active(cls, cluster: Cluster) -> "IsCompleteResult":
        return cls(
            is_complete=True,
            data={
                "Name": cluster.name,
                "Endpoint": cluster.endpoint,
                "Arn": cluster.arn,
                "CertificateAuthorityData": cluster.certificate_authority_data,
            },
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"IsComplete": self.is_complete}
        if self.data is not None:
            result["Data"] = self.data
        return result
