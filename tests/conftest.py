"""Shared test fixtures."""

from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from clusterprovider.aws.client import EksClient
from clusterprovider.models import Cluster, ClusterConfig, ClusterStatus, ResourceEvent

MOCK_PROPS = {
    "roleArn": "arn:of:role",
    "resourcesVpcConfig": {
        "subnetIds": ["subnet1", "subnet2"],
        "securityGroupIds": ["sg1", "sg2", "sg3"],
    },
}


@pytest.fixture
def aws_credentials(monkeypatch):
    """Set dummy AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")


@pytest.fixture
def eks_client(aws_credentials):
    """Create a moto-mocked EKS boto3 client."""
    with mock_aws():
        yield boto3.client("eks", region_name="us-east-1")


def make_cluster(name="physical-resource-id", status=ClusterStatus.ACTIVE, version="1.0"):
    return Cluster(
        name=name,
        status=status,
        version=version,
        arn="arn:cluster-arn",
        endpoint="http://endpoint",
        certificate_authority_data="certificateAuthority-data",
    )


def new_raw_request(request_type, props=None, old_props=None):
    """A custom resource event dict as delivered by the provider framework."""
    return {
        "StackId": "fake-stack-id",
        "RequestId": "fake-request-id",
        "ResourceType": "Custom::AWSCDK-EKS-Cluster",
        "ServiceToken": "boom",
        "LogicalResourceId": "MyResourceId",
        "PhysicalResourceId": "physical-resource-id",
        "ResponseURL": "http://response-url",
        "RequestType": request_type,
        "OldResourceProperties": {"Config": old_props},
        "ResourceProperties": {"ServiceToken": "boom", "Config": props},
    }


def new_request(request_type, props=None, old_props=None) -> ResourceEvent:
    return ResourceEvent.from_dict(new_raw_request(request_type, props, old_props))


@pytest.fixture
def mock_eks():
    """A fake EKS client that echoes create requests like the real API."""
    client = MagicMock(spec=EksClient)

    def create_cluster(config: ClusterConfig) -> Cluster:
        return Cluster(
            name=config.name,
            status=ClusterStatus.CREATING,
            version="1.0",
            arn=f"arn:{config.name}",
            certificate_authority_data="certificateAuthority-data",
        )

    client.create_cluster.side_effect = create_cluster
    client.describe_cluster.return_value = make_cluster()
    return client
