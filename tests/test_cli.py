"""Tests for the CLI entrypoint."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from clusterprovider.cli import main
from clusterprovider.errors import ClusterNotFoundError
from clusterprovider.models import ClusterStatus
from tests.conftest import MOCK_PROPS, make_cluster, new_raw_request


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def patched_client(mock_eks):
    with patch("clusterprovider.cli.EksClient", return_value=mock_eks) as client_cls:
        yield client_cls


@pytest.fixture
def event_file(tmp_path):
    def write(request_type, props=None, old_props=None):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(new_raw_request(request_type, props, old_props)))
        return str(path)

    return write


def test_on_event_create_json(runner, patched_client, event_file):
    result = runner.invoke(main, ["--format", "json", "on-event", event_file("Create", MOCK_PROPS)])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"PhysicalResourceId": "cluster-fake-request-id"}


def test_on_event_table(runner, patched_client, event_file):
    result = runner.invoke(main, ["on-event", event_file("Delete")])

    assert result.exit_code == 0
    assert "physical-resource-id" in result.output


def test_on_event_validation_error(runner, patched_client, event_file):
    result = runner.invoke(main, ["on-event", event_file("Create", {"name": "no-role"})])

    assert result.exit_code == 1
    assert "roleArn" in result.output


def test_invalid_event_file(runner, patched_client, tmp_path):
    path = tmp_path / "event.json"
    path.write_text("{}")

    result = runner.invoke(main, ["on-event", str(path)])

    assert result.exit_code == 2
    assert "invalid event" in result.output


def test_region_and_role_passed_to_client(runner, patched_client, event_file):
    runner.invoke(
        main,
        ["--region", "eu-west-1", "--assume-role-arn", "arn:role", "on-event", event_file("Delete")],
    )

    patched_client.assert_called_once_with("eu-west-1", "arn:role")


def test_is_complete_exit_0_when_active(runner, patched_client, event_file):
    result = runner.invoke(main, ["--format", "json", "is-complete", event_file("Create")])

    assert result.exit_code == 0
    assert json.loads(result.output)["Data"]["Name"] == "physical-resource-id"


def test_is_complete_exit_1_when_not_active(runner, patched_client, mock_eks, event_file):
    mock_eks.describe_cluster.return_value = make_cluster(status=ClusterStatus.UPDATING)

    result = runner.invoke(main, ["is-complete", event_file("Update")])

    assert result.exit_code == 1


def test_wait_polls_until_complete(runner, patched_client, mock_eks, event_file):
    mock_eks.describe_cluster.side_effect = [
        make_cluster(status=ClusterStatus.CREATING),
        make_cluster(status=ClusterStatus.CREATING),
        make_cluster(status=ClusterStatus.ACTIVE),
    ]

    result = runner.invoke(main, ["wait", event_file("Create"), "--poll-interval", "0"])

    assert result.exit_code == 0
    assert mock_eks.describe_cluster.call_count == 3


def test_wait_times_out(runner, patched_client, mock_eks, event_file):
    mock_eks.describe_cluster.return_value = make_cluster(status=ClusterStatus.CREATING)

    result = runner.invoke(
        main,
        ["wait", event_file("Create"), "--poll-interval", "0", "--max-poll-attempts", "3"],
    )

    assert result.exit_code == 2
    assert mock_eks.describe_cluster.call_count == 3
    assert "not complete after 3 checks" in result.output


def test_wait_for_delete(runner, patched_client, mock_eks, event_file):
    mock_eks.describe_cluster.side_effect = [
        make_cluster(status=ClusterStatus.DELETING),
        ClusterNotFoundError("physical-resource-id"),
    ]

    result = runner.invoke(main, ["--format", "json", "wait", event_file("Delete"), "--poll-interval", "0"])

    assert result.exit_code == 0
    assert json.loads(result.output) == {"IsComplete": True}


def test_wait_aborts_on_error(runner, patched_client, mock_eks, event_file):
    mock_eks.describe_cluster.side_effect = ClusterNotFoundError("physical-resource-id")

    result = runner.invoke(main, ["wait", event_file("Create"), "--poll-interval", "0"])

    assert result.exit_code == 1
    assert mock_eks.describe_cluster.call_count == 1
