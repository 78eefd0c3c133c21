"""Lambda entry points for the custom resource provider framework.

`on_event` handles Create/Update/Delete once per event, `is_complete` is
invoked on an interval by the framework until it reports completion.
"""

import logging
import os
from typing import Any

from clusterprovider.aws.client import EksClient
from clusterprovider.handler import ClusterResourceHandler
from clusterprovider.models import RequestType, ResourceEvent

logger = logging.getLogger(__name__)

ASSUME_ROLE_ENV = "CLUSTER_PROVIDER_ASSUME_ROLE_ARN"

logging.getLogger("clusterprovider").setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())


def _handler() -> ClusterResourceHandler:
    client = EksClient(
        region=os.environ.get("AWS_REGION"),
        assume_role_arn=os.environ.get(ASSUME_ROLE_ENV) or None,
    )
    return ClusterResourceHandler(client)


def on_event(event: dict[str, Any], context: Any = None) -> dict[str, Any] | None:
    request = ResourceEvent.from_dict(event)
    logger.info("onEvent %s for %s", request.request_type, request.physical_resource_id)
    handler = _handler()

    match request.request_type:
        case RequestType.CREATE:
            result = handler.on_create(request)
        case RequestType.UPDATE:
            result = handler.on_update(request)
        case RequestType.DELETE:
            result = handler.on_delete(request)

    return result.to_dict() if result is not None else None


def is_complete(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    request = ResourceEvent.from_dict(event)
    handler = _handler()

    match request.request_type:
        case RequestType.CREATE:
            result = handler.is_create_complete(request)
        case RequestType.UPDATE:
            result = handler.is_update_complete(request)
        case RequestType.DELETE:
            result = handler.is_delete_complete(request)

    return result.to_dict()
