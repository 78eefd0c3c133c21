"""Classification of cluster config changes into replacement and in-place updates."""

import logging

from clusterprovider.models import (
    ClusterConfig,
    InPlaceUpdate,
    UpdateMap,
    UpdatePlan,
    VpcConfig,
)

logger = logging.getLogger(__name__)


def analyze_update(old: ClusterConfig, new: ClusterConfig) -> UpdateMap:
    """Compare two configs property by property.

    A value present on one side and absent on the other always counts as a
    change. Subnet and security group lists are compared in order.
    """
    logger.debug("old props: %s", old)
    logger.debug("new props: %s", new)

    old_vpc = old.resources_vpc_config or VpcConfig()
    new_vpc = new.resources_vpc_config or VpcConfig()

    return UpdateMap(
        replace_name=new.name != old.name,
        replace_vpc=(
            new_vpc.subnet_ids != old_vpc.subnet_ids
            or new_vpc.security_group_ids != old_vpc.security_group_ids
        ),
        replace_role=new.role_arn != old.role_arn,
        update_version=new.version != old.version,
        update_logging=new.logging != old.logging,
        update_access=(
            new_vpc.endpoint_private_access != old_vpc.endpoint_private_access
            or new_vpc.endpoint_public_access != old_vpc.endpoint_public_access
        ),
    )


def plan_update(old: ClusterConfig, new: ClusterConfig) -> UpdatePlan:
    """Fold an UpdateMap into a single decision. Replacement dominates."""
    updates = analyze_update(old, new)
    logger.info("update analysis: %s", updates)

    if updates.requires_replacement:
        return UpdatePlan.replace()

    in_place = []
    if updates.update_version:
        in_place.append(InPlaceUpdate.VERSION)
    if updates.update_logging or updates.update_access:
        in_place.append(InPlaceUpdate.CONFIG)

    if not in_place:
        return UpdatePlan.no_op()
    return UpdatePlan.in_place(*in_place)
