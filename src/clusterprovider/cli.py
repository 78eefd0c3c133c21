"""CLI entrypoint for driving cluster resource events by hand."""

import json
import logging
import sys
import time

import click
from botocore.exceptions import BotoCoreError, ClientError

from clusterprovider.aws.client import EksClient
from clusterprovider.errors import ClusterNotFoundError, ValidationError
from clusterprovider.formatter import format_json, format_table
from clusterprovider.handler import ClusterResourceHandler
from clusterprovider.index import ASSUME_ROLE_ENV
from clusterprovider.models import RequestType, ResourceEvent

logger = logging.getLogger(__name__)

FORMATTERS = {
    "table": format_table,
    "json": format_json,
}


def _load_event(event_file) -> ResourceEvent:
    try:
        return ResourceEvent.from_dict(json.load(event_file))
    except (json.JSONDecodeError, KeyError, ValueError) as e:
        raise click.BadParameter(f"invalid event: {e}", param_hint="EVENT_FILE") from e


def _check(handler: ClusterResourceHandler, event: ResourceEvent):
    checks = {
        RequestType.CREATE: handler.is_create_complete,
        RequestType.UPDATE: handler.is_update_complete,
        RequestType.DELETE: handler.is_delete_complete,
    }
    return checks[event.request_type](event)


def _run(fn, *args):
    """Call a handler method, turning expected failures into CLI errors."""
    try:
        return fn(*args)
    except (ValidationError, ClusterNotFoundError, ClientError, BotoCoreError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--region", default=None, help="AWS region.")
@click.option(
    "--assume-role-arn",
    envvar=ASSUME_ROLE_ENV,
    default=None,
    help="IAM role to assume for EKS calls.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format.",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level.",
)
@click.pass_context
def main(ctx, region, assume_role_arn, output_format, log_level):
    """Create, update and delete an EKS cluster from custom resource events."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("clusterprovider").setLevel(log_level.upper())
    ctx.ensure_object(dict)
    ctx.obj["region"] = region
    ctx.obj["assume_role_arn"] = assume_role_arn
    ctx.obj["format"] = FORMATTERS[output_format]


def _handler(ctx) -> ClusterResourceHandler:
    client = _run(
        EksClient,
        ctx.obj["region"],
        ctx.obj["assume_role_arn"],
    )
    return ClusterResourceHandler(client)


@main.command("on-event")
@click.argument("event_file", type=click.File("r"))
@click.pass_context
def on_event(ctx, event_file):
    """Apply a Create, Update or Delete event once."""
    event = _load_event(event_file)
    handler = _handler(ctx)
    methods = {
        RequestType.CREATE: handler.on_create,
        RequestType.UPDATE: handler.on_update,
        RequestType.DELETE: handler.on_delete,
    }
    result = _run(methods[event.request_type], event)
    click.echo(ctx.obj["format"](result))


@main.command("is-complete")
@click.argument("event_file", type=click.File("r"))
@click.pass_context
def is_complete(ctx, event_file):
    """Run one completion check. Exits 0 when complete, 1 otherwise."""
    event = _load_event(event_file)
    result = _run(_check, _handler(ctx), event)
    click.echo(ctx.obj["format"](result))
    sys.exit(0 if result.is_complete else 1)


@main.command()
@click.argument("event_file", type=click.File("r"))
@click.option("--poll-interval", type=float, default=60.0, help="Seconds between checks.")
@click.option("--max-poll-attempts", type=int, default=60, help="Checks before giving up.")
@click.pass_context
def wait(ctx, event_file, poll_interval, max_poll_attempts):
    """Poll the completion check until complete. Exits 2 on timeout."""
    event = _load_event(event_file)
    handler = _handler(ctx)

    for attempt in range(1, max_poll_attempts + 1):
        result = _run(_check, handler, event)
        if result.is_complete:
            break

        logger.info("attempt %d/%d: not complete", attempt, max_poll_attempts)
        if poll_interval > 0 and attempt < max_poll_attempts:
            time.sleep(poll_interval)
    else:
        click.echo(
            f"Error: {event.physical_resource_id} not complete after {max_poll_attempts} checks.",
            err=True,
        )
        sys.exit(2)

    click.echo(ctx.obj["format"](result))
