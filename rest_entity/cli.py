"""CLI entry point for working with a REST resource from the shell."""

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Mapping, Sequence
from typing import Any

import aiohttp

from rest_entity.builder import EntityBuilder
from rest_entity.entity import Entity, EntityType
from rest_entity.models.transport import TransportSettings
from rest_entity.transport.events import RawRequest

log = logging.getLogger("rest_entity")


def log_request(request: RawRequest) -> None:
    """Request listener printing each outgoing call."""
    log.info("%s %s", request.method, request.url)


def parse_query(pairs: Sequence[str]) -> Mapping[str, str]:
    """Parse ``key=value`` pairs into query parameters."""
    query: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid query parameter '{pair}', expected key=value")
        query[key] = value
    return query


def parse_identity(value: str) -> int | str:
    """Use numeric identities as integers, anything else verbatim."""
    return int(value) if value.isdigit() else value


def build_entity_type(args: argparse.Namespace) -> EntityType:
    """Build the entity type described by the command line."""
    settings = TransportSettings.model_validate_json(args.transport_options)
    builder = (
        EntityBuilder()
        .set_base_address(args.base_address)
        .set_resource_name(args.resource)
        .set_inner_resources(args.inner_resource)
        .set_identity_field(args.identity_field)
        .set_transport_options(**settings.to_session_options())
    )
    if args.verbose:
        builder.add_request_listener(log_request)
    return builder.build()


def format_entity(entity: Entity) -> dict[str, Any]:
    """Format an entity for JSON output."""
    return dict(entity.data)


async def run(entity_type: EntityType, args: argparse.Namespace) -> Any:
    """Run the selected command and return a JSON-serialisable result."""
    async with entity_type.connect() as connected:
        match args.command:
            case "list":
                entities = await connected.list(parse_query(args.query))
                return [format_entity(entity) for entity in entities]
            case "get":
                entity = await connected.get(parse_identity(args.identity))
                return format_entity(entity)
            case "create":
                entity = await connected.create(json.loads(args.data))
                return format_entity(entity)
            case "update":
                entity = connected(parse_identity(args.identity))
                return format_entity(await entity.update(json.loads(args.data)))
            case "delete":
                return await connected(parse_identity(args.identity)).delete()
            case "call":
                identity = parse_identity(args.identity) if args.identity else None
                data = json.loads(args.data) if args.data else None
                return await connected(identity).call(
                    args.action,
                    method=args.method,
                    data=data,
                    params=parse_query(args.query),
                )
    raise ValueError(f"Unknown command '{args.command}'")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the rest-entity command."""
    parser = argparse.ArgumentParser(description="Work with a REST resource")
    parser.add_argument(
        "--base-address",
        required=True,
        help="Root URL of the API (e.g. https://cars.test/api)",
    )
    parser.add_argument(
        "--resource",
        required=True,
        help="Resource name (e.g. cars)",
    )
    parser.add_argument(
        "--inner-resource",
        action="append",
        default=[],
        help="Nested resource to register, may be repeated",
    )
    parser.add_argument(
        "--identity-field",
        default="id",
        help="Payload field holding the identity",
    )
    parser.add_argument(
        "--transport-options",
        default="{}",
        help="JSON transport settings (headers, timeout)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every outgoing request",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_command = commands.add_parser("list", help="List the collection")
    list_command.add_argument("--query", action="append", default=[])

    get_command = commands.add_parser("get", help="Retrieve one entity")
    get_command.add_argument("identity")

    create_command = commands.add_parser("create", help="Create an entity")
    create_command.add_argument("--data", required=True, help="JSON payload")

    update_command = commands.add_parser("update", help="Partially update an entity")
    update_command.add_argument("identity")
    update_command.add_argument("--data", required=True, help="JSON payload")

    delete_command = commands.add_parser("delete", help="Delete an entity")
    delete_command.add_argument("identity")

    call_command = commands.add_parser("call", help="Invoke an inner resource")
    call_command.add_argument("action")
    call_command.add_argument("--identity", default=None)
    call_command.add_argument("--method", default="post")
    call_command.add_argument("--data", default=None, help="JSON payload")
    call_command.add_argument("--query", action="append", default=[])

    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = create_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    entity_type = build_entity_type(args)
    try:
        result = asyncio.run(run(entity_type, args))
    except aiohttp.ClientError as error:
        log.error("Request failed: %s", error)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))
    sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
