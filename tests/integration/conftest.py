"""Fixtures for integration tests."""

from collections.abc import AsyncGenerator

import pytest
from aioresponses import aioresponses as aioresponses_cls

from rest_entity.builder import EntityBuilder
from rest_entity.entity import EntityType
from rest_entity.testing.factories import API_BASE_URL
from rest_entity.transport.events import RawRequest


@pytest.fixture
def sent_requests() -> list[RawRequest]:
    """Collect requests reported to the request listener."""
    return []


@pytest.fixture
def cars_type(sent_requests: list[RawRequest]) -> EntityType:
    """Create the cars entity type."""
    return (
        EntityBuilder()
        .set_base_address(API_BASE_URL)
        .set_resource_name("cars")
        .add_inner_resource("repairAll")
        .add_request_listener(sent_requests.append)
        .build()
    )


@pytest.fixture
async def cars(
    cars_type: EntityType, aioresponses: aioresponses_cls
) -> AsyncGenerator[EntityType, None]:
    """Create the cars entity type with a managed session."""
    async with cars_type.connect() as connected:
        yield connected
