"""Integration tests for CRUD operations over HTTP."""

import aiohttp
import pytest
from aioresponses import aioresponses as aioresponses_cls
from yarl import URL

from rest_entity.entity import EntityType
from rest_entity.errors import NoIdentityError, UnknownInnerResourceError
from rest_entity.testing.factories import API_BASE_URL
from rest_entity.testing.payloads import car, cars as cars_payload
from rest_entity.transport.events import RawRequest

CARS_URL = f"{API_BASE_URL}/cars"


class TestList:
    """Tests for EntityType.list."""

    async def test_returns_entities_in_server_order(
        self,
        cars: EntityType,
        aioresponses: aioresponses_cls,
        sent_requests: list[RawRequest],
    ) -> None:
        """Hydrates one entity per element, keeping order."""
        aioresponses.get(
            CARS_URL, payload=[{"id": 1, "name": "a"}, {"id": 2, "name": "b"}]
        )

        result = await cars.list()

        assert [entity.identity for entity in result] == [1, 2]
        assert [entity.data["name"] for entity in result] == ["a", "b"]
        assert result[0].resource.url == URL(f"{CARS_URL}/1")
        assert len(sent_requests) == 1

    async def test_sends_args_as_query(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """List arguments become query parameters."""
        aioresponses.get(f"{CARS_URL}?brand=acme", payload=cars_payload("a"))

        result = await cars.list({"brand": "acme"})

        assert len(result) == 1
        assert result[0].brand == "Acme"

    async def test_empty_collection(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """An empty array yields no entities."""
        aioresponses.get(CARS_URL, payload=[])

        assert await cars.list() == []

    async def test_propagates_transport_errors(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Server errors reach the caller untranslated."""
        aioresponses.get(CARS_URL, status=500, reason="Internal Server Error")

        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await cars.list()

        assert exc_info.value.status == 500


class TestCreate:
    """Tests for EntityType.create."""

    async def test_binds_server_identity(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """The created entity is rebound to its new instance path."""
        aioresponses.post(CARS_URL, payload={"id": 7, "name": "x"})
        aioresponses.get(f"{CARS_URL}/7", payload={"id": 7, "name": "x"})
        aioresponses.patch(f"{CARS_URL}/7", payload={"id": 7, "name": "y"})

        entity = await cars.create({"name": "x"})

        assert entity.identity == 7
        assert entity.name == "x"
        call = aioresponses.requests[("POST", URL(CARS_URL))][0]
        assert call.kwargs["json"] == {"name": "x"}

        await entity.retrieve()
        await entity.update({"name": "y"})

        assert ("GET", URL(f"{CARS_URL}/7")) in aioresponses.requests
        assert ("PATCH", URL(f"{CARS_URL}/7")) in aioresponses.requests
        assert entity.name == "y"


class TestRetrieve:
    """Tests for Entity.retrieve."""

    async def test_hydrates_self(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Fetches the instance and merges the response into the entity."""
        aioresponses.get(f"{CARS_URL}/3", payload=car(car_id=3, name="Roadster"))
        entity = cars(3)

        result = await entity.retrieve()

        assert result is entity
        assert entity.name == "Roadster"
        assert entity.owner == {"id": 12, "name": "Test Owner"}

    async def test_get_shorthand(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """EntityType.get retrieves by identity."""
        aioresponses.get(f"{CARS_URL}/3", payload=car(car_id=3))

        entity = await cars.get(3)

        assert entity.identity == 3
        assert entity.brand == "Acme"

    async def test_without_identity_sends_nothing(
        self,
        cars: EntityType,
        aioresponses: aioresponses_cls,
        sent_requests: list[RawRequest],
    ) -> None:
        """Identity-less retrieve fails before any request."""
        with pytest.raises(NoIdentityError):
            await cars().retrieve()

        assert sent_requests == []
        assert aioresponses.requests == {}

    async def test_not_found(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """A 404 surfaces with its status."""
        aioresponses.get(f"{CARS_URL}/9", status=404, reason="Not Found")

        with pytest.raises(aiohttp.ClientResponseError) as exc_info:
            await cars(9).retrieve()

        assert exc_info.value.status == 404


class TestUpdate:
    """Tests for Entity.update."""

    async def test_patches_and_hydrates(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Sends a PATCH and merges the response."""
        url = f"{CARS_URL}/3"
        aioresponses.patch(url, payload={"id": 3, "name": "Renamed"})
        entity = cars(3).fill_in({"name": "Old", "wheels": 4})

        result = await entity.update({"name": "Renamed"})

        assert result is entity
        assert dict(entity.data) == {"id": 3, "name": "Renamed", "wheels": 4}
        call = aioresponses.requests[("PATCH", URL(url))][0]
        assert call.kwargs["json"] == {"name": "Renamed"}


class TestDelete:
    """Tests for Entity.delete."""

    async def test_deletes_and_keeps_state(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Reports success without clearing data or identity."""
        aioresponses.delete(f"{CARS_URL}/3", status=204)
        entity = cars(3).fill_in({"name": "x"})

        assert await entity.delete() is True

        assert entity.identity == 3
        assert dict(entity.data) == {"name": "x"}


class TestCall:
    """Tests for inner resource actions."""

    async def test_posts_to_instance_action(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Actions resolve below the instance path."""
        url = f"{CARS_URL}/3/repair-all"
        aioresponses.post(url, payload={"repaired": 4})

        result = await cars(3).call("repairAll", data={"force": True})

        assert result == {"repaired": 4}
        call = aioresponses.requests[("POST", URL(url))][0]
        assert call.kwargs["json"] == {"force": True}

    async def test_collection_action_with_get(
        self, cars: EntityType, aioresponses: aioresponses_cls
    ) -> None:
        """Identity-less entities address the action below the collection."""
        aioresponses.get(f"{CARS_URL}/repair-all?limit=2", payload=[])

        assert await cars().call("repair_all", method="get", params={"limit": 2}) == []

    async def test_unknown_action(self, cars: EntityType) -> None:
        """Unregistered actions fail before any request."""
        with pytest.raises(UnknownInnerResourceError):
            await cars(3).call("wash")


class TestListeners:
    """Tests for request listeners across operations."""

    async def test_one_report_per_call(
        self,
        cars: EntityType,
        aioresponses: aioresponses_cls,
        sent_requests: list[RawRequest],
    ) -> None:
        """Every outgoing call is reported once."""
        aioresponses.post(CARS_URL, payload={"id": 1})
        aioresponses.get(f"{CARS_URL}/1", payload={"id": 1})
        aioresponses.delete(f"{CARS_URL}/1", status=204)

        entity = await cars.create({"name": "x"})
        await entity.retrieve()
        await entity.delete()

        assert [(r.method, str(r.url)) for r in sent_requests] == [
            ("POST", CARS_URL),
            ("GET", f"{CARS_URL}/1"),
            ("DELETE", f"{CARS_URL}/1"),
        ]


async def test_unbound_type_opens_session_per_request(
    cars_type: EntityType, aioresponses: aioresponses_cls
) -> None:
    """Types without a shared session still work."""
    aioresponses.get(f"{CARS_URL}/1", payload={"id": 1, "name": "x"})

    entity = await cars_type.get(1)

    assert entity.name == "x"
