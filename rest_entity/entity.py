"""Entity types and instances: resource binding, hydration and CRUD."""

import logging
import re
from collections.abc import AsyncGenerator, Mapping, Sequence
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Self

import aiohttp
from pydantic import TypeAdapter, ValidationError

from rest_entity.errors import NoIdentityError
from rest_entity.inventory import operation_names
from rest_entity.models.config import EntityConfig
from rest_entity.naming import to_segment
from rest_entity.transport.client import Resource, RestClient

log = logging.getLogger(__name__)

type Identity = int | str

_DATETIME = TypeAdapter(datetime)
# Numeric strings would otherwise be read as unix timestamps.
_NUMERIC = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def coerce_datetime(value: Any) -> Any:
    """Return ``value`` as a datetime if it is an ISO 8601 string."""
    if not isinstance(value, str) or _NUMERIC.fullmatch(value.strip()):
        return value
    try:
        return _DATETIME.validate_python(value)
    except ValidationError:
        return value


class Entity:
    """A single entity backed by a REST resource.

    Server fields live in ``data`` and are readable as attributes or items.
    They are only changed through ``fill_in()``, which every network
    operation uses to merge responses.
    """

    def __init__(
        self, entity_type: "EntityType", identity: Identity | None = None
    ) -> None:
        self._type = entity_type
        self._identity = identity
        self._data: dict[str, Any] = {}
        self._resource = entity_type.bind(identity)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._resource.url}>"

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(
                f"'{type(self).__name__}' entity has no field '{name}'"
            ) from None

    def __setattr__(self, name: str, value: Any) -> None:
        if not name.startswith("_"):
            raise AttributeError(
                f"Cannot set '{name}': entity fields change through fill_in()"
            )
        super().__setattr__(name, value)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    @property
    def entity_type(self) -> "EntityType":
        """Entity type this instance belongs to."""
        return self._type

    @property
    def identity(self) -> Identity | None:
        """Identity bound to this entity, None before it is known."""
        return self._identity

    @property
    def data(self) -> Mapping[str, Any]:
        """Read-only view of the server-supplied fields."""
        return MappingProxyType(self._data)

    @property
    def resource(self) -> Resource:
        """Transport handle for this entity's current path."""
        return self._resource

    def fill_in(self, raw: Mapping[str, Any]) -> Self:
        """Merge a raw payload into this entity and return it.

        Keys naming an operation of the entity class are skipped. When the
        payload carries the identity field and the entity has no identity
        yet, the entity is rebound to its instance path.
        """
        config = self._type.config
        if config.hooks.before_fill_in is not None:
            config.hooks.before_fill_in(self, raw)

        operations = operation_names(type(self))
        for key, value in raw.items():
            if key in operations:
                log.debug("Skipping field %r that names an operation", key)
                continue
            self._data[key] = coerce_datetime(value) if config.coerce_dates else value

        if (identity := self._data.get(config.identity_field)) is not None:
            self._bind_identity(identity)

        if config.hooks.after_fill_in is not None:
            config.hooks.after_fill_in(self, raw)
        return self

    def _bind_identity(self, identity: Identity) -> None:
        if self._identity is None:
            self._identity = identity
            self._resource = self._type.bind(identity)
        elif str(identity) != str(self._identity):
            log.warning(
                "Ignoring identity change for %s: bound=%s, received=%s",
                self._type.config.resource_name,
                self._identity,
                identity,
            )

    def _instance_resource(self, operation: str) -> Resource:
        if self._identity is None:
            raise NoIdentityError(operation, self._type.config.resource_name)
        return self._resource

    async def retrieve(self) -> Self:
        """Fetch the entity from its instance path."""
        resource = self._instance_resource("retrieve")
        return self.fill_in(await resource.get())

    async def update(self, data: Mapping[str, Any]) -> Self:
        """Send a partial update and merge the response."""
        resource = self._instance_resource("update")
        return self.fill_in(await resource.patch(data))

    async def delete(self) -> Any:
        """Delete the entity on the server.

        The local data and identity are left as they are; callers should
        discard the instance afterwards.
        """
        resource = self._instance_resource("delete")
        return await resource.delete()

    async def call(
        self,
        action: str,
        method: str = "post",
        data: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Invoke a registered inner resource of this entity.

        Identity-less entities address the action below the collection.

        Raises:
            UnknownInnerResourceError: If ``action`` was never registered

        """
        resource = self._resource[to_segment(action)]
        return await resource.request(method, params=params, json=data)


@dataclass(frozen=True, kw_only=True)
class EntityType:
    """A configured mapping from an entity class to one REST resource.

    Calling the type creates an entity, optionally bound to an identity.
    """

    config: EntityConfig
    entity_class: type[Entity] = Entity
    session: aiohttp.ClientSession | None = field(default=None, repr=False)

    def __call__(self, identity: Identity | None = None) -> Entity:
        return self.entity_class(self, identity)

    @property
    def name(self) -> str:
        """Resource name of this type."""
        return self.config.resource_name

    def bind(self, identity: Identity | None = None) -> Resource:
        """Return a transport handle for the collection or one instance."""
        client = RestClient(
            self.config.base_address,
            session=self.session,
            **self.config.transport_options,
        )
        for listener in self.config.request_listeners:
            client.on("request", listener)

        resource = client.res(self.config.resource_path)
        for segment in self.config.inner_resources:
            resource.res(to_segment(segment))

        handle = resource(identity)
        log.debug("Bound %s to %s", self.config.resource_name, handle.url)
        return handle

    def with_session(self, session: aiohttp.ClientSession) -> "EntityType":
        """Return a copy of this type sending requests through ``session``."""
        return replace(self, session=session)

    @asynccontextmanager
    async def connect(self) -> AsyncGenerator["EntityType", None]:
        """Open a shared session for the lifetime of the context."""
        async with aiohttp.ClientSession(**self.config.transport_options) as session:
            yield self.with_session(session)

    def from_data(self, raw: Mapping[str, Any]) -> Entity:
        """Create an entity from an initial payload without a request."""
        return self().fill_in(raw)

    async def get(self, identity: Identity) -> Entity:
        """Fetch a single entity by identity."""
        return await self(identity).retrieve()

    async def create(self, data: Mapping[str, Any]) -> Entity:
        """Create an entity on the server and return it hydrated."""
        entity = self()
        return entity.fill_in(await entity.resource.post(data))

    async def list(self, args: Mapping[str, Any] | None = None) -> Sequence[Entity]:
        """Fetch the collection, ``args`` being sent as query parameters."""
        payload = await self.bind().get(args or {})
        log.debug("Listed %d %s entities", len(payload), self.config.resource_name)
        return [self.from_data(raw) for raw in payload]
