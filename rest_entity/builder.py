"""Fluent assembly of entity types."""

import logging
from collections.abc import Iterable
from typing import Any, Self

from rest_entity.entity import Entity, EntityType
from rest_entity.errors import MissingBaseAddressError, MissingResourceError
from rest_entity.inventory import inner_resources_for
from rest_entity.models.config import (
    EntityConfig,
    HydrationHook,
    HydrationHooks,
    RequestListener,
)

log = logging.getLogger(__name__)


class EntityBuilder:
    """Collect entity settings through chained calls, then build a type.

    Example:
        >>> builder = EntityBuilder().set_base_address("http://cars.test/api")
        >>> Car = builder.set_resource_name("cars").build()

    A builder can be reused; every ``build()`` takes a snapshot, so later
    changes never reach types that were already built.
    """

    def __init__(self) -> None:
        self._base_address: str | None = None
        self._resource_name: str | None = None
        self._inner_resources: list[str] = []
        self._request_listeners: list[RequestListener] = []
        self._transport_options: dict[str, Any] = {}
        self._hooks = HydrationHooks()
        self._identity_field = "id"
        self._coerce_dates = False
        self._entity_class: type[Entity] = Entity

    def set_base_address(self, url: str) -> Self:
        """Set the API root, e.g. ``http://cars.test/api`` for ``.../api/cars``."""
        self._base_address = url
        return self

    def set_resource_name(self, name: str) -> Self:
        """Set the resource path segment, e.g. ``cars``."""
        self._resource_name = name
        return self

    def add_inner_resource(self, segment: str) -> Self:
        """Register a nested resource reachable as ``.../cars/<segment>``."""
        self._inner_resources.append(segment)
        return self

    def set_inner_resources(self, segments: Iterable[str]) -> Self:
        """Replace the nested resources."""
        self._inner_resources = list(segments)
        return self

    def add_inner_resources_from(self, entity_class: type[Entity]) -> Self:
        """Register one nested resource per custom operation of a subclass."""
        for segment in inner_resources_for(entity_class, Entity):
            if segment not in self._inner_resources:
                self._inner_resources.append(segment)
        return self

    def add_request_listener(self, listener: RequestListener) -> Self:
        """Add a callback run with every outgoing request, in order added."""
        self._request_listeners.append(listener)
        return self

    def set_transport_options(self, **options: Any) -> Self:
        """Set keyword arguments for the aiohttp session."""
        self._transport_options = dict(options)
        return self

    def set_hooks(
        self,
        before: HydrationHook | None = None,
        after: HydrationHook | None = None,
    ) -> Self:
        """Set callbacks run before and after every fill_in()."""
        self._hooks = HydrationHooks(before_fill_in=before, after_fill_in=after)
        return self

    def set_identity_field(self, name: str) -> Self:
        """Set the payload field whose value becomes the identity."""
        self._identity_field = name
        return self

    def coerce_dates(self, enabled: bool = True) -> Self:
        """Turn ISO 8601 strings in payloads into datetime values."""
        self._coerce_dates = enabled
        return self

    def set_entity_class(self, entity_class: type[Entity]) -> Self:
        """Use an Entity subclass for the instances of the built type."""
        if not issubclass(entity_class, Entity):
            raise TypeError(f"{entity_class!r} is not an Entity subclass")
        self._entity_class = entity_class
        return self

    def build(self) -> EntityType:
        """Build an entity type from the current settings.

        Raises:
            MissingResourceError: If no resource name was set
            MissingBaseAddressError: If no base address was set

        """
        if not self._resource_name:
            raise MissingResourceError()
        if not self._base_address:
            raise MissingBaseAddressError()

        config = EntityConfig(
            base_address=self._base_address,
            resource_name=self._resource_name,
            inner_resources=tuple(self._inner_resources),
            request_listeners=tuple(self._request_listeners),
            transport_options=dict(self._transport_options),
            hooks=self._hooks,
            identity_field=self._identity_field,
            coerce_dates=self._coerce_dates,
        )
        log.debug(
            "Built entity type: resource=%s, base_address=%s, inner_resources=%s",
            config.resource_name,
            config.base_address,
            config.inner_resources,
        )
        return EntityType(config=config, entity_class=self._entity_class)
