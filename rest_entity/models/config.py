"""Settings of a single entity type."""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import Field

from rest_entity.models.base import Model
from rest_entity.naming import to_segment
from rest_entity.transport.events import RawRequest

type RequestListener = Callable[[RawRequest], None]
# Called with the entity being hydrated and the raw payload.
type HydrationHook = Callable[[Any, Mapping[str, Any]], None]


class HydrationHooks(Model):
    """Optional callbacks run around Entity.fill_in()."""

    before_fill_in: HydrationHook | None = None
    after_fill_in: HydrationHook | None = None


class EntityConfig(Model):
    """Immutable configuration of an entity type."""

    base_address: str = Field(..., min_length=1, description="Root URL of the API")
    resource_name: str = Field(
        ..., min_length=1, description="Primary path segment of the resource"
    )
    inner_resources: tuple[str, ...] = Field(
        default=(), description="Nested segments registered under the resource"
    )
    request_listeners: tuple[RequestListener, ...] = Field(
        default=(), description="Callbacks fired once per outgoing request"
    )
    transport_options: Mapping[str, Any] = Field(
        default_factory=dict,
        description="Keyword arguments forwarded to aiohttp.ClientSession",
    )
    hooks: HydrationHooks = Field(default_factory=HydrationHooks)
    identity_field: str = Field(
        default="id", min_length=1, description="Payload key holding the identity"
    )
    coerce_dates: bool = Field(
        default=False, description="Turn ISO 8601 strings into datetime values"
    )

    @property
    def resource_path(self) -> str:
        """Path segment of the primary resource."""
        return to_segment(self.resource_name)
