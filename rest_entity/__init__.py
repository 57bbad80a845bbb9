"""Map entity types onto REST API resources."""

from rest_entity.builder import EntityBuilder
from rest_entity.entity import Entity, EntityType
from rest_entity.errors import (
    ConfigurationError,
    MissingBaseAddressError,
    MissingResourceError,
    NoIdentityError,
    RestEntityError,
    UnknownInnerResourceError,
    UnsupportedEventError,
)
from rest_entity.models.config import EntityConfig, HydrationHooks
from rest_entity.naming import to_hyphenated
from rest_entity.transport import RawRequest, Resource, RestClient

__all__ = [
    "ConfigurationError",
    "Entity",
    "EntityBuilder",
    "EntityConfig",
    "EntityType",
    "HydrationHooks",
    "MissingBaseAddressError",
    "MissingResourceError",
    "NoIdentityError",
    "RawRequest",
    "Resource",
    "RestClient",
    "RestEntityError",
    "UnknownInnerResourceError",
    "UnsupportedEventError",
    "to_hyphenated",
]
