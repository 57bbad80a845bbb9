"""Exceptions raised by the entity mapping layer.

Transport failures are not part of this hierarchy: aiohttp errors reach the
caller untranslated so status codes stay available.
"""


class RestEntityError(Exception):
    """Base class for all rest_entity errors."""


class ConfigurationError(RestEntityError):
    """Raised by EntityBuilder.build() for an incomplete configuration."""


class MissingBaseAddressError(ConfigurationError):
    """Raised when no base address was configured."""

    def __init__(self) -> None:
        super().__init__("Cannot build an entity type without a base address")


class MissingResourceError(ConfigurationError):
    """Raised when no resource name was configured."""

    def __init__(self) -> None:
        super().__init__("Cannot build an entity type without a resource name")


class NoIdentityError(RestEntityError):
    """Raised when an instance-level operation runs on an identity-less entity."""

    def __init__(self, operation: str, resource_name: str) -> None:
        super().__init__(
            f"Cannot {operation} a '{resource_name}' entity that has no identity"
        )
        self.operation = operation
        self.resource_name = resource_name


class UnknownInnerResourceError(RestEntityError, KeyError):
    """Raised when accessing a sub-resource that was never registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        super().__init__(
            f"Resource '{name}' is not registered. Available resources: {available}"
        )
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class UnsupportedEventError(RestEntityError, ValueError):
    """Raised when subscribing to an event the transport never emits."""
