"""aiohttp transport client used by entity types."""

from rest_entity.transport.client import Resource, RestClient
from rest_entity.transport.events import REQUEST_EVENT, RawRequest

__all__ = ["REQUEST_EVENT", "RawRequest", "Resource", "RestClient"]
