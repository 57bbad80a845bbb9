"""Minimal REST client: resource registration, verbs and request events."""

import logging
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import quote

import aiohttp
from yarl import URL

from rest_entity.errors import UnknownInnerResourceError, UnsupportedEventError
from rest_entity.transport.events import REQUEST_EVENT, RawRequest

log = logging.getLogger(__name__)

type RequestHandler = Callable[[RawRequest], None]


class RestClient:
    """Root of a set of resources below a base URL.

    When no session is given, every request runs in its own short-lived
    ``aiohttp.ClientSession`` created from ``options``.
    """

    def __init__(
        self,
        base_url: str | URL,
        session: aiohttp.ClientSession | None = None,
        **options: Any,
    ) -> None:
        self.base_url = URL(base_url)
        self._session = session
        self._options = options
        self._resources: dict[str, Resource] = {}
        self._handlers: list[RequestHandler] = []

    def res(self, name: str) -> "Resource":
        """Register a top-level resource and return its collection handle."""
        if name not in self._resources:
            self._resources[name] = Resource(self, (name,))
        return self._resources[name]

    def __getitem__(self, name: str) -> "Resource":
        try:
            return self._resources[name]
        except KeyError:
            raise UnknownInnerResourceError(name, sorted(self._resources)) from None

    def on(self, event: str, handler: RequestHandler) -> None:
        """Subscribe to an event; only ``"request"`` is emitted."""
        if event != REQUEST_EVENT:
            raise UnsupportedEventError(
                f"Unsupported event '{event}', only '{REQUEST_EVENT}' is emitted"
            )
        self._handlers.append(handler)

    def url_for(self, path: tuple[str, ...]) -> URL:
        """Join escaped path segments onto the base URL."""
        url = self.base_url
        for segment in path:
            url = url.joinpath(quote(segment, safe=""), encoded=True)
        return url

    async def request(
        self,
        method: str,
        path: tuple[str, ...],
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            aiohttp.ClientResponseError: For non-2xx responses

        """
        raw = RawRequest(
            method=method.upper(),
            url=self.url_for(path),
            params=dict(params or {}),
            json=json,
        )
        for handler in self._handlers:
            handler(raw)

        log.debug("Sending request: method=%s, url=%s", raw.method, raw.url)

        if self._session is not None:
            return await self._send(self._session, raw)

        async with aiohttp.ClientSession(**self._options) as session:
            return await self._send(session, raw)

    async def _send(self, session: aiohttp.ClientSession, raw: RawRequest) -> Any:
        async with session.request(
            raw.method,
            raw.url,
            params=raw.params or None,
            json=raw.json,
            headers=raw.headers or None,
        ) as response:
            response.raise_for_status()
            log.debug("Received response: status=%s, url=%s", response.status, raw.url)
            if raw.method == "DELETE":
                return True
            return await response.json(content_type=None)


class Resource:
    """Handle on one path below a RestClient.

    Calling a collection handle with an identity narrows it to the instance
    path; registered sub-resources are reachable by item access.
    """

    def __init__(self, client: RestClient, path: tuple[str, ...]) -> None:
        self._client = client
        self.path = path
        self._children: dict[str, Resource] = {}

    def __repr__(self) -> str:
        return f"<Resource {self.url}>"

    @property
    def url(self) -> URL:
        """Absolute URL of this resource."""
        return self._client.url_for(self.path)

    def res(self, name: str) -> "Resource":
        """Register a nested resource and return its handle."""
        if name not in self._children:
            self._children[name] = Resource(self._client, (*self.path, name))
        return self._children[name]

    def __getitem__(self, name: str) -> "Resource":
        try:
            return self._children[name]
        except KeyError:
            raise UnknownInnerResourceError(name, sorted(self._children)) from None

    def __call__(self, identity: int | str | None = None) -> "Resource":
        if identity is None:
            return self
        return self._rebase((*self.path, str(identity)))

    def _rebase(self, path: tuple[str, ...]) -> "Resource":
        resource = Resource(self._client, path)
        for name, child in self._children.items():
            resource._children[name] = child._rebase((*path, name))
        return resource

    async def request(
        self,
        method: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send a request with any HTTP method to this resource."""
        return await self._client.request(method, self.path, params=params, json=json)

    async def get(self, params: Mapping[str, Any] | None = None) -> Any:
        """Fetch this resource, ``params`` becoming the query string."""
        return await self.request("GET", params=params)

    async def post(self, data: Any = None) -> Any:
        """Send ``data`` as a JSON POST body."""
        return await self.request("POST", json=data)

    async def patch(self, data: Any = None) -> Any:
        """Send ``data`` as a JSON PATCH body."""
        return await self.request("PATCH", json=data)

    async def delete(self) -> Any:
        """Delete this resource; True on success."""
        return await self.request("DELETE")
