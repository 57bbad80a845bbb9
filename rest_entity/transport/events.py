"""Events emitted by the transport client."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from yarl import URL

REQUEST_EVENT = "request"


@dataclass(kw_only=True)
class RawRequest:
    """An outgoing request, handed to request listeners before it is sent.

    Listeners may add or change ``headers``; the request is sent with
    whatever headers are present once every listener has run.
    """

    method: str
    url: URL
    params: Mapping[str, Any] = field(default_factory=dict)
    json: Any = None
    headers: dict[str, str] = field(default_factory=dict)
