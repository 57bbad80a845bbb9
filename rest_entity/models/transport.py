"""Transport settings accepted from JSON input."""

from collections.abc import Mapping
from typing import Any

import aiohttp
from pydantic import Field, PositiveFloat

from rest_entity.models.base import Model


class TransportSettings(Model):
    """Session settings for the aiohttp transport."""

    headers: Mapping[str, str] = Field(
        default_factory=dict, description="Headers sent with every request"
    )
    timeout: PositiveFloat | None = Field(
        default=None, description="Total timeout per request in seconds"
    )

    def to_session_options(self) -> dict[str, Any]:
        """Keyword arguments for aiohttp.ClientSession."""
        options: dict[str, Any] = {}
        if self.headers:
            options["headers"] = dict(self.headers)
        if self.timeout is not None:
            options["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
        return options
