"""Base model configuration for settings records."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Immutable base model; arbitrary types allow callables and sessions."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
