"""Configuration model for building namespaced maps from plain data.

Accepts dicts or JSON (``MapConfig.model_validate_json``), so a map's
endpoint and namespace can travel between processes and be reopened.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from namespaced_map.stores.redis import DEFAULT_PORT


class MapConfig(BaseModel):
    """Endpoint, namespace and lifecycle settings for one map.

    Attributes:
        host: Store host name.
        port: Store port.
        token: Namespace token to reopen; a fresh one is generated when omitted.
        persist: Keep the namespace in the store when the map is closed.
        db: Redis logical database index.
        socket_timeout: Seconds before a store call gives up, or ``None`` to block.
    """

    host: str = "localhost"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    token: str | None = Field(default=None, min_length=1)
    persist: bool = False
    db: int = Field(default=0, ge=0)
    socket_timeout: float | None = Field(default=None, gt=0)

    def redis_options(self) -> dict[str, Any]:
        """Extra keyword arguments for ``redis.Redis``."""
        options: dict[str, Any] = {"db": self.db}
        if self.socket_timeout is not None:
            options["socket_timeout"] = self.socket_timeout
        return options
