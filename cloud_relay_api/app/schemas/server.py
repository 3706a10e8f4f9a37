"""Schemas for provider servers.

Fields are forwarded unchanged and left untyped; the provider validates them.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ServerCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Any = None
    description: Any = None
    ip: Any = None
    port: Any = None
    user: Any = None
    private_key_uuid: Any = None
    is_build_server: Any = None
    instant_validate: Any = None
    proxy_type: Any = None


class ServerUpdate(ServerCreate):
    pass
