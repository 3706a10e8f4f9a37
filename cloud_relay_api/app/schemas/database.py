"""Schemas for provider databases and their mirror rows.

Provider bodies are untyped and forwarded as sent; mirror rows are typed.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class DatabaseCreate(BaseModel):
    """Common body of ``POST /databases/{engine}``.

    Engine-specific settings (``postgres_user``, ``redis_password``,
    ``mysql_root_password`` ...) are accepted as extra fields and
    forwarded unchanged.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    description: Any = None
    server_uuid: Any = None
    project_uuid: Any = None
    environment_name: Any = None
    image: Any = None


class DatabaseUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: Any = None
    description: Any = None
    is_public: Any = None
    public_port: Any = None


class UserCloudDatabaseCreate(BaseModel):
    database_uuid: Optional[str] = None
    type: Optional[str] = None
    public_port: Optional[int] = None
    external_db_url: Optional[str] = None
    internal_db_url: Optional[str] = None
    config: Any = None
    response: Any = None


class UserCloudDatabaseUpdate(UserCloudDatabaseCreate):
    pass
