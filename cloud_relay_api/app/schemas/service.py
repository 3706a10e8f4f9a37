"""Schemas for provider services, their environment variables and mirror rows.

Bodies forwarded to the provider leave their fields untyped so the
provider, not the relay, decides what a valid value is.  Mirror rows are
typed as they are stored.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ServiceCreate(BaseModel):
    """Body of ``POST /services``.

    ``type`` and ``name`` are required; their absence is reported by
    the handler with the relay's own error message, so they are
    optional here.
    """

    model_config = ConfigDict(extra="allow")

    type: Any = Field(None, description="Provider service template, e.g. ``plausible``")
    name: Any = None
    description: Any = None
    project_uuid: Any = None
    environment_name: Any = None
    environment_uuid: Any = None
    server_uuid: Any = None
    destination_uuid: Any = None
    instant_deploy: Any = None
    docker_compose_raw: Any = None
    cloud_services_id: Any = Field(None, description="Catalog entry the service was created from")
    user_id: Any = Field(None, description="Owner, used only when the token carries none")
    env: Any = None


class ServiceUpdate(BaseModel):
    """Body of ``PATCH /services/{id}``; forwarded to the provider as sent."""

    model_config = ConfigDict(extra="allow")

    type: Any = None
    name: Any = None
    description: Any = None
    env: Any = None


class EnvCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: Any = None
    value: Any = None
    is_preview: Any = None
    is_literal: Any = None
    is_multiline: Any = None
    is_shown_once: Any = None


class EnvUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    key: Any = None
    value: Any = None


class UserCloudServiceUpdate(BaseModel):
    """Columns of a mirror row that may be edited directly."""

    service_id: Optional[str] = None
    domain: Optional[str] = None
    type: Optional[str] = None
    config: Any = None
    response: Any = None
    env: Any = None
    cloud_services_id: Optional[str] = None
