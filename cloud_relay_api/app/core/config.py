"""
Simple configuration management.

The ``Settings`` dataclass holds every value the relay reads from the
process environment.  It is built once by :meth:`Settings.from_env`
when the application is created and stored on ``app.state``; handlers
and clients receive it from there instead of reading ``os.environ``
themselves.  Tests construct ``Settings`` directly with the values
they need.
"""

import os
from dataclasses import dataclass


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    project_name: str = "Cloud Relay API"
    api_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str = ""

    # Secret used to verify the HS256 tokens presented by the internal
    # client.  Must match the secret of the service that issues them.
    jwt_secret: str = "change_me"
    access_token_expire_minutes: int = 60 * 24

    # Provider credentials.  An empty ``coolify_api_key`` is allowed at
    # start-up; every relay call then fails with a configuration error
    # before any network I/O.
    coolify_api_key: str = ""
    coolify_base_url: str = "https://app.coolify.io"

    # Placement used when a create request does not name its own project,
    # server or environment.
    coolify_project_uuid: str = "zgcogowo04ww0k8cc4gc4wsg"
    coolify_server_uuid: str = "b08o4o4ck8wo4kc0k8w848o8"
    coolify_environment_name: str = "production"

    # Path to the SQLite database holding the mirror tables.  Relative
    # paths are resolved against the project root by ``core.db``.
    database_url: str = "cloud_relay.db"

    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        defaults = cls()
        return cls(
            project_name=os.getenv("PROJECT_NAME", defaults.project_name),
            api_version=os.getenv("API_VERSION", defaults.api_version),
            debug=_env_bool("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            log_file=os.getenv("LOG_FILE", defaults.log_file),
            jwt_secret=os.getenv("JWT_SECRET", defaults.jwt_secret),
            access_token_expire_minutes=int(
                os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(defaults.access_token_expire_minutes))
            ),
            coolify_api_key=os.getenv("COOLIFY_API_KEY", ""),
            coolify_base_url=os.getenv("COOLIFY_BASE_URL") or defaults.coolify_base_url,
            coolify_project_uuid=os.getenv("COOLIFY_PROJECT_UUID", defaults.coolify_project_uuid),
            coolify_server_uuid=os.getenv("COOLIFY_SERVER_UUID", defaults.coolify_server_uuid),
            coolify_environment_name=os.getenv(
                "COOLIFY_ENVIRONMENT_NAME", defaults.coolify_environment_name
            ),
            database_url=os.getenv("DATABASE_URL", defaults.database_url),
            host=os.getenv("HOST", defaults.host),
            port=int(os.getenv("PORT", str(defaults.port))),
        )
