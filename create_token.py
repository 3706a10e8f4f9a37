"""Print an access token for a user id, for local testing.

The token lifetime defaults to ``ACCESS_TOKEN_EXPIRE_MINUTES``; pass a
number of minutes to override it.

Usage:
    python create_token.py <user_id> [minutes]
"""
import sys

from cloud_relay_api.app.core.config import Settings
from cloud_relay_api.app.core.security import create_access_token

settings = Settings.from_env()
user_id = sys.argv[1] if len(sys.argv) > 1 else "local-admin"
minutes = int(sys.argv[2]) if len(sys.argv) > 2 else settings.access_token_expire_minutes
token = create_access_token({"u": user_id}, settings.jwt_secret, expires_delta=minutes * 60)
print(token)
