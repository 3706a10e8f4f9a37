"""
Application package initializer.

The relay is split by concern: ``clients`` talks to the provider,
``services`` holds the handler logic and the local mirror stores,
``schemas`` the request and response models and ``api`` the versioned
routers.  Each provider family exposes its router from
``api/v1/endpoints``.
"""

from .main import app  # noqa: F401
