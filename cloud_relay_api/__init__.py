"""
Top-level package for the Cloud Relay API.

Marks ``cloud_relay_api`` as a package so modules under ``app`` can be
imported with fully qualified names such as
``cloud_relay_api.app.main``.  All functionality lives in ``app``.
"""

__all__ = []
