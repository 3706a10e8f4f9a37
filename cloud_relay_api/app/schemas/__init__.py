"""
Pydantic schema definitions for API payloads.

Request bodies accept the fields the relay itself needs and pass any
other fields through to the provider untouched.  Every response uses
the :class:`~cloud_relay_api.app.schemas.envelope.Envelope` shape.
"""
