"""
Response envelope shared by every endpoint.

Endpoints return an :class:`Envelope` and are declared with
``response_model_exclude_unset=True``, so only the keys a handler set
appear in the JSON.  ``database_record`` is set explicitly to ``None``
when a mirror write did not happen.
"""

from typing import Any, Optional

from pydantic import BaseModel


class Envelope(BaseModel):
    success: bool
    data: Any = None
    error: Optional[str] = None
    database_record: Any = None
    database_deleted: Optional[bool] = None
    message: Optional[str] = None
