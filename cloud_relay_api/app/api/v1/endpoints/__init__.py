"""
Endpoint subpackage for API v1.

Each module defines an APIRouter for one family (resources,
applications, services, servers, databases and the two mirror
families).  The routers are aggregated in ``router.py``.
"""
