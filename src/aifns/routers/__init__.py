"""API routers for aifns endpoints.

This package contains all FastAPI routers organized by feature area.
"""

__all__: list[str] = []
