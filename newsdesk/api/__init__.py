"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from newsdesk.api import app

    uvicorn newsdesk.api:app --reload
"""

from newsdesk.api.app import app

__all__ = ["app"]
