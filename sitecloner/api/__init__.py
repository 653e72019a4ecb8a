"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from sitecloner.api import app

    uvicorn sitecloner.api:app --reload
"""

from sitecloner.api.app import app

__all__ = ["app"]
