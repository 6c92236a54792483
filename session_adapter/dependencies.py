"""FastAPI dependencies for the session store."""
from fastapi import Depends
from sqlalchemy.orm import Session as DBSession

from session_adapter.adapters import SQLAlchemyAdapter
from session_adapter.database import get_db
from session_adapter.models import Session, User


def get_session_adapter(db: DBSession = Depends(get_db)) -> SQLAlchemyAdapter:
    """
    Build an adapter over the request's database session.

    The adapter lives as long as the request; override get_db to point it
    at another database.
    """
    return SQLAlchemyAdapter(db, Session, User)
