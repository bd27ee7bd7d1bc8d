from collections.abc import Generator

from fastapi import Header
from sqlalchemy.orm import Session

from timetable_portal.db.session import SessionLocal


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_actor(x_operator: str | None = Header(default=None)) -> str | None:
    """Name recorded in the activity log. Identity is asserted upstream."""
    if x_operator is None:
        return None
    cleaned = x_operator.strip()
    return cleaned[:200] or None
