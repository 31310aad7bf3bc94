from __future__ import annotations

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from bilemo.core.config import DATABASE_URL

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def commit_or_rollback(db: Session) -> None:
    """Flush + commit; se falhar desfaz a unit of work inteira e propaga."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def get_db() -> Iterator[Session]:
    """Uma sessão (unit of work) por request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
