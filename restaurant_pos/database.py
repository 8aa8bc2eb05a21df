# restaurant_pos/database.py
import logging
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from restaurant_pos.core import Base, engine, SessionLocal
from config import SEED_DEFAULT_USERS

logger = logging.getLogger("database")


# -------------------- Initialize DB --------------------
def init_db(bind=None, session_factory=None):
    """Create all tables and seed the initial accounts when none exist."""
    # just import models so they register with Base
    from restaurant_pos.models import models  # noqa: F401
    from restaurant_pos.user_management import insert_initial_users_if_needed

    bind = bind or engine
    session_factory = session_factory or SessionLocal

    Base.metadata.create_all(bind=bind)
    logger.info("✅ Database tables created or verified successfully.")

    if SEED_DEFAULT_USERS:
        db = session_factory()
        try:
            insert_initial_users_if_needed(db)
        finally:
            db.close()


# -------------------- Dependency for FastAPI --------------------
def get_db():
    """Yield a DB session for FastAPI routes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_500(db: Session, action: str):
    """Commit the session; on failure roll back and surface `Failed to <action>: ...`."""
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"❌ Failed to {action}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}: {e}")
