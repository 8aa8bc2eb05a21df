# restaurant_pos/core.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from config import DATABASE_URL

# -------------------- Declarative Base --------------------
Base = declarative_base()  # shared by all restaurant models


def make_engine(database_url: str):
    """Return an engine for the given URL (SQLite needs cross-thread access for FastAPI)."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        echo=False,
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args
    )


# -------------------- Engine & Session --------------------
engine = make_engine(DATABASE_URL)
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True
)
