# jobboard/database.py
from sqlalchemy import create_engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from jobboard.config import DATABASE_URL, SQL_ECHO


def make_engine(database_url: str = DATABASE_URL, echo: bool = SQL_ECHO):
    url = make_url(database_url)

    kwargs = {"echo": echo, "pool_pre_ping": True}  # avoid stale connections on resume
    if url.drivername.startswith("sqlite"):
        # Store calls run in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
        # One shared connection, otherwise every session gets its own empty db
        if url.database in (None, "", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


engine = make_engine()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
