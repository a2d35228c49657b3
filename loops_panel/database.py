"""SQLAlchemy engine and session factory"""
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from loops_panel.config import get_settings

settings = get_settings()


def _engine_kwargs(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # A single shared connection, otherwise every session sees an empty database
        kwargs["poolclass"] = StaticPool
    return kwargs


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)

Base = declarative_base()


async def get_db():
    """Request-scoped session.

    Declared async so FastAPI runs it on the event loop, next to the job
    runner, instead of in the threadpool.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    from loops_panel import models  # noqa: F401  registers tables with Base

    Base.metadata.create_all(bind=engine)
