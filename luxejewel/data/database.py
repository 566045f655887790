# luxejewel/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from luxejewel.utils.settings import DATABASE_URL
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


def build_engine(url: str):
    #sqlite (tests, local dev): in-memory db must share one connection
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


engine = build_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(bind=None):
    #models must be imported to register in Base.metadata
    import luxejewel.data.models  # noqa: F401

    bind = bind or engine
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    Base.metadata.create_all(bind=bind)


def drop_tables(bind=None):
    import luxejewel.data.models  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)
