from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool

from studyspace.core.config import settings


def build_engine(database_url: str):
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return create_engine(database_url, pool_pre_ping=True)

    kwargs = {"connect_args": {"check_same_thread": False}}
    # in-memory SQLite: una sola conexión compartida, si no cada sesión ve una DB vacía
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
    return create_engine(database_url, **kwargs)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(DeclarativeBase):
    pass


# Dependency para FastAPI: inyecta Session en endpoints
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
