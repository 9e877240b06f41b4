from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session

from .settings import settings

IN_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")


def make_engine(url: str, echo: bool = False):
    if url in IN_MEMORY_URLS:
        # a single shared connection, otherwise every session sees an empty database
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo, connect_args={"check_same_thread": False})
    return create_engine(url, echo=echo)


engine = make_engine(settings.database_url, echo=settings.DB_ECHO)

def init_db():
    # register every table on the metadata before creating them
    from feedback_portal import models  # noqa: F401
    SQLModel.metadata.create_all(engine)

def get_db():
    with Session(engine) as session:
        yield session
