from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from ..core.config import settings


class Base(DeclarativeBase):
    pass


def make_engine(url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    return create_engine(
        url or settings.store_url,
        echo=settings.database_echo if echo is None else echo,
    )


def make_session_maker(engine: Engine) -> sessionmaker:
    return sessionmaker(engine, expire_on_commit=False)


def create_db_and_tables(engine: Engine) -> None:
    # model modules must be imported so their tables are registered
    from . import kv_entry  # noqa: F401

    Base.metadata.create_all(engine)
