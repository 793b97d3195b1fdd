from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from stockkeeper.database.engine import engine


def build_sessionmaker(bind: Engine) -> sessionmaker:
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
    )


SessionLocal = build_sessionmaker(engine)
