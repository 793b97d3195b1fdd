from stockkeeper.database.base import Base
from stockkeeper.database.engine import build_engine, engine
from stockkeeper.database.session import SessionLocal, build_sessionmaker

__all__ = ["Base", "SessionLocal", "build_engine", "build_sessionmaker", "engine"]
