from shopdesk.database.base import Base
from shopdesk.database.engine import engine, init_db
from shopdesk.database.session import SessionLocal, get_db
from shopdesk.database.transaction import atomic

__all__ = ["Base", "SessionLocal", "atomic", "engine", "get_db", "init_db"]
