"""Database engine and session factory.

SQLite and Postgres are both supported. Sale processing relies on the
database to serialize concurrent writers on the same inventory row:
- Postgres: SELECT ... FOR UPDATE row locks (see sale_service)
- SQLite: every transaction starts with BEGIN IMMEDIATE, taking the write
  lock up front so two checkouts cannot both read the same stock level
"""
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from pharmacy_pos.core.config import settings


def _use_immediate_transactions(engine: Engine) -> None:
    # pysqlite's own BEGIN handling is deferred and skips SAVEPOINT support;
    # take over transaction control and emit BEGIN IMMEDIATE ourselves.
    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str, **kwargs) -> Engine:
    if database_url.startswith("sqlite"):
        # SQLite: NullPool for thread-safety, busy timeout so writers queue instead of failing
        engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": 30},
            poolclass=NullPool,
            **kwargs,
        )
        _use_immediate_transactions(engine)
        return engine

    # PostgreSQL/MySQL: QueuePool with sensible defaults
    return create_engine(
        database_url,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=3600,
        pool_pre_ping=True,
        **kwargs,
    )


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
