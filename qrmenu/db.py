import copy
import logging
import os
import re
from contextlib import asynccontextmanager
from typing import Any, Dict, List, NamedTuple, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from qrmenu.core.config import Settings
from qrmenu.models.base import Base

log = logging.getLogger(__name__)

# A "?" outside of a quoted SQL literal
_PLACEHOLDER = re.compile(r"'(?:[^']|'')*'|\?")


class RunResult(NamedTuple):
    last_insert_id: Optional[int]
    changes: int


def bind_positional(sql: str, params) -> tuple:
    """Rewrite ``?`` placeholders to ``:p0, :p1, ...`` and pair them with ``params``."""
    slots = []

    def _swap(match):
        token = match.group(0)
        if token != "?":
            return token
        slots.append(f"p{len(slots)}")
        return f":{slots[-1]}"

    named = _PLACEHOLDER.sub(_swap, sql)
    if len(slots) != len(params):
        raise ValueError(f"Statement expects {len(slots)} parameter(s), got {len(params)}")
    return text(named), dict(zip(slots, params))


class Database:
    """
    Prepared-statement style storage gateway.

    ``get`` returns one row as a plain dict (or ``None``), ``all`` a list of
    dicts and ``run`` a :class:`RunResult`. Statements use ``?`` positional
    placeholders. Construct once at startup and pass it down; inside
    ``async with db.transaction() as tx`` every call shares one connection.
    """

    backend = "sql"

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._conn: Optional[AsyncConnection] = None

    @asynccontextmanager
    async def _connection(self, write: bool = False):
        if self._conn is not None:
            yield self._conn
            return
        ctx = self.engine.begin() if write else self.engine.connect()
        async with ctx as conn:
            yield conn

    @asynccontextmanager
    async def transaction(self):
        if self._conn is not None:
            yield self
            return
        async with self.engine.begin() as conn:
            bound = copy.copy(self)
            bound._conn = conn
            yield bound

    async def get(self, sql: str, *params) -> Optional[Dict[str, Any]]:
        stmt, bound = bind_positional(sql, params)
        async with self._connection() as conn:
            result = await conn.execute(stmt, bound)
            row = result.mappings().first()
        return dict(row) if row is not None else None

    async def all(self, sql: str, *params) -> List[Dict[str, Any]]:
        stmt, bound = bind_positional(sql, params)
        async with self._connection() as conn:
            result = await conn.execute(stmt, bound)
            rows = result.mappings().all()
        return [dict(row) for row in rows]

    async def run(self, sql: str, *params) -> RunResult:
        stmt, bound = bind_positional(sql, params)
        async with self._connection(write=True) as conn:
            result = await conn.execute(stmt, bound)
            return RunResult(result.lastrowid, result.rowcount)

    async def execute_script(self, sql: str) -> None:
        async with self._connection(write=True) as conn:
            for statement in filter(None, (s.strip() for s in sql.split(";"))):
                await conn.execute(text(statement))

    async def close(self) -> None:
        await self.engine.dispose()


class SQLiteDatabase(Database):
    """Embedded file database for local and single-host use."""

    backend = "sqlite"


class CloudDatabase(Database):
    """Hosted SQL database (e.g. Postgres via asyncpg) for serverless deployments."""

    backend = "cloud"

    async def run(self, sql: str, *params) -> RunResult:
        is_insert = sql.lstrip().upper().startswith("INSERT")
        if is_insert and "RETURNING" not in sql.upper():
            sql = f"{sql.rstrip().rstrip(';')} RETURNING id"
        stmt, bound = bind_positional(sql, params)
        async with self._connection(write=True) as conn:
            result = await conn.execute(stmt, bound)
            if is_insert:
                return RunResult(result.scalar(), 1)
            return RunResult(None, result.rowcount)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database(settings: Settings) -> Database:
    """Build the gateway selected by ``DATABASE_BACKEND``."""
    if settings.database_backend == "cloud":
        if not settings.database_url:
            raise ValueError("❌ DATABASE_URL is not set!")
        engine = create_async_engine(settings.database_url, echo=settings.sql_echo, pool_pre_ping=True)
        log.info("Using cloud database backend")
        return CloudDatabase(engine)

    directory = os.path.dirname(settings.sqlite_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    engine = create_async_engine(f"sqlite+aiosqlite:///{settings.sqlite_path}", echo=settings.sql_echo)
    event.listens_for(engine.sync_engine, "connect")(_enable_sqlite_foreign_keys)
    log.info("Using embedded SQLite database at %s", settings.sqlite_path)
    return SQLiteDatabase(engine)


async def create_db_and_tables(db: Database) -> None:
    import qrmenu.models  # registers all tables on Base.metadata

    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# Dependency
def get_db(request: Request) -> Database:
    return request.app.state.db
