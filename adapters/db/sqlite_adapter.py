"""
SQLite 어댑터

WAL 모드로 SQLite 연결 관리.
쓰기 트랜잭션은 asyncio.Lock + BEGIN IMMEDIATE로 직렬화하여
읽기-검사-쓰기 단위가 동시 호출에서도 원자적으로 실행되도록 보장.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)


async def create_connection(db_path: Path | str) -> aiosqlite.Connection:
    """SQLite 연결 생성 (WAL 모드, autocommit)

    트랜잭션 경계는 SQLiteAdapter.transaction()에서 명시적으로 관리.

    Args:
        db_path: DB 파일 경로

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)

    # 디렉토리가 없으면 생성
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path_str, isolation_level=None)
    conn.row_factory = aiosqlite.Row

    # WAL 모드 설정
    await conn.execute("PRAGMA journal_mode=WAL")

    # 동시 접근 설정
    await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info("SQLite 연결 생성", extra={"db_path": db_path_str})

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    WAL 모드로 SQLite 연결 관리.
    트랜잭션 컨텍스트 매니저 제공.

    Args:
        db_path: DB 파일 경로

    사용 예시:
    ```python
    adapter = SQLiteAdapter(db_path)
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("UPDATE ...")

    await adapter.close()
    ```
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    def _require_conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Not connected to database")
        return self._conn

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행 (잠금 없음, 스키마 작업용)"""
        conn = self._require_conn()

        if parameters:
            return await conn.execute(sql, parameters)
        return await conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Row | None:
        """단일 행 조회

        진행 중인 트랜잭션이 끝난 뒤 읽도록 잠금 획득.
        """
        async with self._lock:
            cursor = await self.execute(sql, parameters)
            return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[aiosqlite.Row]:
        """전체 행 조회"""
        async with self._lock:
            cursor = await self.execute(sql, parameters)
            return list(await cursor.fetchall())

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """쓰기 트랜잭션 컨텍스트 매니저

        성공 시 자동 커밋, 예외 시 자동 롤백.
        블록 안에서는 yield된 conn만 사용 (fetchone/fetchall 호출 시 교착).

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            cursor = await conn.execute("SELECT current FROM users WHERE ...")
            row = await cursor.fetchone()
            await conn.execute("UPDATE users SET current = ? WHERE ...")
        ```
        """
        conn = self._require_conn()

        async with self._lock:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                await conn.execute("ROLLBACK")
                raise
            else:
                await conn.execute("COMMIT")

    async def ping(self) -> bool:
        """연결 확인"""
        row = await self.fetchone("SELECT 1")
        return row is not None and row[0] == 1

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


async def init_schema(adapter: SQLiteAdapter) -> None:
    """스키마 초기화 (테이블 생성)

    금액은 Decimal 문자열(TEXT), 시각은 UTC ISO 8601 문자열로 저장.

    Args:
        adapter: 연결된 SQLiteAdapter
    """
    async with adapter.transaction() as conn:
        # users
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS users (
                username       TEXT PRIMARY KEY,
                password_hash  TEXT NOT NULL,
                current        TEXT NOT NULL DEFAULT '0',
                withdrawn      TEXT NOT NULL DEFAULT '0',
                created_at     TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)

        # orders
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS orders (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                number         TEXT NOT NULL UNIQUE,
                owner          TEXT NOT NULL REFERENCES users (username),
                status         TEXT NOT NULL DEFAULT 'NEW',
                accrual        TEXT,
                uploaded_at    TEXT NOT NULL,
                updated_at     TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """)

        # withdrawals
        await conn.execute("""
            CREATE TABLE IF NOT EXISTS withdrawals (
                id             INTEGER PRIMARY KEY AUTOINCREMENT,
                owner          TEXT NOT NULL REFERENCES users (username),
                order_ref      TEXT NOT NULL,
                amount         TEXT NOT NULL,
                processed_at   TEXT NOT NULL
            )
        """)

        # 인덱스 생성
        await conn.execute("""
            CREATE INDEX IF NOT EXISTS ix_orders_owner
            ON orders(owner, uploaded_at)
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS ix_orders_status
            ON orders(status)
        """)

        await conn.execute("""
            CREATE INDEX IF NOT EXISTS ix_withdrawals_owner
            ON withdrawals(owner, processed_at)
        """)

    logger.info("스키마 초기화 완료")
