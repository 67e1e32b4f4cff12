"""
데이터베이스 연결 및 초기화 관리
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional

import aiosqlite

from ..config import Config
from ..utils.exceptions import DatabaseError
from .schema import create_database_schema, verify_schema

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


class DatabaseManager:
    """aiosqlite 연결 하나를 공유하는 데이터베이스 관리 클래스"""

    def __init__(self, database_url: Optional[str] = None):
        """
        DatabaseManager 초기화

        Args:
            database_url: 데이터베이스 URL (기본값: Config.DATABASE_URL)
        """
        self.database_url = database_url or Config.DATABASE_URL

        # SQLite URL에서 파일 경로 추출
        if self.database_url.startswith("sqlite:///"):
            self.db_path = self.database_url[len("sqlite:///"):]
        else:
            self.db_path = self.database_url

        self._connection: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()
        self._transaction_lock = asyncio.Lock()
        self._transaction_owner: Optional[asyncio.Task] = None

        logger.info(f"DatabaseManager 초기화: {self.db_path}")

    @property
    def is_memory(self) -> bool:
        return self.db_path == MEMORY_DATABASE

    async def initialize(self) -> None:
        """
        데이터베이스 초기화
        - 디렉토리 생성
        - 연결 설정
        - 스키마 생성 및 검증
        """
        async with self._lock:
            try:
                if not self.is_memory:
                    Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

                await self._connect()
                await create_database_schema(self._connection)

                if not await verify_schema(self._connection):
                    raise DatabaseError("데이터베이스 스키마 검증 실패")

                logger.info("데이터베이스 초기화 완료")

            except Exception as e:
                logger.error(f"데이터베이스 초기화 실패: {e}")
                await self._close_connection()
                raise

    async def _connect(self) -> None:
        """데이터베이스 연결 생성"""
        if self._connection is not None:
            return

        self._connection = await aiosqlite.connect(
            self.db_path,
            timeout=30.0,
            isolation_level=None  # autocommit 모드
        )
        self._connection.row_factory = aiosqlite.Row

        await self._connection.execute("PRAGMA foreign_keys = ON")
        if not self.is_memory:
            await self._connection.execute("PRAGMA journal_mode = WAL")
            await self._connection.execute("PRAGMA synchronous = NORMAL")

        logger.info("데이터베이스 연결 생성 완료")

    async def get_connection(self) -> aiosqlite.Connection:
        """연결 반환 (없으면 초기화)"""
        if self._connection is None:
            await self.initialize()
        return self._connection

    async def execute(self, query: str, parameters: tuple = ()) -> aiosqlite.Cursor:
        """
        쿼리 실행

        다른 태스크의 transaction()이 열려 있으면 끝날 때까지 기다림.
        연결을 하나만 공유하므로 그렇지 않으면 그 트랜잭션에 섞여 함께 롤백될 수 있음.
        """
        connection = await self.get_connection()
        if self._transaction_lock.locked() and self._transaction_owner is not asyncio.current_task():
            async with self._transaction_lock:
                return await connection.execute(query, parameters)
        return await connection.execute(query, parameters)

    async def fetch_one(self, query: str, parameters: tuple = ()) -> Optional[dict]:
        """
        단일 레코드 조회

        Returns:
            Optional[dict]: 컬럼명을 키로 하는 딕셔너리
        """
        cursor = await self.execute(query, parameters)
        row = await cursor.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(self, query: str, parameters: tuple = ()) -> list[dict]:
        cursor = await self.execute(query, parameters)
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        BEGIN ~ COMMIT 구간. 예외 발생 시 ROLLBACK

        트랜잭션을 연 태스크만 안에서 execute()를 바로 실행함.
        """
        connection = await self.get_connection()
        async with self._transaction_lock:
            self._transaction_owner = asyncio.current_task()
            try:
                await connection.execute("BEGIN")
                try:
                    yield connection
                except Exception:
                    await connection.execute("ROLLBACK")
                    raise
                else:
                    await connection.execute("COMMIT")
            finally:
                self._transaction_owner = None

    async def health_check(self) -> bool:
        """연결 상태 확인"""
        try:
            row = await self.fetch_one("SELECT 1 AS ok")
            return row is not None and row["ok"] == 1
        except Exception as e:
            logger.error(f"데이터베이스 헬스체크 실패: {e}")
            return False

    async def _close_connection(self) -> None:
        if self._connection:
            try:
                await self._connection.close()
                logger.info("데이터베이스 연결 종료 완료")
            except Exception as e:
                logger.error(f"데이터베이스 연결 종료 중 오류: {e}")
            finally:
                self._connection = None

    async def close(self) -> None:
        """데이터베이스 연결 종료"""
        async with self._lock:
            await self._close_connection()

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


# 전역 데이터베이스 매니저 인스턴스
_db_manager: Optional[DatabaseManager] = None


async def get_database_manager() -> DatabaseManager:
    """전역 데이터베이스 매니저 반환 (최초 호출 시 초기화)"""
    global _db_manager

    if _db_manager is None:
        _db_manager = DatabaseManager()
        await _db_manager.initialize()

    return _db_manager


async def close_database_manager() -> None:
    """전역 데이터베이스 매니저 종료"""
    global _db_manager

    if _db_manager:
        try:
            await _db_manager.close()
        finally:
            _db_manager = None
