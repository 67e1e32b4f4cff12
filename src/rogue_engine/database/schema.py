"""
데이터베이스 스키마 정의 및 생성
"""

import logging
from typing import List

logger = logging.getLogger(__name__)

DATABASE_SCHEMA: List[str] = [
    """
    -- 계정 테이블
    CREATE TABLE IF NOT EXISTS accounts (
        id TEXT PRIMARY KEY,
        username TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        preferred_locale TEXT DEFAULT 'en',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_login TIMESTAMP
    );
    """,

    """
    -- 저장된 게임 (계정당 하나)
    CREATE TABLE IF NOT EXISTS saved_games (
        id TEXT PRIMARY KEY,
        account_id TEXT UNIQUE NOT NULL,
        data TEXT NOT NULL, -- JSON 형태로 저장 (World 스냅샷)
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        FOREIGN KEY (account_id) REFERENCES accounts(id) ON DELETE CASCADE
    );
    """,

    """
    -- 인덱스 생성
    CREATE INDEX IF NOT EXISTS idx_accounts_username ON accounts(username);
    CREATE INDEX IF NOT EXISTS idx_saved_games_account ON saved_games(account_id);
    """
]

EXPECTED_TABLES: List[str] = ['accounts', 'saved_games']


async def create_database_schema(db_connection) -> None:
    """
    데이터베이스 스키마를 생성합니다.

    Args:
        db_connection: aiosqlite 데이터베이스 연결 객체
    """
    logger.info("데이터베이스 스키마 생성 시작")

    try:
        for schema_sql in DATABASE_SCHEMA:
            await db_connection.executescript(schema_sql)
        logger.info("데이터베이스 스키마 생성 완료")

    except Exception as e:
        logger.error(f"데이터베이스 스키마 생성 실패: {e}")
        raise


async def verify_schema(db_connection) -> bool:
    """
    필요한 테이블이 모두 있는지 확인합니다.

    Returns:
        bool: 스키마 검증 성공 여부
    """
    try:
        cursor = await db_connection.execute(
            "SELECT name FROM sqlite_master WHERE type='table'"
        )
        existing_tables = [row[0] for row in await cursor.fetchall()]

        for table in EXPECTED_TABLES:
            if table not in existing_tables:
                logger.error(f"테이블 '{table}'이 존재하지 않습니다")
                return False

        logger.info("데이터베이스 스키마 검증 완료")
        return True

    except Exception as e:
        logger.error(f"스키마 검증 실패: {e}")
        return False
