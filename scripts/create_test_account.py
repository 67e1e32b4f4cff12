#!/usr/bin/env python3
"""
테스트 계정 생성 스크립트
"""

import asyncio
import os
import sys
import traceback

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from src.rogue_engine.database.connection import DatabaseManager
from src.rogue_engine.game.auth import AuthService
from src.rogue_engine.game.repositories import AccountRepository
from src.rogue_engine.utils.exceptions import AuthenticationError

TEST_USERNAME = 'tester'
TEST_PASSWORD = 'aaaabbbb'


async def create_test_account():
    """테스트 계정 생성"""
    db = DatabaseManager()
    await db.initialize()

    try:
        repo = AccountRepository(db)

        existing = await repo.get_by_username(TEST_USERNAME)
        if existing:
            print(f"✓ 테스트 계정 '{TEST_USERNAME}'가 이미 존재합니다")
            print(f"  - 언어: {existing.preferred_locale}")
            return True

        account = await AuthService(repo).create_account(TEST_USERNAME, TEST_PASSWORD, locale='ko')

        print(f"✓ 테스트 계정 '{account.username}' 생성 완료")
        print(f"  - 사용자명: {account.username}")
        print(f"  - 비밀번호: {TEST_PASSWORD}")
        print(f"  - 언어: {account.preferred_locale}")
        return True

    except (AuthenticationError, ValueError) as e:
        print(f"✗ 계정 생성 실패: {e}")
        traceback.print_exc()
        return False

    finally:
        await db.close()

if __name__ == "__main__":
    asyncio.run(create_test_account())
