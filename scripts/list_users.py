#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""계정 목록 및 저장 게임 조회 스크립트"""

import asyncio
import sys
import traceback

from src.rogue_engine.database import get_database_manager, close_database_manager


async def main():
    """메인 함수"""
    print("=== 계정 목록 조회 ===\n")

    try:
        db_manager = await get_database_manager()

        accounts = await db_manager.fetch_all("""
            SELECT a.id, a.username, a.preferred_locale, a.last_login, a.created_at,
                   s.created_at AS saved_at
            FROM accounts a
            LEFT JOIN saved_games s ON s.account_id = a.id
            ORDER BY a.created_at DESC
        """)

        if not accounts:
            print("등록된 계정이 없습니다.")
            return 0

        print(f"총 {len(accounts)}개의 계정:")
        print("=" * 70)
        print(f"{'No':<3} {'사용자명':<20} {'언어':<4} {'로그인':<12} {'저장 게임':<20}")
        print("-" * 70)

        for i, account in enumerate(accounts, 1):
            last_login = account['last_login']
            login_date = last_login.split('T')[0] if last_login else "없음"
            saved_at = account['saved_at'].replace('T', ' ')[:19] if account['saved_at'] else "-"

            print(f"{i:<3} {account['username']:<20} {account['preferred_locale']:<4} "
                  f"{login_date:<12} {saved_at:<20}")

        print("-" * 70)

        saved_count = sum(1 for account in accounts if account['saved_at'])
        print(f"\n저장 게임이 있는 계정: {saved_count}개")

        print("\n계정 삭제 명령어 예시:")
        print(f"python -m scripts.delete_user {accounts[0]['username']}")

        print("\n✅ 조회 완료")
        return 0

    except Exception as e:
        print(f"❌ 오류 발생: {e}")
        traceback.print_exc()
        return 1
    finally:
        await close_database_manager()


if __name__ == '__main__':
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
