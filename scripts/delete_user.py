#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""계정 및 저장 게임 삭제 스크립트"""

import asyncio
import sys
import traceback

from src.rogue_engine.database import get_database_manager, close_database_manager
from src.rogue_engine.game.repositories import AccountRepository, SavedGameRepository


async def main():
    """메인 함수"""
    print("=== 계정 삭제 스크립트 ===\n")

    if len(sys.argv) < 2:
        print("사용법: python -m scripts.delete_user <사용자명_또는_ID>")
        print("예시:")
        print("  python -m scripts.delete_user testuser")
        print("  python -m scripts.delete_user account_id_here")
        return 1

    target = sys.argv[1]

    try:
        db_manager = await get_database_manager()
        account_repo = AccountRepository(db_manager)
        saved_game_repo = SavedGameRepository(db_manager)

        # 사용자명으로 먼저 검색하고, 없으면 ID로 검색
        account = await account_repo.get_by_username(target)
        if account is None:
            account = await account_repo.get_by_id(target)

        if account is None:
            print(f"❌ 계정 '{target}'를 찾을 수 없습니다.")
            return 1

        has_save = await saved_game_repo.has_saved_game(account.id)

        print("삭제할 계정:")
        print(f"  ID: {account.id}")
        print(f"  사용자명: {account.username}")
        print(f"  저장 게임: {'있음' if has_save else '없음'}")

        confirm = input(f"\n정말로 계정 '{account.username}'를 삭제하시겠습니까? (yes/no): ")
        if confirm.lower() not in ['yes', 'y']:
            print("삭제가 취소되었습니다.")
            return 0

        # saved_games는 외래 키 CASCADE로 함께 삭제됨
        async with db_manager.transaction():
            await saved_game_repo.delete_for_account(account.id)
            await account_repo.delete(account.id)

        print("\n✅ 계정 삭제 완료!")
        print(f"삭제된 계정: {account.username} (ID: {account.id})")
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
