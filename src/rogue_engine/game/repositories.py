"""
모델별 리포지토리 클래스들
"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..database.repository import BaseRepository
from .models import Account, SavedGame

logger = logging.getLogger(__name__)


class AccountRepository(BaseRepository[Account]):
    """계정 리포지토리"""

    def get_table_name(self) -> str:
        return "accounts"

    def get_model_class(self):
        return Account

    async def get_by_username(self, username: str) -> Optional[Account]:
        """사용자명으로 계정 조회"""
        try:
            results = await self.find_by(username=username)
            return results[0] if results else None
        except Exception as e:
            logger.error(f"사용자명으로 계정 조회 실패 ({username}): {e}")
            raise

    async def username_exists(self, username: str) -> bool:
        """사용자명 중복 확인"""
        return await self.get_by_username(username) is not None

    async def update_last_login(self, account_id: str) -> Optional[Account]:
        """마지막 로그인 시간 업데이트"""
        return await self.update(account_id, {'last_login': datetime.now()})


class SavedGameRepository(BaseRepository[SavedGame]):
    """저장 게임 리포지토리"""

    def get_table_name(self) -> str:
        return "saved_games"

    def get_model_class(self):
        return SavedGame

    async def get_by_account_id(self, account_id: str) -> Optional[SavedGame]:
        results = await self.find_by(account_id=account_id)
        return results[0] if results else None

    async def has_saved_game(self, account_id: str) -> bool:
        return await self.count(account_id=account_id) > 0

    async def save_for_account(self, account_id: str, data: Dict[str, Any]) -> SavedGame:
        """기존 저장을 지우고 새로 저장 (계정당 하나)"""
        db_manager = await self.get_db_manager()
        async with db_manager.transaction():
            await self.delete_by(account_id=account_id)
            saved = await self.create({'account_id': account_id, 'data': data})
        logger.info(f"게임 저장 완료: 계정 {account_id}")
        return saved

    async def delete_for_account(self, account_id: str) -> bool:
        """저장 삭제. 삭제된 저장이 있으면 True"""
        return await self.delete_by(account_id=account_id) > 0
