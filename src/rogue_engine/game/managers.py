# -*- coding: utf-8 -*-
"""계정 관리자 모듈"""
import logging
from typing import Optional

from ..utils.exceptions import AuthenticationError
from .auth import AuthService
from .models import Account
from .repositories import AccountRepository

logger = logging.getLogger(__name__)


class AccountManager:
    """계정 관련 로직을 총괄하는 관리자 클래스입니다."""

    def __init__(self, account_repo: AccountRepository) -> None:
        self._account_repo: AccountRepository = account_repo
        self._auth_service: AuthService = AuthService(account_repo)

    async def create_account(self, username: str, password: str,
                             locale: Optional[str] = None) -> Account:
        """새로운 계정을 생성합니다. AuthService에 위임합니다."""
        return await self._auth_service.create_account(username, password, locale)

    async def authenticate(self, username: str, password: str) -> Account:
        return await self._auth_service.authenticate(username, password)

    async def set_locale(self, account: Account, locale: str) -> Account:
        """
        선호 언어 변경

        Raises:
            AuthenticationError: 지원하지 않는 언어인 경우
        """
        self._auth_service.validate_locale(locale)

        updated = await self._account_repo.update(account.id, {'preferred_locale': locale})
        if updated is None:
            raise AuthenticationError("계정을 찾을 수 없습니다.")
        logger.info(f"계정 언어 변경: {account.username} -> {locale}")
        return updated
