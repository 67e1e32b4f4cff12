# -*- coding: utf-8 -*-
"""계정 인증 관련 서비스를 제공합니다."""
import logging
from typing import Optional

import bcrypt

from ..config import Config
from ..utils.exceptions import AuthenticationError
from .models import Account
from .repositories import AccountRepository

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 로직을 처리하는 서비스 클래스입니다."""

    def __init__(self, account_repo: AccountRepository) -> None:
        """AuthService를 초기화합니다."""
        self._account_repo: AccountRepository = account_repo

    @staticmethod
    def hash_password(password: str) -> str:
        """비밀번호를 해시 처리합니다."""
        salt = bcrypt.gensalt()
        hashed_password: bytes = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed_password.decode('utf-8')

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """입력된 비밀번호와 해시된 비밀번호를 비교합니다."""
        return bcrypt.checkpw(
            plain_password.encode('utf-8'), hashed_password.encode('utf-8')
        )

    @staticmethod
    def validate_locale(locale: str) -> None:
        """
        Raises:
            AuthenticationError: 지원하지 않는 언어인 경우
        """
        if locale not in Config.SUPPORTED_LOCALES:
            raise AuthenticationError(
                f"지원되지 않는 언어입니다: {locale} (사용 가능: {', '.join(Config.SUPPORTED_LOCALES)})"
            )

    async def create_account(self, username: str, password: str,
                             locale: Optional[str] = None) -> Account:
        """새로운 계정을 생성합니다.

        Args:
            username: 생성할 사용자 이름
            password: 생성할 계정의 비밀번호
            locale: 선호 언어 (기본값: Config.DEFAULT_LOCALE)

        Returns:
            생성된 Account 객체

        Raises:
            AuthenticationError: 입력값이 유효하지 않거나 사용자 이름이 이미 존재할 경우
        """
        locale = locale or Config.DEFAULT_LOCALE
        self.validate_locale(locale)

        if not Account.is_valid_username(username):
            raise AuthenticationError(f"사용자 이름 '{username}'은(는) 사용할 수 없습니다.")

        if len(password) < Config.PASSWORD_MIN_LENGTH:
            raise AuthenticationError(
                f"비밀번호는 최소 {Config.PASSWORD_MIN_LENGTH}자 이상이어야 합니다."
            )

        if await self._account_repo.username_exists(username):
            raise AuthenticationError(f"사용자 이름 '{username}'이(가) 이미 존재합니다.")

        account = Account(
            username=username,
            password_hash=self.hash_password(password),
            preferred_locale=locale,
        )
        new_account: Account = await self._account_repo.create(account.to_dict_with_password())
        logger.info(f"새 계정 생성: {username}")
        return new_account

    async def authenticate(self, username: str, password: str) -> Account:
        """사용자를 인증합니다.

        Raises:
            AuthenticationError: 인증에 실패한 경우
        """
        account: Optional[Account] = await self._account_repo.get_by_username(username)

        if not account or not self.verify_password(password, account.password_hash):
            raise AuthenticationError("사용자 이름 또는 비밀번호가 잘못되었습니다.")

        await self._account_repo.update_last_login(account.id)
        return account
