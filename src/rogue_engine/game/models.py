"""
계정 및 저장 게임 데이터 모델
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import uuid4

from ..config import Config
from ..database.repository import BaseModel


def _parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


@dataclass
class Account(BaseModel):
    """로그인 계정 모델"""

    id: str = field(default_factory=lambda: str(uuid4()))
    username: str = ""
    password_hash: str = ""
    preferred_locale: str = "en"
    created_at: datetime = field(default_factory=datetime.now)
    last_login: Optional[datetime] = None

    def __post_init__(self):
        """초기화 후 검증"""
        self.created_at = _parse_datetime(self.created_at) or datetime.now()
        self.last_login = _parse_datetime(self.last_login)
        self.validate()

    def validate(self) -> None:
        """계정 데이터 유효성 검증"""
        if not self.username:
            raise ValueError("사용자명은 필수입니다")

        if not self.is_valid_username(self.username):
            raise ValueError(
                f"사용자명은 {Config.USERNAME_MIN_LENGTH}-{Config.USERNAME_MAX_LENGTH}자의 "
                "영문, 숫자, 언더스코어만 허용됩니다"
            )

        if not self.password_hash:
            raise ValueError("비밀번호 해시는 필수입니다")

        if self.preferred_locale not in Config.SUPPORTED_LOCALES:
            raise ValueError(f"지원되지 않는 언어입니다: {self.preferred_locale}")

    @staticmethod
    def is_valid_username(username: str) -> bool:
        """사용자명 유효성 검사"""
        if not username:
            return False

        if len(username) < Config.USERNAME_MIN_LENGTH or len(username) > Config.USERNAME_MAX_LENGTH:
            return False

        return re.match(r'^[a-zA-Z0-9_]+$', username) is not None

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환 (비밀번호 해시 제외)"""
        data = super().to_dict()
        data.pop('password_hash', None)
        return data

    def to_dict_with_password(self) -> Dict[str, Any]:
        """비밀번호 해시 포함 딕셔너리 변환 (데이터베이스 저장용)"""
        return super().to_dict()


@dataclass
class SavedGame(BaseModel):
    """계정당 하나뿐인 저장 게임. data는 World 스냅샷"""

    id: str = field(default_factory=lambda: str(uuid4()))
    account_id: str = ""
    data: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        self.created_at = _parse_datetime(self.created_at) or datetime.now()
        if isinstance(self.data, str):
            self.data = json.loads(self.data)
        if not self.account_id:
            raise ValueError("계정 ID는 필수입니다")
