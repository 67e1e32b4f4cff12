"""
다국어 지원 시스템
"""

import json
import logging
from typing import Dict, Optional
from pathlib import Path

logger = logging.getLogger(__name__)


class LocalizationManager:
    """다국어 메시지 관리자"""

    def __init__(self):
        """초기화"""
        self.messages: Dict[str, Dict[str, str]] = {}
        self.default_locale = "en"
        self.supported_locales = ["en", "ko"]
        self._load_default_messages()

    def _load_default_messages(self) -> None:
        """기본 메시지 로드"""
        self.messages = {
            # 인증 관련
            "auth.login_success": {
                "en": "Welcome, {username}!",
                "ko": "'{username}'님, 환영합니다!"
            },
            "auth.register_success": {
                "en": "Account '{username}' created. You are now logged in.",
                "ko": "계정 '{username}'이(가) 생성되었습니다. 자동으로 로그인되었습니다."
            },

            # 게임 메뉴
            "menu.title": {
                "en": "=== Game Menu ===",
                "ko": "=== 게임 메뉴 ==="
            },
            "menu.new_game": {
                "en": "1. New Game",
                "ko": "1. 새 게임"
            },
            "menu.continue": {
                "en": "2. Continue",
                "ko": "2. 이어하기"
            },
            "menu.quit": {
                "en": "3. Quit",
                "ko": "3. 종료"
            },
            "menu.language": {
                "en": "4. Language (English / 한국어)",
                "ko": "4. 언어 (English / 한국어)"
            },
            "menu.invalid_choice": {
                "en": "Invalid choice.",
                "ko": "잘못된 선택입니다."
            },
            "menu.prompt": {
                "en": "Choice> ",
                "ko": "선택> "
            },
            "menu.goodbye": {
                "en": "Goodbye!",
                "ko": "안녕히 가세요!"
            },

            # 설정
            "settings.locale_changed": {
                "en": "Language set to English.",
                "ko": "언어가 한국어로 변경되었습니다."
            },

            # 게임 진행
            "game.saved": {
                "en": "Game saved. See you next time!",
                "ko": "게임이 저장되었습니다. 다음에 또 만나요!"
            },
            "game.no_save": {
                "en": "There is no saved game.",
                "ko": "저장된 게임이 없습니다."
            },
            "game.load_failed": {
                "en": "The saved game could not be loaded. Please start a new game.",
                "ko": "저장된 게임을 불러올 수 없습니다. 새 게임을 시작하세요."
            },
            "game.taken_over": {
                "en": "Your game was saved and opened from another connection.",
                "ko": "다른 접속에서 게임을 열어 이 게임은 저장 후 닫혔습니다."
            },
            "game.over": {
                "en": "You have died. Press any key to return to the menu.",
                "ko": "당신은 죽었습니다. 아무 키나 누르면 메뉴로 돌아갑니다."
            },
            "game.controls": {
                "en": "Move: arrows/WASD/QECY/numpad  G: pick up  I: drink  N: drop  ESC: save & quit",
                "ko": "이동: 방향키/WASD/QECY/넘패드  G: 줍기  I: 마시기  N: 버리기  ESC: 저장 후 종료"
            },

            # 게임 로그
            "log.welcome": {
                "en": "Welcome to Rusty Roguelike",
                "ko": "러스티 로그라이크에 오신 것을 환영합니다"
            },
            "log.unable_to_hurt": {
                "en": "{attacker} is unable to hurt {target}",
                "ko": "{attacker}은(는) {target}에게 피해를 줄 수 없습니다"
            },
            "log.hits": {
                "en": "{attacker} hits {target}, for {damage} hp.",
                "ko": "{attacker}이(가) {target}을(를) 공격하여 {damage}의 피해를 입혔습니다."
            },
            "log.is_dead": {
                "en": "{name} is dead",
                "ko": "{name}이(가) 죽었습니다"
            },
            "log.player_dead": {
                "en": "You are dead",
                "ko": "당신은 죽었습니다"
            },
            "log.nothing_to_pick_up": {
                "en": "There is nothing here to pick up.",
                "ko": "여기에는 주울 것이 없습니다."
            },
            "log.pick_up": {
                "en": "You pick up the {item}.",
                "ko": "{item}을(를) 주웠습니다."
            },
            "log.drink": {
                "en": "You drink the {item}, healing {amount} hp.",
                "ko": "{item}을(를) 마셔 {amount}만큼 회복했습니다."
            },
            "log.drop": {
                "en": "You drop the {item}.",
                "ko": "{item}을(를) 버렸습니다."
            },

            # 엔티티 이름
            "entity.player": {
                "en": "Player",
                "ko": "플레이어"
            },
            "entity.orc": {
                "en": "Orc",
                "ko": "오크"
            },
            "entity.goblin": {
                "en": "Goblin",
                "ko": "고블린"
            },
            "entity.health_potion": {
                "en": "Health Potion",
                "ko": "체력 물약"
            },

            # 화면 UI
            "ui.hp": {
                "en": " HP: {hp} / {max_hp} ",
                "ko": " 체력: {hp} / {max_hp} "
            },
            "ui.inventory": {
                "en": "Inventory",
                "ko": "소지품"
            },
            "ui.drop_which": {
                "en": "Drop Which Item?",
                "ko": "어떤 아이템을 버릴까요?"
            },
            "ui.escape_to_cancel": {
                "en": "ESCAPE to cancel",
                "ko": "ESC: 취소"
            },
        }

    def get_message(self, key: str, locale: Optional[str] = None, **kwargs) -> str:
        """
        메시지 조회

        Args:
            key: 메시지 키
            locale: 언어 코드 (없으면 기본 언어)
            **kwargs: 포맷 인자

        Returns:
            str: 포맷된 메시지 (키가 없으면 키 자체)
        """
        locale = locale if locale in self.supported_locales else self.default_locale

        translations = self.messages.get(key)
        if not translations:
            logger.warning(f"메시지 키를 찾을 수 없음: {key}")
            return key

        template = translations.get(locale) or translations.get(self.default_locale, key)

        try:
            return template.format(**kwargs)
        except (KeyError, IndexError) as e:
            logger.error(f"메시지 포맷 오류 ({key}, {locale}): {e}")
            return template

    def add_message(self, key: str, messages: Dict[str, str]) -> None:
        """메시지 추가 또는 덮어쓰기"""
        self.messages[key] = messages
        logger.debug(f"메시지 추가: {key}")

    def load_from_file(self, file_path: str) -> bool:
        """JSON 파일에서 메시지 로드 ({key: {locale: text}} 형식)"""
        try:
            path = Path(file_path)
            if not path.exists():
                logger.warning(f"메시지 파일이 존재하지 않습니다: {file_path}")
                return False

            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)

            for key, messages in data.items():
                self.messages[key] = messages

            logger.info(f"메시지 파일 로드 완료: {file_path} ({len(data)}개)")
            return True

        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"메시지 파일 로드 실패 ({file_path}): {e}")
            return False

    def is_supported_locale(self, locale: str) -> bool:
        """지원하는 언어인지 확인"""
        return locale in self.supported_locales


# 전역 인스턴스
_localization_manager: Optional[LocalizationManager] = None


def get_localization_manager() -> LocalizationManager:
    """전역 LocalizationManager 반환"""
    global _localization_manager
    if _localization_manager is None:
        _localization_manager = LocalizationManager()
    return _localization_manager


def get_message(key: str, locale: Optional[str] = None, **kwargs) -> str:
    """전역 관리자를 통한 메시지 조회 단축 함수"""
    return get_localization_manager().get_message(key, locale, **kwargs)
