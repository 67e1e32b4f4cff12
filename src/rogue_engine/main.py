"""
Rogue Engine 메인 실행 파일

    python -m src.rogue_engine.main
"""

import asyncio
import gzip
import logging
import logging.handlers
import os
import shutil
from datetime import datetime

from .config import Config
from .core.event_bus import initialize_event_bus, shutdown_event_bus
from .core.game_engine import GameEngine
from .database import close_database_manager, get_database_manager
from .game.managers import AccountManager
from .game.repositories import AccountRepository, SavedGameRepository
from .server import TelnetServer, WebServer

LOG_DIR = 'logs'
LOG_PREFIX = 'rogue_engine'


class RogueEngineFormatter(logging.Formatter):
    """{시분초.ms} {LEVEL} [{logger}:{line}] {message} 형식"""

    def format(self, record):
        timestamp = self.formatTime(record, '%H:%M:%S')
        ms = int(record.created * 1000) % 1000
        message = f"{timestamp}.{ms:03d} {record.levelname} [{record.name}:{record.lineno}] {record.getMessage()}"
        if record.exc_info:
            message += "\n" + self.formatException(record.exc_info)
        return message


class DailySizeRotatingHandler(logging.handlers.BaseRotatingHandler):
    """날짜와 크기 기반 로그 로테이션 핸들러. 지난 파일은 gzip으로 압축"""

    def __init__(self, log_dir: str = LOG_DIR, maxBytes: int = 200 * 1024 * 1024,
                 backupCount: int = 30, encoding: str = 'utf-8'):
        self.log_dir = log_dir
        self.maxBytes = maxBytes
        self.backupCount = backupCount
        self.current_date = datetime.now().strftime('%Y%m%d')
        self.file_number = 1
        self.current_filename = self._get_current_filename()

        super().__init__(self.current_filename, 'a', encoding=encoding)

    def _get_current_filename(self) -> str:
        return os.path.join(self.log_dir, f"{LOG_PREFIX}-{self.current_date}-{self.file_number:02d}.log")

    def shouldRollover(self, record) -> bool:
        if datetime.now().strftime('%Y%m%d') != self.current_date:
            return True

        if self.stream is None:
            self.stream = self._open()

        if self.maxBytes > 0:
            msg = "%s\n" % self.format(record)
            self.stream.seek(0, 2)
            if self.stream.tell() + len(msg) >= self.maxBytes:
                return True

        return False

    def doRollover(self) -> None:
        if self.stream:
            self.stream.close()
            self.stream = None

        current_file = self.current_filename
        if os.path.exists(current_file):
            with open(current_file, 'rb') as f_in, gzip.open(f"{current_file}.gz", 'wb') as f_out:
                shutil.copyfileobj(f_in, f_out)
            os.remove(current_file)

        today = datetime.now().strftime('%Y%m%d')
        if today != self.current_date:
            self.current_date = today
            self.file_number = 1
        else:
            self.file_number += 1

        self.current_filename = self._get_current_filename()
        self.baseFilename = os.path.abspath(self.current_filename)

        if not self.delay:
            self.stream = self._open()

        self._cleanup_old_logs()

    def _cleanup_old_logs(self) -> None:
        """backupCount를 넘는 압축 로그 삭제"""
        log_files = []
        for filename in os.listdir(self.log_dir):
            if filename.startswith(f"{LOG_PREFIX}-") and filename.endswith('.log.gz'):
                filepath = os.path.join(self.log_dir, filename)
                log_files.append((os.path.getctime(filepath), filepath))

        log_files.sort()
        while len(log_files) > self.backupCount:
            _, old_file = log_files.pop(0)
            try:
                os.remove(old_file)
            except OSError:
                pass


class ExcludeLoggerFilter(logging.Filter):
    """특정 로거(aiosqlite 등)의 출력 제외"""

    def __init__(self, exclude_name: str):
        super().__init__()
        self.exclude_name = exclude_name

    def filter(self, record) -> bool:
        return record.name != self.exclude_name


def setup_logging() -> None:
    """콘솔 + 로테이팅 파일 로깅 설정"""
    os.makedirs(LOG_DIR, exist_ok=True)

    formatter = RogueEngineFormatter()
    handlers = [logging.StreamHandler(), DailySizeRotatingHandler()]

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ExcludeLoggerFilter("aiosqlite"))
        root_logger.addHandler(handler)


async def main():
    """메인 함수"""
    setup_logging()
    logger = logging.getLogger(__name__)

    logger.info("Rogue Engine 시작 중...")
    print("🎮 Rusty Roguelike server v0.1.0")

    web_server = None
    telnet_server = None
    game_engine = None
    try:
        db_manager = await get_database_manager()

        account_manager = AccountManager(AccountRepository(db_manager))
        saved_game_repo = SavedGameRepository(db_manager)

        event_bus = await initialize_event_bus()
        game_engine = GameEngine(saved_game_repo, event_bus)
        await game_engine.start()

        telnet_server = TelnetServer(Config.TELNET_HOST, Config.TELNET_PORT, account_manager, game_engine)
        await telnet_server.start()
        print(f"📡 Telnet 서버가 telnet://{Config.TELNET_HOST}:{Config.TELNET_PORT} 에서 실행 중입니다.")

        if Config.WEB_ENABLED:
            web_server = WebServer(Config.WEB_HOST, Config.WEB_PORT, account_manager, game_engine)
            await web_server.start()
            print(f"🌐 웹 서버가 http://{Config.WEB_HOST}:{Config.WEB_PORT} 에서 실행 중입니다.")

        print("Ctrl+C를 눌러 서버를 종료할 수 있습니다.")
        await asyncio.Event().wait()

    except Exception as e:
        logger.error(f"초기화 또는 실행 중 오류 발생: {e}", exc_info=True)
        print(f"❌ 치명적인 오류 발생: {e}")
    finally:
        logger.info("Rogue Engine 종료 절차 시작...")

        if telnet_server:
            await telnet_server.stop()
        if web_server:
            await web_server.stop()
        if game_engine:
            await game_engine.stop()

        await shutdown_event_bus()
        await close_database_manager()
        logger.info("Rogue Engine이 성공적으로 종료되었습니다.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
