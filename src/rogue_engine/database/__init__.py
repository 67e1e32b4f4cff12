"""
데이터베이스 관련 모듈
"""

from .connection import DatabaseManager, get_database_manager, close_database_manager
from .repository import BaseModel, BaseRepository
from .schema import create_database_schema, verify_schema

__all__ = [
    'DatabaseManager',
    'get_database_manager',
    'close_database_manager',
    'BaseModel',
    'BaseRepository',
    'create_database_schema',
    'verify_schema',
]
