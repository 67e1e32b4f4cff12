"""
기본 CRUD 연산을 위한 베이스 리포지토리 클래스
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union, cast
from uuid import uuid4

from .connection import DatabaseManager, get_database_manager

logger = logging.getLogger(__name__)

# 제네릭 타입 변수
T = TypeVar('T', bound='BaseModel')


class BaseModel:
    """기본 모델 클래스"""

    def to_dict(self) -> Dict[str, Any]:
        """모델을 컬럼 값 딕셔너리로 변환"""
        result = {}
        for key, value in self.__dict__.items():
            if isinstance(value, datetime):
                result[key] = value.isoformat()
            elif isinstance(value, (list, dict)):
                result[key] = json.dumps(value, ensure_ascii=False)
            else:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseModel':
        """딕셔너리에서 모델 생성"""
        return cls(**data)


class BaseRepository(Generic[T], ABC):
    """기본 리포지토리 클래스"""

    def __init__(self, db_manager: Optional[DatabaseManager] = None):
        """
        BaseRepository 초기화

        Args:
            db_manager: 데이터베이스 매니저 (기본값: 전역 인스턴스 사용)
        """
        self._db_manager = db_manager
        self._table_name = self.get_table_name()
        self._model_class = self.get_model_class()

    @abstractmethod
    def get_table_name(self) -> str:
        """테이블명 반환"""

    @abstractmethod
    def get_model_class(self) -> Type[T]:
        """모델 클래스 반환"""

    async def get_db_manager(self) -> DatabaseManager:
        """데이터베이스 매니저 반환"""
        if self._db_manager is None:
            self._db_manager = await get_database_manager()
        return self._db_manager

    def _generate_id(self) -> str:
        return str(uuid4())

    def _prepare_data(self, data: Union[Dict[str, Any], BaseModel]) -> Dict[str, Any]:
        """삽입용 데이터 준비 (ID, 생성 시간, JSON 필드)"""
        if isinstance(data, BaseModel):
            prepared_data = data.to_dict()
        else:
            prepared_data = dict(data)

        if not prepared_data.get('id'):
            prepared_data['id'] = self._generate_id()

        if 'created_at' not in prepared_data:
            prepared_data['created_at'] = datetime.now().isoformat()

        for key, value in prepared_data.items():
            if isinstance(value, (list, dict)):
                prepared_data[key] = json.dumps(value, ensure_ascii=False)

        return prepared_data

    async def create(self, data: Union[Dict[str, Any], BaseModel]) -> T:
        """
        새 레코드 생성

        Args:
            data: 생성할 데이터

        Returns:
            T: 생성된 모델 인스턴스
        """
        db_manager = await self.get_db_manager()
        prepared_data = self._prepare_data(data)

        columns = list(prepared_data.keys())
        placeholders = ', '.join('?' for _ in columns)
        query = f"INSERT INTO {self._table_name} ({', '.join(columns)}) VALUES ({placeholders})"

        try:
            await db_manager.execute(query, tuple(prepared_data.values()))
        except Exception as e:
            logger.error(f"{self._table_name} 레코드 생성 실패: {e}")
            raise

        logger.info(f"{self._table_name}에 새 레코드 생성: {prepared_data['id']}")
        return cast(T, await self.get_by_id(prepared_data['id']))

    async def get_by_id(self, record_id: str) -> Optional[T]:
        """ID로 레코드 조회"""
        db_manager = await self.get_db_manager()
        result = await db_manager.fetch_one(
            f"SELECT * FROM {self._table_name} WHERE id = ?", (record_id,)
        )
        if result is None:
            return None
        return cast(T, self._model_class.from_dict(result))

    async def update(self, record_id: str, data: Dict[str, Any]) -> Optional[T]:
        """
        레코드 업데이트

        Args:
            record_id: 레코드 ID
            data: 업데이트할 컬럼과 값

        Returns:
            Optional[T]: 업데이트된 모델 인스턴스 (레코드가 없으면 None)
        """
        db_manager = await self.get_db_manager()

        prepared_data = {}
        for key, value in data.items():
            if isinstance(value, (list, dict)):
                value = json.dumps(value, ensure_ascii=False)
            elif isinstance(value, datetime):
                value = value.isoformat()
            prepared_data[key] = value
        prepared_data.pop('id', None)

        if not prepared_data:
            return await self.get_by_id(record_id)

        set_clauses = ', '.join(f"{key} = ?" for key in prepared_data.keys())
        values = tuple(prepared_data.values()) + (record_id,)

        try:
            cursor = await db_manager.execute(
                f"UPDATE {self._table_name} SET {set_clauses} WHERE id = ?", values
            )
        except Exception as e:
            logger.error(f"{self._table_name} 레코드 업데이트 실패 (ID: {record_id}): {e}")
            raise

        if cursor.rowcount == 0:
            logger.warning(f"{self._table_name} 레코드를 찾을 수 없음 (ID: {record_id})")
            return None

        return await self.get_by_id(record_id)

    async def delete(self, record_id: str) -> bool:
        """레코드 삭제. 삭제된 레코드가 있으면 True"""
        return await self.delete_by(id=record_id) > 0

    async def delete_by(self, **conditions) -> int:
        """조건에 맞는 레코드 삭제 후 삭제 개수 반환"""
        if not conditions:
            raise ValueError("삭제 조건이 필요합니다")

        db_manager = await self.get_db_manager()
        where_clauses = ' AND '.join(f"{key} = ?" for key in conditions.keys())

        try:
            cursor = await db_manager.execute(
                f"DELETE FROM {self._table_name} WHERE {where_clauses}",
                tuple(conditions.values())
            )
        except Exception as e:
            logger.error(f"{self._table_name} 레코드 삭제 실패 ({conditions}): {e}")
            raise

        if cursor.rowcount > 0:
            logger.info(f"{self._table_name} 레코드 {cursor.rowcount}개 삭제")
        return cursor.rowcount

    async def find_by(self, **conditions) -> List[T]:
        """조건으로 레코드 검색"""
        db_manager = await self.get_db_manager()

        query = f"SELECT * FROM {self._table_name}"
        values: tuple = ()
        if conditions:
            query += " WHERE " + ' AND '.join(f"{key} = ?" for key in conditions.keys())
            values = tuple(conditions.values())

        results = await db_manager.fetch_all(query, values)
        return [cast(T, self._model_class.from_dict(result)) for result in results]

    async def count(self, **conditions) -> int:
        """레코드 개수 조회"""
        db_manager = await self.get_db_manager()

        query = f"SELECT COUNT(*) AS count FROM {self._table_name}"
        values: tuple = ()
        if conditions:
            query += " WHERE " + ' AND '.join(f"{key} = ?" for key in conditions.keys())
            values = tuple(conditions.values())

        result = await db_manager.fetch_one(query, values)
        return result['count'] if result else 0

    async def exists(self, record_id: str) -> bool:
        """레코드 존재 여부 확인"""
        db_manager = await self.get_db_manager()
        result = await db_manager.fetch_one(
            f"SELECT 1 FROM {self._table_name} WHERE id = ? LIMIT 1", (record_id,)
        )
        return result is not None
