# -*- coding: utf-8 -*-
"""엔티티-컴포넌트 저장소(World)

엔티티는 재사용되지 않는 정수 ID이고, 컴포넌트는 타입별 딕셔너리에 저장됩니다.
맵, 로그, 난수 생성기 같은 전역 리소스는 World 속성으로 보관합니다.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Type, TypeVar

from ..utils.exceptions import WorldError
from ..core.localization import get_message
from .game_log import GameLog
from .map import Map
from .rng import RandomNumberGenerator
from .types import Point, RunState

logger = logging.getLogger(__name__)

C = TypeVar('C')


class EntityBuilder:
    """create_entity()가 반환하는 빌더"""

    def __init__(self, world: 'World', entity: int):
        self._world = world
        self._entity = entity

    def with_(self, component: Any) -> 'EntityBuilder':
        self._world.insert(self._entity, component)
        return self

    def build(self) -> int:
        return self._entity


class World:
    """게임 상태 전체를 담는 저장소"""

    def __init__(self, seed: Optional[int] = None, locale: str = "en"):
        self._next_entity: int = 1
        self._alive: Set[int] = set()
        self._pending_deletes: Set[int] = set()
        self._storages: Dict[type, Dict[int, Any]] = {}

        # 리소스
        self.map: Map = Map()
        self.game_log: GameLog = GameLog()
        self.rng: RandomNumberGenerator = RandomNumberGenerator(seed)
        self.player_entity: Optional[int] = None
        self.player_pos: Point = Point(0, 0)
        self.run_state: RunState = RunState.PRE_RUN
        self.locale: str = locale

    # === 엔티티 ===

    def create_entity(self) -> EntityBuilder:
        entity = self._next_entity
        self._next_entity += 1
        self._alive.add(entity)
        return EntityBuilder(self, entity)

    def restore_entity(self, entity: int) -> EntityBuilder:
        """저장 파일의 엔티티 ID를 그대로 되살림"""
        if entity in self._alive:
            raise WorldError(f"이미 존재하는 엔티티입니다: {entity}")
        self._alive.add(entity)
        self._next_entity = max(self._next_entity, entity + 1)
        return EntityBuilder(self, entity)

    def is_alive(self, entity: int) -> bool:
        return entity in self._alive

    def entities(self) -> List[int]:
        return sorted(self._alive)

    def delete_entity(self, entity: int) -> None:
        """엔티티와 모든 컴포넌트를 즉시 삭제"""
        if entity not in self._alive:
            return
        self._alive.discard(entity)
        self._pending_deletes.discard(entity)
        for storage in self._storages.values():
            storage.pop(entity, None)

    def lazy_delete(self, entity: int) -> None:
        """maintain() 호출 시 삭제되도록 표시"""
        if entity in self._alive:
            self._pending_deletes.add(entity)

    def maintain(self) -> None:
        """지연 삭제 반영"""
        for entity in list(self._pending_deletes):
            self.delete_entity(entity)
        self._pending_deletes.clear()

    def advance_entity_counter(self, next_entity: int) -> None:
        """삭제된 ID가 재사용되지 않도록 다음 ID를 next_entity 이상으로 맞춤"""
        self._next_entity = max(self._next_entity, next_entity)

    @property
    def next_entity_id(self) -> int:
        return self._next_entity

    # === 컴포넌트 ===

    def register(self, component_type: type) -> None:
        self._storages.setdefault(component_type, {})

    def storage(self, component_type: Type[C]) -> Dict[int, C]:
        return self._storages.setdefault(component_type, {})

    def insert(self, entity: int, component: Any) -> None:
        if entity not in self._alive:
            raise WorldError(f"존재하지 않는 엔티티에 컴포넌트 추가 시도: {entity} <- {type(component).__name__}")
        self.storage(type(component))[entity] = component

    def remove(self, entity: int, component_type: Type[C]) -> Optional[C]:
        return self.storage(component_type).pop(entity, None)

    def get(self, entity: int, component_type: Type[C]) -> Optional[C]:
        return self.storage(component_type).get(entity)

    def has(self, entity: int, component_type: type) -> bool:
        return entity in self.storage(component_type)

    def clear_storage(self, component_type: type) -> None:
        self.storage(component_type).clear()

    def components_of(self, entity: int) -> Dict[type, Any]:
        """엔티티가 가진 모든 컴포넌트"""
        return {
            component_type: storage[entity]
            for component_type, storage in self._storages.items()
            if entity in storage
        }

    def join(self, *component_types: type) -> Iterator[Tuple[Any, ...]]:
        """모든 타입을 가진 엔티티를 ID 순으로 (entity, comp1, comp2, ...) 반환"""
        if not component_types:
            return
        storages = [self.storage(t) for t in component_types]
        smallest = min(storages, key=len)
        for entity in sorted(smallest.keys()):
            if all(entity in storage for storage in storages):
                yield (entity, *(storage[entity] for storage in storages))

    # === 리소스 도우미 ===

    def log(self, key: str, **kwargs) -> None:
        """현재 언어로 게임 로그 추가"""
        self.game_log.add(get_message(key, self.locale, **kwargs))
