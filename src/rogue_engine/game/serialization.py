# -*- coding: utf-8 -*-
"""World <-> JSON 호환 딕셔너리 변환 (게임 저장/불러오기)"""

import dataclasses
import logging
from typing import Any, Dict

from ..utils.exceptions import SaveGameError
from .components import ALL_COMPONENTS, PERSISTENT_COMPONENTS, Player
from .game_log import GameLog
from .map import Map, TileType
from .rect import Rect
from .types import Point, RunState
from .world import World

logger = logging.getLogger(__name__)

SAVE_FORMAT_VERSION = 1


def _component_to_dict(component: Any) -> Dict[str, Any]:
    if hasattr(component, "to_dict"):
        return component.to_dict()
    return dataclasses.asdict(component)


def _component_from_dict(name: str, data: Dict[str, Any]) -> Any:
    component_type = PERSISTENT_COMPONENTS.get(name)
    if component_type is None:
        raise SaveGameError(f"알 수 없는 컴포넌트: {name}")
    if hasattr(component_type, "from_dict"):
        return component_type.from_dict(data)
    return component_type(**data)


def _map_to_dict(game_map: Map) -> Dict[str, Any]:
    return {
        "width": game_map.width,
        "height": game_map.height,
        "tiles": "".join(tile.value for tile in game_map.tiles),
        "revealed": "".join("1" if revealed else "0" for revealed in game_map.revealed_tiles),
        "rooms": [[room.x1, room.y1, room.x2, room.y2] for room in game_map.rooms],
    }


def _map_from_dict(data: Dict[str, Any]) -> Map:
    game_map = Map(data["width"], data["height"])
    tiles = data["tiles"]
    revealed = data["revealed"]
    if len(tiles) != len(game_map.tiles) or len(revealed) != len(game_map.tiles):
        raise SaveGameError("맵 크기가 저장 데이터와 일치하지 않습니다")

    game_map.tiles = [TileType(char) for char in tiles]
    game_map.revealed_tiles = [char == "1" for char in revealed]
    game_map.rooms = [Rect(*room) for room in data["rooms"]]
    return game_map


def save_world(world: World) -> Dict[str, Any]:
    """World를 저장 가능한 딕셔너리로 변환"""
    entities: Dict[str, Dict[str, Any]] = {}
    for entity in world.entities():
        components = {
            component_type.__name__: _component_to_dict(component)
            for component_type, component in world.components_of(entity).items()
            if component_type.__name__ in PERSISTENT_COMPONENTS
        }
        if components:
            entities[str(entity)] = components

    return {
        "version": SAVE_FORMAT_VERSION,
        "locale": world.locale,
        "next_entity": world.next_entity_id,
        "player_entity": world.player_entity,
        "player_pos": [world.player_pos.x, world.player_pos.y],
        "map": _map_to_dict(world.map),
        "log": list(world.game_log.entries),
        "rng": world.rng.get_state(),
        "entities": entities,
    }


def load_world(data: Dict[str, Any]) -> World:
    """save_world() 결과로부터 World 복원. 시스템 재실행을 위해 PRE_RUN 상태로 시작"""
    try:
        if data.get("version") != SAVE_FORMAT_VERSION:
            raise SaveGameError(f"지원하지 않는 저장 형식 버전: {data.get('version')}")

        world = World(locale=data.get("locale", "en"))
        for component_type in ALL_COMPONENTS:
            world.register(component_type)

        world.map = _map_from_dict(data["map"])
        world.game_log = GameLog(data.get("log", []))
        world.rng.set_state(data["rng"])

        for entity_key, components in data["entities"].items():
            builder = world.restore_entity(int(entity_key))
            for name, component_data in components.items():
                builder.with_(_component_from_dict(name, component_data))

        world.player_entity = data["player_entity"]
        if world.player_entity is None or not world.has(world.player_entity, Player):
            raise SaveGameError("저장 데이터에 플레이어가 없습니다")

        x, y = data["player_pos"]
        world.player_pos = Point(x, y)
        world.run_state = RunState.PRE_RUN

        world.advance_entity_counter(data.get("next_entity", 0))

        logger.info(f"저장된 게임 복원: 엔티티 {len(world.entities())}개")
        return world

    except SaveGameError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SaveGameError(f"저장 데이터가 손상되었습니다: {e}") from e
