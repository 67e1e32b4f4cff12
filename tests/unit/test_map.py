# -*- coding: utf-8 -*-
"""맵 생성 및 타일 유틸리티 테스트"""

import pytest

from src.rogue_engine.game.console import Console
from src.rogue_engine.game.map import (
    DIAGONAL_COST, MAP_HEIGHT, MAP_WIDTH, Map, TileType, distance2d, draw_map,
)
from src.rogue_engine.game.pathfinding import a_star_search
from src.rogue_engine.game.rect import Rect
from src.rogue_engine.game.rng import RandomNumberGenerator


class TestRect:

    def test_new_uses_width_and_height(self):
        rect = Rect.new(2, 3, 5, 4)
        assert (rect.x1, rect.y1, rect.x2, rect.y2) == (2, 3, 7, 7)

    def test_center_uses_floor_division(self):
        assert Rect(0, 0, 5, 5).center() == (2, 2)

    def test_intersect_includes_edges(self):
        a = Rect(0, 0, 5, 5)
        assert a.intersect(Rect(5, 5, 8, 8))
        assert not a.intersect(Rect(6, 0, 9, 5))


class TestMapBasics:

    def test_index_round_trip(self):
        game_map = Map(10, 8)
        idx = game_map.xy_idx(3, 4)
        assert idx == 43
        assert game_map.idx_xy(idx) == (3, 4)

    def test_new_map_is_all_walls(self):
        game_map = Map(10, 8)
        assert all(tile == TileType.WALL for tile in game_map.tiles)
        assert not any(game_map.revealed_tiles)

    def test_apply_room_carves_interior_only(self):
        game_map = Map(10, 8)
        game_map.apply_room_to_map(Rect(1, 1, 4, 4))
        assert game_map.tiles[game_map.xy_idx(1, 1)] == TileType.WALL
        assert game_map.tiles[game_map.xy_idx(2, 2)] == TileType.FLOOR
        assert game_map.tiles[game_map.xy_idx(4, 4)] == TileType.FLOOR
        assert game_map.tiles[game_map.xy_idx(5, 5)] == TileType.WALL

    def test_tunnels(self):
        game_map = Map(10, 8)
        game_map.apply_horizontal_tunnel(6, 2, 3)
        game_map.apply_vertical_tunnel(1, 5, 7)
        assert all(game_map.tiles[game_map.xy_idx(x, 3)] == TileType.FLOOR for x in range(2, 7))
        assert all(game_map.tiles[game_map.xy_idx(7, y)] == TileType.FLOOR for y in range(1, 6))

    def test_distance2d(self):
        assert distance2d(0, 0, 3, 4) == pytest.approx(5.0)


class TestExits:

    def _open_map(self) -> Map:
        game_map = Map(10, 10)
        game_map.apply_room_to_map(Rect(0, 0, 8, 8))
        game_map.populate_blocked()
        return game_map

    def test_open_tile_has_eight_exits(self):
        game_map = self._open_map()
        exits = game_map.get_available_exits(game_map.xy_idx(4, 4))
        assert len(exits) == 8
        costs = sorted(cost for _idx, cost in exits)
        assert costs[:4] == [1.0] * 4
        assert costs[4:] == [DIAGONAL_COST] * 4

    def test_blocked_tiles_are_not_exits(self):
        game_map = self._open_map()
        game_map.blocked[game_map.xy_idx(5, 4)] = True
        exits = [idx for idx, _cost in game_map.get_available_exits(game_map.xy_idx(4, 4))]
        assert game_map.xy_idx(5, 4) not in exits

    def test_corner_next_to_walls(self):
        game_map = self._open_map()
        exits = game_map.get_available_exits(game_map.xy_idx(1, 1))
        assert len(exits) == 3


class TestRoomsAndCorridors:

    def test_same_seed_same_map(self):
        a = Map.new_map_rooms_and_corridors(RandomNumberGenerator(42))
        b = Map.new_map_rooms_and_corridors(RandomNumberGenerator(42))
        assert a.tiles == b.tiles
        assert a.rooms == b.rooms

    def test_rooms_do_not_overlap_and_fit(self):
        game_map = Map.new_map_rooms_and_corridors(RandomNumberGenerator(7))
        assert game_map.width == MAP_WIDTH
        assert game_map.height == MAP_HEIGHT
        assert len(game_map.rooms) > 1

        for i, room in enumerate(game_map.rooms):
            assert room.x1 >= 0 and room.y1 >= 0
            assert room.x2 < MAP_WIDTH and room.y2 < MAP_HEIGHT
            for other in game_map.rooms[i + 1:]:
                assert not room.intersect(other)

    def test_room_centers_are_floor(self):
        game_map = Map.new_map_rooms_and_corridors(RandomNumberGenerator(3))
        for room in game_map.rooms:
            x, y = room.center()
            assert game_map.tiles[game_map.xy_idx(x, y)] == TileType.FLOOR
        assert game_map.first_room_center() == game_map.rooms[0].center()

    @pytest.mark.parametrize("seed", [1, 7, 42, 1234, 9999])
    def test_every_room_reachable_from_first(self, seed):
        game_map = Map.new_map_rooms_and_corridors(RandomNumberGenerator(seed))
        game_map.populate_blocked()
        start = game_map.xy_idx(*game_map.rooms[0].center())

        for room in game_map.rooms[1:]:
            path = a_star_search(start, game_map.xy_idx(*room.center()), game_map)
            assert path.success, f"seed={seed} room={room}"

    @pytest.mark.parametrize("seed", [3, 11, 2024])
    def test_rooms_joined_by_straight_corridors(self, seed):
        # 대각선 없이 상하좌우 이동만으로 모든 방 중심에 닿아야 함 (L자 통로)
        game_map = Map.new_map_rooms_and_corridors(RandomNumberGenerator(seed))
        start = game_map.rooms[0].center()

        reached = {start}
        frontier = [start]
        while frontier:
            x, y = frontier.pop()
            for nx, ny in ((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)):
                if (nx, ny) in reached or not game_map.in_bounds(nx, ny):
                    continue
                if game_map.tiles[game_map.xy_idx(nx, ny)] == TileType.FLOOR:
                    reached.add((nx, ny))
                    frontier.append((nx, ny))

        for room in game_map.rooms:
            assert room.center() in reached

    def test_border_stays_wall(self):
        game_map = Map.new_map_rooms_and_corridors(RandomNumberGenerator(11))
        for x in range(game_map.width):
            assert game_map.tiles[game_map.xy_idx(x, 0)] == TileType.WALL
        for y in range(game_map.height):
            assert game_map.tiles[game_map.xy_idx(0, y)] == TileType.WALL


def test_draw_map_only_revealed_tiles():
    game_map = Map(10, 8)
    game_map.apply_room_to_map(Rect(0, 0, 5, 5))
    console = Console(10, 8)

    floor_idx = game_map.xy_idx(2, 2)
    wall_idx = game_map.xy_idx(0, 0)
    game_map.revealed_tiles[floor_idx] = True
    game_map.visible_tiles[floor_idx] = True
    game_map.revealed_tiles[wall_idx] = True

    draw_map(game_map, console)

    assert console.get(2, 2).glyph == "."
    assert console.get(0, 0).glyph == "#"
    # 보이지 않는 벽은 회색조
    wall_fg = console.get(0, 0).fg
    assert wall_fg.r == wall_fg.g == wall_fg.b
    assert console.get(3, 3).glyph == " "
