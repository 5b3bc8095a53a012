import math

import pytest

from catan_lite.engine.board import Board
from catan_lite.gui.geometry import BoardGeometry, point_in_polygon, point_to_segment_distance


@pytest.fixture(scope="module")
def board() -> Board:
    return Board.standard()


def test_board_geometry_margin_alignment(board) -> None:
    geometry = BoardGeometry(board, scale=1.5, margin=24.0)

    positions = [geometry.vertex_position(v.vertex_id) for v in board.vertices]

    min_x = min(pos[0] for pos in positions)
    min_y = min(pos[1] for pos in positions)

    assert math.isclose(min_x, 24.0, abs_tol=1e-6)
    assert math.isclose(min_y, 24.0, abs_tol=1e-6)


def test_board_geometry_origin_offset(board) -> None:
    geometry = BoardGeometry(board, margin=10.0, origin=(100.0, 50.0))

    positions = [geometry.vertex_position(v.vertex_id) for v in board.vertices]

    assert math.isclose(min(p[0] for p in positions), 110.0, abs_tol=1e-6)
    assert math.isclose(min(p[1] for p in positions), 60.0, abs_tol=1e-6)


def test_board_geometry_relative_distance_scaling(board) -> None:
    scale = 0.7
    geometry = BoardGeometry(board, scale=scale, margin=20.0)

    vertex_a = board.vertices[0].position
    vertex_b = board.vertices[1].position

    screen_a = geometry.vertex_position(0)
    screen_b = geometry.vertex_position(1)

    assert math.isclose(screen_b[0] - screen_a[0], (vertex_b[0] - vertex_a[0]) * scale, abs_tol=1e-6)
    assert math.isclose(screen_b[1] - screen_a[1], (vertex_b[1] - vertex_a[1]) * scale, abs_tol=1e-6)


def test_board_geometry_surface_size_matches_bounds(board) -> None:
    scale = 1.2
    margin = 30.0
    geometry = BoardGeometry(board, scale=scale, margin=margin)

    width, height = geometry.surface_size

    scaled_positions = [
        (vertex.position[0] * scale, vertex.position[1] * scale) for vertex in board.vertices
    ]
    expected_width = max(x for x, _ in scaled_positions) - min(x for x, _ in scaled_positions)
    expected_height = max(y for _, y in scaled_positions) - min(y for _, y in scaled_positions)

    assert math.isclose(width, expected_width + 2 * margin, abs_tol=1e-6)
    assert math.isclose(height, expected_height + 2 * margin, abs_tol=1e-6)


def test_tile_polygon_corners_are_vertices(board) -> None:
    geometry = BoardGeometry(board)
    for tile in board.tiles:
        polygon = geometry.tile_polygon(tile.tile_id)
        assert len(polygon) == 6
        for corner in polygon:
            assert geometry.vertex_at(corner, radius=0.5) in board.tile_vertices(tile.tile_id)


def test_vertex_hit_test(board) -> None:
    geometry = BoardGeometry(board)
    for vertex in board.vertices:
        x, y = geometry.vertex_position(vertex.vertex_id)
        assert geometry.vertex_at((x + 3.0, y - 4.0)) == vertex.vertex_id
    assert geometry.vertex_at((-500.0, -500.0)) is None


def test_edge_hit_test(board) -> None:
    geometry = BoardGeometry(board)
    for edge in board.edges:
        (ax, ay), (bx, by) = geometry.edge_segment(edge.edge_id)
        midpoint = ((ax + bx) / 2, (ay + by) / 2)
        assert geometry.edge_at(midpoint) == edge.edge_id
    assert geometry.edge_at((-500.0, -500.0)) is None


def test_tile_hit_test(board) -> None:
    geometry = BoardGeometry(board)
    for tile in board.tiles:
        assert geometry.tile_at(geometry.tile_center(tile.tile_id)) == tile.tile_id
    assert geometry.tile_at((-500.0, -500.0)) is None


def test_point_helpers() -> None:
    square = [(0.0, 0.0), (10.0, 0.0), (10.0, 10.0), (0.0, 10.0)]
    assert point_in_polygon(5.0, 5.0, square)
    assert not point_in_polygon(15.0, 5.0, square)
    assert not point_in_polygon(1.0, 1.0, square[:2])

    assert math.isclose(point_to_segment_distance((5.0, 3.0), (0.0, 0.0), (10.0, 0.0)), 3.0)
    assert math.isclose(point_to_segment_distance((13.0, 4.0), (0.0, 0.0), (10.0, 0.0)), 5.0)
    assert math.isclose(point_to_segment_distance((3.0, 4.0), (0.0, 0.0), (0.0, 0.0)), 5.0)
