import math
import struct

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from mzkit.heightmap import INVALID_HEIGHT, HeightMap, HeightMesh, Split
from mzkit.vec2 import Vec2


def make_map(nx, ny, cell_size=1.0, origin=(0.0, 0.0), fn=None):
    hm = HeightMap()
    hm.resize(nx, ny, cell_size, origin)
    if fn is not None:
        for y in range(ny):
            for x in range(nx):
                hm[x, y] = fn(x, y)
        hm.recompute_extents()
    return hm


def test_new_map_is_empty():
    hm = HeightMap()
    assert hm.empty
    assert hm.heights == []
    assert hm.min_height == INVALID_HEIGHT
    assert hm.max_height == INVALID_HEIGHT


def test_resize_fills_invalid():
    hm = make_map(3, 2)
    assert len(hm) == 6
    assert all(h == INVALID_HEIGHT for h in hm.heights)


def test_resize_to_fit_allocates_heights():
    hm = HeightMap()
    hm.resize_to_fit((0.0, 0.0), (2.0, 3.0), 1.0)
    assert len(hm.heights) == hm.size == hm.nx * hm.ny
    assert hm.size > 0


def test_resize_to_fit_inverted_is_empty():
    hm = HeightMap()
    hm.resize_to_fit((2.0, 2.0), (0.0, 0.0), 1.0)
    assert hm.empty
    assert hm.heights == []


def test_correct_height():
    assert HeightMap.correct_height(INVALID_HEIGHT, 7.0) == 7.0
    assert HeightMap.correct_height(2.5, 7.0) == 2.5


def test_corrected_height_off_map_and_missing():
    hm = make_map(2, 2)
    hm[1, 1] = 4.0
    assert hm.corrected_height(1, 1, -1.0) == 4.0
    assert hm.corrected_height(0, 0, -1.0) == -1.0
    assert hm.corrected_height(5, 0, -1.0) == -1.0
    assert hm.corrected_height(-1, 0, -1.0) == -1.0


def test_tuple_and_flat_access_agree():
    hm = make_map(3, 2)
    hm[2, 1] = 9.0
    assert hm[hm.sub2ind(2, 1)] == 9.0
    with pytest.raises(IndexError):
        hm[3, 0]


def test_recompute_extents_ignores_invalid():
    hm = make_map(3, 3)
    values = {(0, 0): 4.0, (2, 1): -1.5, (1, 2): 8.0}
    for cell, h in values.items():
        hm[cell] = h
    hm.recompute_extents()
    assert hm.min_height == min(values.values())
    assert hm.max_height == max(values.values())


def test_compute_extents_all_invalid():
    hm = make_map(2, 2)
    assert hm.compute_extents((0, 0), (2, 2)) == (INVALID_HEIGHT, INVALID_HEIGHT)


def test_compute_bbox():
    hm = make_map(2, 3, 0.5, (1.0, 2.0), lambda x, y: x + y)
    lo, hi = hm.compute_bbox()
    box = hm.bbox()
    assert lo == (box[0].x, box[0].y, hm.min_height)
    assert hi == (box[1].x, box[1].y, hm.max_height)
    assert HeightMap().compute_bbox() is None


def test_save_load_round_trip(tmp_path):
    hm = make_map(3, 2, 0.25, (-1.0, 4.0), lambda x, y: x * 2.0 - y)
    hm[0, 1] = INVALID_HEIGHT
    path = tmp_path / "map.bin"
    hm.save(path)

    loaded = HeightMap()
    loaded.load(path)
    assert loaded.dims == hm.dims
    assert loaded.size == hm.size
    assert loaded.origin == hm.origin
    assert loaded.cell_size == hm.cell_size
    assert loaded.heights == hm.heights
    assert (loaded.min_height, loaded.max_height) == hm.compute_extents(
        (0, 0), hm.dims
    )


def test_save_file_layout(tmp_path):
    hm = make_map(2, 2, 1.0, fn=lambda x, y: 1.0)
    path = tmp_path / "map.bin"
    hm.save(path)
    raw = path.read_bytes()
    assert len(raw) == 6 * 8 + 4 * 8
    assert struct.unpack_from("<QQQ", raw) == (2, 2, 4)


def test_load_rejects_size_mismatch(tmp_path):
    path = tmp_path / "bad.bin"
    path.write_bytes(struct.pack("<QQQddd", 2, 2, 5, 0.0, 0.0, 1.0) + bytes(40))
    with pytest.raises(ValueError):
        HeightMap().load(path)


def test_load_rejects_truncated(tmp_path):
    path = tmp_path / "short.bin"
    path.write_bytes(struct.pack("<QQQddd", 2, 2, 4, 0.0, 0.0, 1.0) + bytes(8))
    with pytest.raises(ValueError):
        HeightMap().load(path)


@settings(max_examples=25)
@given(
    st.integers(1, 4),
    st.integers(1, 4),
    st.lists(st.floats(-1e6, 1e6), min_size=16, max_size=16),
)
def test_save_load_property(tmp_path_factory, nx, ny, values):
    hm = make_map(nx, ny)
    for i in range(hm.size):
        hm[i] = values[i]
    path = tmp_path_factory.mktemp("hm") / "m.bin"
    hm.save(path)
    loaded = HeightMap()
    loaded.load(path)
    assert loaded.heights == hm.heights
    assert loaded.min_height == min(hm.heights)


def test_bound_points():
    pts = [(1.0, 5.0, 0.0), (-2.0, 3.0, 9.0), (4.0, -1.0, 2.0)]
    lo, hi = HeightMap.bound_points(pts, (0, 1, 2))
    assert lo == Vec2(-2.0, -1.0)
    assert hi == Vec2(4.0, 5.0)
    assert HeightMap.bound_points([], (0, 1, 2)) is None


def test_bin_points_and_median_map():
    hm = make_map(2, 2)
    pts = [
        (0.5, 0.5, 3.0),
        (0.5, 0.5, 1.0),
        (0.5, 0.5, 2.0),
        (1.5, 1.5, 5.0),
        (1.5, 1.5, 4.0),
    ]
    bins = hm.bin_points(pts, (0, 1, 2))
    assert sorted(bins[0]) == [1.0, 2.0, 3.0]
    assert sorted(bins[3]) == [4.0, 5.0]
    hm.median_map(bins, 1)
    assert bins == []
    assert hm[0, 0] == 2.0
    assert hm[1, 1] == 5.0
    assert hm[1, 0] == INVALID_HEIGHT
    assert (hm.min_height, hm.max_height) == (2.0, 5.0)


def test_median_map_keeps_higher_and_respects_min_count():
    hm = make_map(2, 1)
    hm[0, 0] = 10.0
    bins = hm.bin_points([(0.5, 0.5, 1.0), (1.5, 0.5, 3.0)], (0, 1, 2))
    hm.median_map(bins, 2)
    assert hm[0, 0] == 10.0
    assert hm[1, 0] == INVALID_HEIGHT


def test_bin_points_uses_axes():
    hm = make_map(2, 2)
    bins = hm.bin_points([(7.0, 1.5, 0.5)], (2, 1, 0))
    assert bins[hm.sub2ind(0, 1)] == [7.0]


def test_median_map_wrong_bin_count():
    hm = make_map(2, 2)
    with pytest.raises(ValueError):
        hm.median_map([[1.0]], 1)


@pytest.mark.parametrize("cell", [(0, 0), (1, 1), (3, 2), (0, 2), (3, 0)])
def test_slope_of_plane(cell):
    a, b = 2.0, 3.0
    hm = make_map(4, 3, 1.0, fn=lambda x, y: a * x + b * y)
    s = hm.slope(*cell)
    assert s.x == pytest.approx(a)
    assert s.y == pytest.approx(b)


def test_slope_respects_cell_size():
    hm = make_map(3, 3, 0.5, fn=lambda x, y: float(x))
    assert hm.slope(1, 1).x == pytest.approx(1.0 / 0.5)


def test_slope_off_map_and_isolated():
    hm = make_map(3, 3)
    assert hm.slope(5, 5) == Vec2(0.0, 0.0)
    hm[1, 1] = 4.0
    assert hm.slope(1, 1) == Vec2(0.0, 0.0)


def test_normal_is_unit_and_opposes_slope():
    a, b = 2.0, -1.0
    hm = make_map(3, 3, 1.0, fn=lambda x, y: a * x + b * y)
    n = hm.normal(1, 1)
    assert math.sqrt(sum(c * c for c in n)) == pytest.approx(1.0)
    assert n[0] == pytest.approx(-a * n[2])
    assert n[1] == pytest.approx(-b * n[2])
    assert n[2] > 0


def test_generate_mesh_full_grid():
    hm = make_map(3, 4, 1.0, fn=lambda x, y: float(x * y))
    mesh = hm.generate_mesh(0.0, (0, 1, 2))
    assert isinstance(mesh, HeightMesh)
    assert len(mesh.verts) == hm.size
    assert len(mesh.faces) == 2 * (hm.nx - 1) * (hm.ny - 1)
    assert all(0 <= i < hm.size for face in mesh.faces for i in face)
    for i, v in enumerate(mesh.verts):
        cc = hm.cell_center_of_index(i)
        assert v == (cc.x, cc.y, hm[i])


def test_generate_mesh_flat_quad_diagonal():
    hm = make_map(2, 2, 1.0, fn=lambda x, y: 0.0)
    mesh = hm.generate_mesh(0.0, (0, 1, 2))
    assert mesh.faces == [(2, 0, 1), (2, 1, 3)]


def test_generate_mesh_missing_corner():
    hm = make_map(2, 2, 1.0, fn=lambda x, y: 1.0)
    hm[0, 1] = INVALID_HEIGHT
    hm.recompute_extents()
    mesh = hm.generate_mesh(0.0, (0, 1, 2))
    assert mesh.faces == [(0, 1, 3)]
    assert mesh.verts[2][2] == INVALID_HEIGHT


def test_generate_mesh_drop_edges():
    hm = make_map(2, 2, 1.0, fn=lambda x, y: 1.0 + x)
    hm[0, 1] = INVALID_HEIGHT
    hm.recompute_extents()
    mesh = hm.generate_mesh(0.5, (0, 1, 2))
    assert mesh.verts[2][2] == hm.min_height - 0.5
    assert len(mesh.faces) == 2


def test_generate_mesh_axis_permutation():
    hm = make_map(2, 2, 1.0, fn=lambda x, y: 5.0 + x)
    mesh = hm.generate_mesh(0.0, (0, 2, 1))
    for i, v in enumerate(mesh.verts):
        cc = hm.cell_center_of_index(i)
        assert v == (cc.x, hm[i], cc.y)


def test_subdivide_flat_map_single_node():
    hm = make_map(4, 4, 1.0, fn=lambda x, y: 2.0)
    splits = hm.subdivide()
    assert len(splits) == 1
    root = splits[0]
    assert isinstance(root, Split)
    assert root.parent_index is None
    assert root.child_index == [None, None]
    assert (root.s0, root.s1) == ((0, 0), (4, 4))


def test_subdivide_all_invalid_is_empty():
    assert make_map(3, 3).subdivide() == []


def test_subdivide_tree_consistency():
    hm = make_map(5, 3, 1.0, fn=lambda x, y: float(x + 2 * y))
    hm[4, 2] = INVALID_HEIGHT
    hm.recompute_extents()
    splits = hm.subdivide()
    root = splits[0]
    assert root.box[0][2] == hm.min_height
    assert root.box[1][2] == hm.max_height
    for idx, node in enumerate(splits):
        lo, hi = hm.compute_extents(node.s0, node.s1)
        assert node.box[0][2] == lo and node.box[1][2] == hi
        children = [c for c in node.child_index if c is not None]
        if lo == hi:
            assert children == []
        else:
            assert children
        for c in children:
            child = splits[c]
            assert child.parent_index == idx
            assert node.s0[0] <= child.s0[0] and child.s1[0] <= node.s1[0]
            assert node.s0[1] <= child.s0[1] and child.s1[1] <= node.s1[1]
    leaf_cells = sum(
        (n.s1[0] - n.s0[0]) * (n.s1[1] - n.s0[1])
        for n in splits
        if n.child_index == [None, None]
    )
    assert leaf_cells == hm.size