# mzkit

A small library of geometry and data-structure helpers:

- `mzkit.vec2`, `mzkit.vec4`: immutable vectors `Vec2` and `Vec4` with
  arithmetic, norms, dot products, clamped `lerp` and `smoothstep`.
  `Vec2` also has `cross`, `angle` and `from_angle`; `Vec4` has `proj`,
  `trunc` and `infnorm`.
- `mzkit.mat3`: `Mat3`, a mutable row-major 3×3 matrix with `transpose`,
  `determinant`, `inverse` (raises `ValueError` when singular), `cross`
  (skew-symmetric matrix), `outer`, row and column access, and products
  with matrices, scalars and 3-vectors.
- `mzkit.bresenham`: `bresenham2d` and `bresenham3d` are generators that
  yield the integer cells on a line, both end cells included.
- `mzkit.grid2`: `Grid2`, a regular 2-D grid of square cells that maps
  between world coordinates and cells (`floor_cell`, `ceil_cell`,
  `nearest_cell`, `cell_center`, `sub2ind`, `ind2sub`) and does bilinear
  sampling of flat per-cell data (`sample`).
- `mzkit.heightmap`: `HeightMap`, a `Grid2` holding one height per cell,
  with `HeightMap.INVALID_HEIGHT` marking missing cells. It bins point
  clouds (`bin_points`), raises cells to their bin medians (`median_map`),
  gives slopes and unit normals, builds a triangle mesh (`generate_mesh`,
  returning a `HeightMesh`), subdivides itself into a tree of `Split`
  boxes (`subdivide`), and saves and loads a little-endian binary file.
- `mzkit.chomputil`: NumPy helpers for symmetric banded matrices: banded
  products (`diag_mul`), skyline Cholesky factorisation and solves
  (`skyline_chol`, `skyline_chol_solve`, `skyline_chol_solve_multi`),
  Taylor expansion of a state (`get_pos`) and the endpoint terms of a
  smoothing objective (`create_b_matrix`).
- `mzkit.tokenizer`: `SimpleTokenizer`, which reads whitespace-separated
  words and numbers from a string or text stream, skips `#` comments, and
  converts lengths (`m`, `cm`, `mm`, `ft`, `in`) to meters and angles
  (`rad`, `deg`) to radians. Bad input raises `TokenizerError`.
- `mzkit.tinydom`: a small XML document model (`Element`, `CharacterData`,
  `Attribute`) with `parse`, `parse_string`, `unparse`,
  `unparse_to_string`, `escape` and `unescape`. Malformed documents and
  unconvertible attribute values raise `TinyDomError`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from mzkit.vec2 import Vec2
from mzkit.bresenham import bresenham2d
from mzkit.tinydom import parse_string, unparse_to_string

print(Vec2(3, 4).norm())                  # 5.0
print(list(bresenham2d((0, 0), (3, 1))))  # cells from (0, 0) to (3, 1)

root = parse_string('<robot name="arm"><link/></robot>')
print(root.attribute("name"))             # arm
print(unparse_to_string(root))
```

```python
from mzkit.tokenizer import SimpleTokenizer

tok = SimpleTokenizer("# size\n12 in 90 deg")
print(tok.parse_length_to_meters())   # about 0.3048
print(tok.parse_angle_to_radians())   # about 1.5708
```

```python
from mzkit.heightmap import HeightMap

hm = HeightMap()
hm.resize(3, 3, 1.0)
hm[1, 1] = 2.0
hm.recompute_extents()
print(hm.min_height, hm.max_height)   # 2.0 2.0
print(len(hm.subdivide()))            # 1
```

## What it does not do

The package is a library only: it installs no command-line program. It
draws nothing; `HeightMesh` holds vertices and triangles but has no
rendering or mesh-file output.