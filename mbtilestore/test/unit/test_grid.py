# This file is part of the MBTileStore project.
# Copyright (C) 2026 MBTileStore contributors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import pytest

from mbtilestore.grid import GridError
from mbtilestore.grid.tile_grid import (
    TileGrid,
    global_mercator_grid,
    global_spherical_mercator_grid,
    GLOBAL_MERCATOR,
    GLOBAL_SPHERICAL_MERCATOR,
)
from mbtilestore.srs import SRS


class TestGlobalSphericalMercatorGrid(object):
    def setup_method(self):
        self.grid = global_spherical_mercator_grid()

    def test_bbox(self):
        assert self.grid.bbox == pytest.approx(
            (-20037508.342789, -20037508.342789, 20037508.342789, 20037508.342789))
        assert self.grid.srs == SRS(3857)
        assert self.grid.name == GLOBAL_SPHERICAL_MERCATOR

    def test_levels(self):
        assert self.grid.levels == 20
        assert list(self.grid.level_names())[:3] == ['0', '1', '2']
        assert self.grid.has_level(19)
        assert not self.grid.has_level(20)

    def test_resolution(self):
        assert self.grid.resolution(0) == pytest.approx(156543.033928)
        assert self.grid.resolution('1') == pytest.approx(156543.033928 / 2)
        with pytest.raises(GridError):
            self.grid.resolution(20)

    def test_grid_sizes(self):
        assert self.grid.grid_sizes['0'] == (1, 1)
        assert self.grid.grid_sizes['3'] == (8, 8)

    def test_tms_origin(self):
        assert self.grid.origin == 'll'
        minx, miny, maxx, maxy = self.grid.tile_bbox((0, 0, 1))
        assert (minx, miny) == pytest.approx(self.grid.bbox[:2])
        assert (maxx, maxy) == pytest.approx((0, 0), abs=1e-6)

    def test_tile_size(self):
        grid = global_spherical_mercator_grid(tile_size=(512, 512), levels=5)
        assert grid.levels == 5
        assert grid.tile_size == (512, 512)
        assert grid.resolution(0) == pytest.approx(156543.033928 / 2)


class TestGlobalMercatorGrid(object):

    def test_levels(self):
        grid = global_mercator_grid('jpg', [12, 3, 5, 3])
        assert list(grid.level_names()) == ['3', '5', '12']
        assert grid.levels == 3
        assert grid.name == GLOBAL_MERCATOR
        assert grid.format == 'jpg'

    def test_resolution_by_level_number(self):
        full = global_spherical_mercator_grid()
        grid = global_mercator_grid('png', ['4', '7'])
        assert grid.resolution(4) == full.resolution(4)
        assert grid.resolution(7) == full.resolution(7)
        assert grid.grid_sizes['7'] == (128, 128)
        assert not grid.has_level(5)

    def test_no_levels(self):
        with pytest.raises(GridError):
            global_mercator_grid('png', [])

    def test_repr(self):
        assert repr(global_mercator_grid('png', [0])).startswith("GlobalMercator(SRS('EPSG:3857')")


class TestTileGrid(object):

    def test_negative_level(self):
        with pytest.raises(GridError):
            TileGrid(levels=[-1, 0])

    def test_no_levels(self):
        with pytest.raises(GridError):
            TileGrid(levels=0)

    def test_latlong(self):
        grid = TileGrid(4326, levels=3)
        assert grid.bbox == (-180.0, -90.0, 180.0, 90.0)
        assert grid.resolution(0) == pytest.approx(360 / 256)
        assert grid.grid_sizes['0'] == (1, 1)
        assert grid.grid_sizes['1'] == (2, 1)

    def test_tile_bbox(self):
        grid = global_mercator_grid('png', [2, 3])
        minx, miny, maxx, maxy = grid.tile_bbox((0, 0, '3'))
        assert (minx, miny) == pytest.approx(grid.bbox[:2])
        assert maxx - minx == pytest.approx(grid.resolution(3) * 256)
        assert maxy - miny == pytest.approx(grid.resolution(3) * 256)

    def test_tile_bbox_unknown_level(self):
        grid = global_mercator_grid('png', [2, 3])
        with pytest.raises(GridError):
            grid.tile_bbox((0, 0, 4))

    def test_upper_left_origin(self):
        grid = TileGrid(levels=3, origin='nw')
        assert grid.flipped_y_axis
        assert grid.tile_bbox((0, 0, 1))[3] == pytest.approx(grid.bbox[3])

    @pytest.mark.parametrize('coord,expected', [
        ((0, 0, 0), (0, 0, 0)),
        ((3, 3, 2), (3, 3, 2)),
        ((4, 0, 2), None),
        ((0, -1, 2), None),
        ((0, 0, 9), None),
    ])
    def test_limit_tile(self, coord, expected):
        grid = TileGrid(levels=[0, 1, 2])
        assert grid.limit_tile(coord) == expected
