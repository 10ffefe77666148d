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
import math

from mbtilestore.grid import GridError, ORIGIN_UL, origin_from_string
from mbtilestore.grid.resolutions import pyramid_res_level
from mbtilestore.srs import SRS
from mbtilestore.util.collections import ImmutableDictList

import logging
log = logging.getLogger(__name__)

GLOBAL_MERCATOR = 'GlobalMercator'
GLOBAL_SPHERICAL_MERCATOR = 'GlobalSphericalMercator'

EARTH_RADIUS = 6378137.0


class NamedGridList(ImmutableDictList):
    """
    `ImmutableDictList` of ``(level_name, value)`` pairs.
    """
    def __init__(self, items):
        ImmutableDictList.__init__(self, [(str(name), value) for name, value in items])


def global_spherical_mercator_grid(tile_size=(256, 256), levels=20):
    """
    Return the standard global web mercator grid with `levels` levels,
    starting with a single tile at level 0.
    """
    return TileGrid(3857, tile_size=tile_size, levels=levels,
                    name=GLOBAL_SPHERICAL_MERCATOR)


def global_mercator_grid(format, levels, tile_size=(256, 256)):
    """
    Return a global mercator grid that only contains the given `levels`.

    :param format: the image format of the tiles (e.g. ``'png'``)
    :param levels: iterable with the zoom level numbers
    """
    levels = sorted(set(int(l) for l in levels))
    if not levels:
        raise GridError('need at least one level for %s grid' % GLOBAL_MERCATOR)
    log.debug('%s grid for %s tiles with levels %s', GLOBAL_MERCATOR, format, levels)
    return TileGrid(3857, tile_size=tile_size, levels=levels,
                    name=GLOBAL_MERCATOR, format=format)


class TileGrid(object):
    """
    Regular tile pyramid. Level 0 covers the `bbox` with a single tile,
    each following level doubles the number of tiles in both directions.
    Tile rows count from the bottom (TMS) unless `origin` is ``'ul'``.

    A grid may only contain a subset of the pyramid. Levels are addressed
    by their number or by its string form.

    >>> grid = TileGrid(3857, levels=[3, 5])
    >>> list(grid.level_names())
    ['3', '5']
    >>> grid.grid_sizes['5']
    (32, 32)
    """

    def __init__(self, srs=3857, bbox=None, tile_size=(256, 256), levels=None,
                 origin='ll', name=None, format=None):
        """
        :param levels: the number of levels (int) or the level numbers
            of this grid (iterable of ints), 20 if ``None``
        """
        if isinstance(srs, (int, str)):
            srs = SRS(srs)
        self.srs = srs
        self.tile_size = tuple(tile_size)
        self.origin = origin_from_string(origin)
        self.flipped_y_axis = self.origin == ORIGIN_UL
        self.name = name
        self.format = format

        if levels is None:
            levels = 20
        if isinstance(levels, int):
            levels = range(levels)
        levels = list(levels)
        if not levels:
            raise GridError('grid requires at least one level')
        if min(levels) < 0:
            raise GridError('negative levels are not supported: %r' % (levels, ))

        self.bbox = tuple(bbox) if bbox is not None else self._world_bbox()

        width, height = self._bbox_size()
        initial_res = max(width / self.tile_size[0], height / self.tile_size[1])
        self.resolutions = NamedGridList(
            zip(levels, pyramid_res_level(initial_res, levels=levels)))
        self.levels = len(self.resolutions)
        self.grid_sizes = NamedGridList(
            (name, self._grid_size(res)) for name, res in self.resolutions.iteritems())

    def _world_bbox(self):
        if self.srs.is_latlong:
            return (-180.0, -90.0, 180.0, 90.0)
        half = math.pi * EARTH_RADIUS
        return (-half, -half, half, half)

    def _bbox_size(self):
        return self.bbox[2] - self.bbox[0], self.bbox[3] - self.bbox[1]

    def _grid_size(self, res):
        width, height = self._bbox_size()
        # round first, floating point errors would add a column/row
        cols = math.ceil(round(width / (res * self.tile_size[0]), 9))
        rows = math.ceil(round(height / (res * self.tile_size[1]), 9))
        return max(int(cols), 1), max(int(rows), 1)

    def level_names(self):
        return self.resolutions.names()

    def has_level(self, level):
        """
        >>> grid = TileGrid(levels=[0, 2])
        >>> grid.has_level(2), grid.has_level('2'), grid.has_level(1)
        (True, True, False)
        """
        return str(level) in self.resolutions

    def resolution(self, level):
        """
        Return the resolution of `level` in units/pixel.

        >>> '%.5f' % TileGrid(3857).resolution('4')
        '9783.93962'
        """
        try:
            return self.resolutions[str(level)]
        except KeyError:
            raise GridError('level %s not in %r' % (level, self))

    def tile_bbox(self, tile_coord):
        """
        Return the region covered by the tile ``(col, row, level)``.

        >>> grid = TileGrid(3857)
        >>> [round(v) for v in grid.tile_bbox((1, 0, 1))]
        [0, -20037508, 20037508, 0]
        """
        col, row, level = tile_coord
        res = self.resolution(level)
        tile_w = res * self.tile_size[0]
        tile_h = res * self.tile_size[1]

        minx = self.bbox[0] + col * tile_w
        if self.flipped_y_axis:
            maxy = self.bbox[3] - row * tile_h
            miny = maxy - tile_h
        else:
            miny = self.bbox[1] + row * tile_h
            maxy = miny + tile_h
        return minx, miny, minx + tile_w, maxy

    def limit_tile(self, tile_coord):
        """
        Return `tile_coord` if the tile is part of this grid, otherwise ``None``.

        >>> grid = TileGrid(3857)
        >>> grid.limit_tile((1, 2, 1)) is None
        True
        >>> grid.limit_tile((1, 2, 2))
        (1, 2, 2)
        """
        col, row, level = tile_coord
        if not self.has_level(level):
            return None
        cols, rows = self.grid_sizes[str(level)]
        if 0 <= col < cols and 0 <= row < rows:
            return tile_coord
        return None

    def __repr__(self):
        return '%s(%r, (%.4f, %.4f, %.4f, %.4f),...)' % (
            self.name or self.__class__.__name__, self.srs,
            self.bbox[0], self.bbox[1], self.bbox[2], self.bbox[3])
