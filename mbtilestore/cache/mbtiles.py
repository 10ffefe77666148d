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

from types import MappingProxyType

from mbtilestore.cache import schema
from mbtilestore.cache.base import TileCacheBase, ReadOnlyCacheError
from mbtilestore.cache.pool import ConnectionString
from mbtilestore.cache.schema import MBTilesType, MBTilesFormat, DEFAULT_EXTENT
from mbtilestore.config import ConfigurationError
from mbtilestore.grid.tile_grid import global_mercator_grid, global_spherical_mercator_grid

import logging
log = logging.getLogger(__name__)


TILE_DATA_SQL = 'SELECT tile_data FROM "tiles" WHERE zoom_level=? AND tile_row=? AND tile_column=?'


class MBTilesCache(TileCacheBase):
    """
    Read-only access to the tiles of an MBTiles file.

    The tile schema is detected once from the file itself: the layer type,
    the image format and the bounds from the metadata table. If the file
    contains a ``map`` table, the stored levels and the column/row range
    of each level are read from the tiles and requests outside of these
    ranges are answered without a query.

    :param mbtile_file: file name or `ConnectionString` of the MBTiles file
    :param pool: the `ConnectionPool` that provides the connection
    :param tile_grid: use this grid instead of detecting the schema
    :param layer_type: use this `MBTilesType` instead of the metadata
    """
    def __init__(self, mbtile_file, pool, tile_grid=None, layer_type=MBTilesType.NONE,
                 tile_size=(256, 256), levels=20):
        if pool is None:
            raise ConfigurationError('MBTilesCache requires a connection pool')
        self.pool = pool

        if isinstance(mbtile_file, ConnectionString):
            self.connection_string = mbtile_file
        else:
            self.connection_string = pool.connection_string(mbtile_file)
        self.mbtile_file = self.connection_string.database_path

        self._format = MBTilesFormat.PNG
        self._extent = DEFAULT_EXTENT
        self._level_ranges = None

        conn = pool.get_connection(self.connection_string)
        with conn.lock() as db:
            if layer_type is None or layer_type is MBTilesType.NONE:
                layer_type = schema.read_type(db)
            self._type = layer_type

            if tile_grid is None:
                self._format = schema.read_format(db)
                self._extent = schema.read_extent(db)

                if schema.has_map_table(db):
                    source_name = schema.tiles_source_name(db)
                    self._level_ranges = MappingProxyType(
                        schema.read_level_ranges(db, source_name))
                    levels = sorted(int(l) for l in self._level_ranges)
                    tile_grid = global_mercator_grid(self._format.value, levels,
                                                     tile_size=tile_size)
                else:
                    tile_grid = global_spherical_mercator_grid(tile_size=tile_size, levels=levels)
            self._tile_grid = tile_grid

        log.info('opened MBTiles %s: type=%s format=%s grid=%r levels=%s',
                 self.mbtile_file, self._type.value, self._format.value, self._tile_grid,
                 'all' if self._level_ranges is None else len(self._level_ranges))

    @property
    def type(self):
        return self._type

    @property
    def format(self):
        return self._format

    @property
    def extent(self):
        return self._extent

    @property
    def tile_grid(self):
        return self._tile_grid

    @property
    def level_ranges(self):
        """
        Read-only mapping of level name to `LevelRange`, or ``None``
        if the file has no ``map`` table.
        """
        return self._level_ranges

    def is_tile_index_valid(self, index):
        """
        Return ``False`` if the tile `index` is outside of the stored
        levels and ranges. ``True`` does not guarantee that the tile exists.
        """
        if self._level_ranges is None:
            return True
        col, row, level = index
        level_range = self._level_ranges.get(str(level))
        if level_range is None:
            return False
        return level_range.contains(col, row)

    def find(self, index):
        """
        Return the stored data of the tile at `index` (``(col, row, level)``),
        or ``None`` if there is no such tile.
        """
        if not self.is_tile_index_valid(index):
            return None

        col, row, level = index
        conn = self.pool.get_connection(self.connection_string)
        with conn.lock() as db:
            result = db.execute(TILE_DATA_SQL, (int(level), row, col)).fetchone()

        if result is None or not result[0]:
            return None
        return result[0]

    def add(self, index, tile_data):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def remove(self, index):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def read_metadata(self):
        """
        Return all entries of the metadata table.
        """
        conn = self.pool.get_connection(self.connection_string)
        with conn.lock() as db:
            return schema.read_metadata(db)

    def load_tile(self, tile, with_metadata=False):
        if tile.source or tile.coord is None:
            return True

        data = self.find(tile.coord)
        if data is None:
            return False
        tile.source = data
        tile.size = len(data)
        if with_metadata:
            self.load_tile_metadata(tile)
        return True

    def is_cached(self, tile):
        if tile.coord is None:
            return True
        if tile.source:
            return True

        return self.load_tile(tile)

    def store_tile(self, tile):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def store_tiles(self, tiles):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def remove_tile(self, tile):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def remove_tiles(self, tiles):
        raise ReadOnlyCacheError('MBTilesCache is a read-only cache')

    def load_tile_metadata(self, tile):
        # MBTiles specification does not include timestamps.
        # This sets the timestamp of the tile to epoch (1970s)
        tile.timestamp = -1
        if tile.source is not None:
            tile.size = len(tile.source)
