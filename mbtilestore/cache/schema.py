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

"""
Detection of the tile schema of MBTiles files.

All functions take an open `sqlite3.Connection` and only read from it.
Callers are responsible for holding the connection lock.
"""

import math
import sqlite3
from collections import namedtuple
from enum import Enum

from mbtilestore.cache.base import EmptyCacheError
from mbtilestore.srs import SRS
from mbtilestore.util.bbox import bbox_tuple, bbox_is_finite

import logging
log = logging.getLogger(__name__)


DEFAULT_EXTENT = (-20037508.342789, -20037508.342789, 20037508.342789, 20037508.342789)

# geographic extent covered by the MBTiles specification
MBTILES_FULL_EXTENT = (-180, -85, 180, 85)

METADATA_VALUE_SQL = 'SELECT "value" FROM metadata WHERE "name"=?'

# errors of optional metadata that result in default values
METADATA_ERRORS = (sqlite3.Error, ValueError, TypeError, AttributeError, IndexError)


class MBTilesType(Enum):
    NONE = 'none'
    BASELAYER = 'baselayer'
    OVERLAY = 'overlay'


class MBTilesFormat(Enum):
    PNG = 'png'
    JPG = 'jpg'
    WEBP = 'webp'


class LevelRange(namedtuple('LevelRange', 'col_min col_max row_min row_max')):
    """
    Inclusive range of the columns and rows stored for one level.

    >>> r = LevelRange(0, 3, 1, 2)
    >>> r.contains(3, 1), r.contains(4, 1), r.contains(0, 0)
    (True, False, False)
    """
    __slots__ = ()

    def contains(self, col, row):
        return (self.col_min <= col <= self.col_max and
                self.row_min <= row <= self.row_max)


def parse_or_default(raw, variants, default):
    """
    Return the member of `variants` whose name matches `raw`
    (case-insensitive), or `default`.

    >>> parse_or_default('Overlay', MBTilesType, MBTilesType.BASELAYER)
    <MBTilesType.OVERLAY: 'overlay'>
    >>> parse_or_default('tiff', MBTilesFormat, MBTilesFormat.PNG)
    <MBTilesFormat.PNG: 'png'>
    >>> parse_or_default(None, MBTilesFormat, MBTilesFormat.PNG)
    <MBTilesFormat.PNG: 'png'>
    """
    if isinstance(raw, str):
        name = raw.strip().upper()
        for variant in variants:
            if variant.name == name:
                return variant
    return default


def read_metadata_value(db, name):
    """
    Return the metadata value for `name` or ``None``.
    """
    row = db.execute(METADATA_VALUE_SQL, (name, )).fetchone()
    if row is None:
        return None
    return row[0]


def _read_enum(db, name, variants, default):
    try:
        raw = read_metadata_value(db, name)
    except METADATA_ERRORS as ex:
        log.debug('unable to read %s from metadata: %s', name, ex)
        return default
    value = parse_or_default(raw, variants, default)
    if value is default and raw is not None and str(raw).strip().upper() != default.name:
        log.debug('unknown %s %r in metadata, using %s', name, raw, default.value)
    return value


def read_type(db):
    return _read_enum(db, 'type', MBTilesType, MBTilesType.BASELAYER)


def read_format(db):
    return _read_enum(db, 'format', MBTilesFormat, MBTilesFormat.PNG)


def to_mercator(x, y):
    """
    Convert a geographic point to spherical mercator. Points with
    coordinates outside of +-180/+-90 are returned unchanged, as they
    are most likely already projected.

    >>> [round(v, 2) for v in to_mercator(180, 0)]
    [20037508.34, 0.0]
    >>> to_mercator(1000000.0, 45.0)
    (1000000.0, 45.0)
    >>> to_mercator(10, -90)[1]
    -inf
    """
    if abs(x) > 180 or abs(y) > 90:
        return x, y
    if abs(y) == 90:
        # the poles have no mercator y, PROJ returns a clamped value
        return to_mercator(x, 0)[0], math.copysign(math.inf, y)
    return tuple(SRS(4326).transform_to(SRS(3857), (x, y)))


def geographic_to_mercator(bbox):
    minx, miny = to_mercator(bbox[0], bbox[1])
    maxx, maxy = to_mercator(bbox[2], bbox[3])
    return (minx, miny, maxx, maxy)


def read_extent(db):
    """
    Return the extent of the ``bounds`` metadata in spherical mercator
    or the world extent if the bounds are missing or invalid.
    """
    try:
        bounds = read_metadata_value(db, 'bounds')
        extent = geographic_to_mercator(bbox_tuple(bounds))
    except METADATA_ERRORS as ex:
        log.debug('no valid bounds in metadata (%s), using world extent', ex)
        return DEFAULT_EXTENT
    if not bbox_is_finite(extent):
        log.debug('bounds %r not projectable, using world extent', bounds)
        return DEFAULT_EXTENT
    if extent[0] > extent[2] or extent[1] > extent[3]:
        log.debug('bounds %r are reversed, using world extent', bounds)
        return DEFAULT_EXTENT
    return extent


def read_metadata(db):
    """
    Return all entries of the metadata table as a dict.
    """
    return dict(db.execute('SELECT "name", "value" FROM metadata').fetchall())


def has_map_table(db):
    sql = "SELECT COUNT(*) FROM sqlite_master WHERE type='table' AND name='map'"
    return db.execute(sql).fetchone()[0] > 0


def parse_view_source(view_sql):
    """
    Return the name of the table or view that a ``tiles`` view selects
    from: the text between ``FROM`` and the first ``INNER`` or ``JOIN``,
    without quotes. Returns ``None`` for views of other shapes.

    Only recognizes the single ``SELECT ... FROM a JOIN b`` form written by
    common MBTiles tools. It is not an SQL parser.

    >>> parse_view_source('''CREATE VIEW tiles AS SELECT map.zoom_level AS zoom_level,
    ...     map.tile_column AS tile_column, map.tile_row AS tile_row,
    ...     images.tile_data AS tile_data
    ...     FROM map JOIN images ON images.tile_id = map.tile_id''')
    'map'
    >>> parse_view_source('create view tiles as select * from "map" inner join images using (tile_id)')
    'map'
    >>> parse_view_source('CREATE VIEW tiles AS SELECT * FROM other') is None
    True
    """
    if not view_sql:
        return None
    sql = ' '.join(view_sql.split())
    upper_sql = sql.upper()

    idx_from = upper_sql.find(' FROM ')
    if idx_from == -1:
        return None
    idx_from += len(' FROM ')

    join_idxs = [idx for idx in (upper_sql.find(' INNER ', idx_from),
                                 upper_sql.find(' JOIN ', idx_from)) if idx != -1]
    if not join_idxs:
        return None

    name = sql[idx_from:min(join_idxs)].strip()
    for quote in ('"', '`', '[', ']'):
        name = name.replace(quote, '')
    return name or None


def tiles_source_name(db):
    """
    Return the name of the table to query for tile ranges. This is
    ``tiles``, except when ``tiles`` is a view.
    """
    sql = "SELECT sql FROM sqlite_master WHERE type='view' AND name='tiles'"
    row = db.execute(sql).fetchone()
    if row is None:
        return 'tiles'

    name = parse_view_source(row[0])
    if name is None:
        log.warning('unable to find source table of tiles view, using tiles')
        return 'tiles'
    log.debug('tiles view selects from %s', name)
    return name


LEVEL_RANGES_SQL = (
    'SELECT "zoom_level", '
    'min("tile_column"), max("tile_column"), '
    'min("tile_row"), max("tile_row") '
    'FROM "%s" GROUP BY "zoom_level"'
)


def read_level_ranges(db, source_name='tiles'):
    """
    Return a dict with the `LevelRange` of each stored level.
    The keys are the level numbers as strings.

    :raises EmptyCacheError: if `source_name` contains no tiles
    """
    rows = db.execute(LEVEL_RANGES_SQL % source_name.replace('"', '""')).fetchall()

    level_ranges = {}
    for level, col_min, col_max, row_min, row_max in rows:
        if level is None:
            log.debug('ignoring tiles without zoom_level in %s', source_name)
            continue
        level_ranges[str(int(level))] = LevelRange(col_min, col_max, row_min, row_max)

    if not level_ranges:
        raise EmptyCacheError('no data in MBTiles (%s is empty)' % source_name)
    return level_ranges
