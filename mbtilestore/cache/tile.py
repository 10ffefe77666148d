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

from collections import namedtuple


class TileIndex(namedtuple('TileIndex', 'col row level')):
    """
    Address of a single tile: column, row and level.

    Any ``(x, y, z)`` tuple can be used where a `TileIndex` is expected.

    >>> TileIndex(1, 2, 3)
    TileIndex(col=1, row=2, level=3)
    >>> TileIndex(1, 2, '3').level_name
    '3'
    """
    __slots__ = ()

    @property
    def level_name(self):
        return str(self.level)


class Tile(object):
    """
    A tile coordinate together with the stored tile data, once loaded.

    :ivar coord: `TileIndex` or ``(col, row, level)``, ``None`` for
        tiles outside of any grid
    :ivar source: the tile data as stored in the cache (bytes)
    :ivar size: length of `source` in bytes
    :ivar timestamp: modification time, ``-1`` if the cache has none
    """
    def __init__(self, coord, source=None):
        self.coord = coord
        self.source = source
        self.size = None
        self.timestamp = None

    def is_missing(self):
        """
        ``True`` while no data was loaded for a tile with a coordinate.

        >>> Tile((1, 2, 3)).is_missing(), Tile((1, 2, 3), b'...').is_missing()
        (True, False)
        >>> Tile(None).is_missing()
        False
        """
        return self.coord is not None and self.source is None

    def __eq__(self, other):
        if not isinstance(other, Tile):
            return NotImplemented
        return (self.coord, self.source) == (other.coord, other.source)

    __hash__ = None

    def __repr__(self):
        return 'Tile(%r, source=%s)' % (
            self.coord, 'None' if self.source is None else '<%d bytes>' % len(self.source))
