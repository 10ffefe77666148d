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
Cache interface and the errors of cache backends.
"""
from abc import ABC, abstractmethod
from typing import Iterable

from mbtilestore.cache.tile import Tile


class CacheBackendError(Exception):
    pass


class EmptyCacheError(CacheBackendError):
    """
    The cache does not contain a single tile, although its schema
    promises tiles.
    """
    pass


class ReadOnlyCacheError(CacheBackendError, NotImplementedError):
    """
    The cache does not support adding or removing tiles.
    """
    pass


class TileCacheBase(ABC):
    """
    Interface of all tile caches. Caches work on `Tile` objects: loading
    fills ``tile.source``, storing writes it.
    """

    @abstractmethod
    def load_tile(self, tile: Tile, with_metadata: bool = False) -> bool:
        """
        Load the data of `tile`. Returns ``False`` if the tile is not cached.
        """

    def load_tiles(self, tiles: Iterable[Tile], with_metadata: bool = False) -> bool:
        """
        Load all `tiles`. Returns ``True`` only if every tile was loaded.
        """
        results = [self.load_tile(tile, with_metadata=with_metadata) for tile in tiles]
        return all(results)

    @abstractmethod
    def store_tile(self, tile: Tile) -> bool:
        pass

    def store_tiles(self, tiles: Iterable[Tile]) -> bool:
        results = [self.store_tile(tile) for tile in tiles]
        return all(results)

    @abstractmethod
    def remove_tile(self, tile: Tile) -> bool:
        pass

    def remove_tiles(self, tiles: Iterable[Tile]) -> None:
        for tile in tiles:
            self.remove_tile(tile)

    @abstractmethod
    def is_cached(self, tile: Tile) -> bool:
        pass

    @abstractmethod
    def load_tile_metadata(self, tile: Tile) -> None:
        """
        Set ``tile.timestamp`` and ``tile.size``.
        """

    def cleanup(self) -> None:
        pass
