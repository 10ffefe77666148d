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

import os
import sqlite3
import tempfile
import logging
from contextlib import contextmanager


def create_mbtiles(filename, tiles=(), metadata=None, map_table=False, tiles_view=False):
    """
    Create an MBTiles file for tests.

    :param tiles: iterable with ``((col, row, level), data)`` tuples
    :param metadata: dict with the metadata table content
    :param map_table: add an (empty) ``map`` table next to the ``tiles`` table
    :param tiles_view: store tiles in ``map``/``images`` tables with a
        ``tiles`` view, as written by mbutil
    """
    db = sqlite3.connect(filename)
    try:
        db.execute("CREATE TABLE metadata (name text, value text)")
        if metadata:
            db.executemany("INSERT INTO metadata (name, value) VALUES (?,?)",
                           list(metadata.items()))

        if tiles_view:
            db.execute("CREATE TABLE images (tile_id VARCHAR(256), tile_data BLOB)")
            db.execute("""
                CREATE TABLE map (
                    zoom_level INTEGER,
                    tile_column INTEGER,
                    tile_row INTEGER,
                    tile_id VARCHAR(256)
                )
            """)
            db.execute("""
                CREATE VIEW tiles AS
                SELECT map.zoom_level AS zoom_level,
                map.tile_column AS tile_column,
                map.tile_row AS tile_row,
                images.tile_data AS tile_data
                FROM map
                JOIN images
                ON images.tile_id = map.tile_id
            """)
            for (x, y, z), data in tiles:
                tile_id = '%d/%d/%d' % (z, x, y)
                db.execute("INSERT INTO images (tile_id, tile_data) VALUES (?,?)",
                           (tile_id, data))
                db.execute("INSERT INTO map (zoom_level, tile_column, tile_row, tile_id)"
                           " VALUES (?,?,?,?)", (z, x, y, tile_id))
        else:
            db.execute("""
                CREATE TABLE tiles (
                    zoom_level integer,
                    tile_column integer,
                    tile_row integer,
                    tile_data blob
                )
            """)
            db.execute("CREATE UNIQUE INDEX idx_tile ON tiles (zoom_level, tile_column, tile_row)")
            db.executemany(
                "INSERT INTO tiles (zoom_level, tile_column, tile_row, tile_data) VALUES (?,?,?,?)",
                [(z, x, y, data) for (x, y, z), data in tiles])
            if map_table:
                db.execute("""
                    CREATE TABLE map (
                        zoom_level INTEGER,
                        tile_column INTEGER,
                        tile_row INTEGER,
                        tile_id VARCHAR(256)
                    )
                """)
        db.commit()
    finally:
        db.close()
    return filename


@contextmanager
def tmp_mbtiles(**kw):
    """
    Context manager for a temporary MBTiles file, see `create_mbtiles`.
    """
    fd, filename = tempfile.mkstemp(suffix='.mbtiles')
    os.close(fd)
    os.remove(filename)
    try:
        yield create_mbtiles(filename, **kw)
    finally:
        if os.path.exists(filename):
            os.remove(filename)


class LogCollector(logging.Handler):
    """
    Collects all log records of `logger_name`.

    >>> with LogCollector('mbtilestore') as logs:
    ...     logging.getLogger('mbtilestore.test').warning('foo %s', 'bar')
    >>> logs.messages('WARNING')
    ['foo bar']
    """
    def __init__(self, logger_name):
        logging.Handler.__init__(self, level=logging.DEBUG)
        self.logger = logging.getLogger(logger_name)
        self.records = []

    def emit(self, record):
        self.records.append(record)

    def messages(self, level=None):
        return [r.getMessage() for r in self.records
                if level is None or r.levelname == level]

    def __enter__(self):
        self._old_level = self.logger.level
        self.logger.setLevel(logging.DEBUG)
        self.logger.addHandler(self)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.removeHandler(self)
        self.logger.setLevel(self._old_level)
