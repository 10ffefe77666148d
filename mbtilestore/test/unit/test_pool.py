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
import threading

import pytest

from mbtilestore.cache.pool import ConnectionPool, ConnectionString, LockTimeout
from mbtilestore.config import load_config
from mbtilestore.test.helper import create_mbtiles


@pytest.fixture
def mbtile_file(tmp_path):
    return create_mbtiles(str(tmp_path / 'pool.mbtiles'), tiles=[((0, 0, 0), b'tile')])


class TestConnectionString(object):

    def test_abspath(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        cs = ConnectionString('foo.mbtiles')
        assert cs.database_path == os.path.join(str(tmp_path), 'foo.mbtiles')
        assert cs.read_only

    def test_equal(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert ConnectionString('foo.mbtiles') == ConnectionString(str(tmp_path / 'foo.mbtiles'))
        assert ConnectionString('foo.mbtiles') != ConnectionString('foo.mbtiles', read_only=False)

    def test_uri(self):
        uri = ConnectionString('/tmp/foo bar.mbtiles').uri
        assert uri.startswith('file:')
        assert uri.endswith('/tmp/foo%20bar.mbtiles?mode=ro')
        assert ConnectionString('/tmp/foo.mbtiles', False).uri.endswith('/tmp/foo.mbtiles')


class TestConnectionPool(object):

    def test_shared_connection(self, pool, mbtile_file):
        conn1 = pool.get_connection(mbtile_file)
        conn2 = pool.get_connection(pool.connection_string(mbtile_file))
        assert conn1 is conn2
        assert len(pool) == 1
        assert mbtile_file in pool

    def test_separate_connections(self, pool, tmp_path, mbtile_file):
        other_file = create_mbtiles(str(tmp_path / 'other.mbtiles'))
        assert pool.get_connection(mbtile_file) is not pool.get_connection(other_file)
        assert len(pool) == 2

    def test_query(self, pool, mbtile_file):
        conn = pool.get_connection(mbtile_file)
        with conn.lock() as db:
            assert db.execute('SELECT tile_data FROM tiles').fetchone() == (b'tile', )

    def test_read_only(self, pool, mbtile_file):
        conn = pool.get_connection(mbtile_file)
        with conn.lock() as db:
            with pytest.raises(sqlite3.OperationalError):
                db.execute('DELETE FROM tiles')

    def test_writable(self, mbtile_file):
        pool = ConnectionPool(read_only=False)
        try:
            conn = pool.get_connection(mbtile_file)
            with conn.lock() as db:
                db.execute('DELETE FROM tiles')
                db.commit()
                assert db.execute('SELECT COUNT(*) FROM tiles').fetchone() == (0, )
        finally:
            pool.cleanup()

    def test_missing_file(self, pool, tmp_path):
        missing = str(tmp_path / 'missing.mbtiles')
        with pytest.raises(sqlite3.OperationalError):
            pool.get_connection(missing)
        assert len(pool) == 0
        assert not os.path.exists(missing)

    def test_cleanup(self, pool, mbtile_file):
        conn = pool.get_connection(mbtile_file)
        pool.cleanup()
        assert len(pool) == 0
        with pytest.raises(sqlite3.ProgrammingError):
            conn._db.execute('SELECT 1')
        assert pool.get_connection(mbtile_file) is not conn

    def test_from_config(self):
        conf = load_config(config_dict={'cache': {'sqlite_timeout': 3, 'lock_timeout': None,
                                                  'read_only': False}})
        pool = ConnectionPool.from_config(conf)
        assert pool.timeout == 3
        assert pool.lock_timeout is None
        assert not pool.read_only

    def test_concurrent_get_connection(self, pool, mbtile_file):
        connections = []

        def get_connection():
            connections.append(pool.get_connection(mbtile_file))

        threads = [threading.Thread(target=get_connection) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(connections) == 8
        assert all(c is connections[0] for c in connections)
        assert len(pool) == 1


class TestPooledConnectionLock(object):

    def test_lock_timeout(self, mbtile_file):
        pool = ConnectionPool(lock_timeout=0.05)
        try:
            conn = pool.get_connection(mbtile_file)
            with conn.lock():
                with pytest.raises(LockTimeout):
                    with conn.lock():
                        pass
        finally:
            pool.cleanup()

    def test_lock_from_other_thread(self, mbtile_file):
        pool = ConnectionPool(lock_timeout=0.05)
        errors = []

        def lock():
            try:
                with conn.lock():
                    pass
            except LockTimeout as ex:
                errors.append(ex)

        try:
            conn = pool.get_connection(mbtile_file)
            with conn.lock():
                t = threading.Thread(target=lock)
                t.start()
                t.join()
            assert len(errors) == 1

            t = threading.Thread(target=lock)
            t.start()
            t.join()
            assert len(errors) == 1
        finally:
            pool.cleanup()

    def test_release_after_exception(self, pool, mbtile_file):
        conn = pool.get_connection(mbtile_file)
        with pytest.raises(sqlite3.OperationalError):
            with conn.lock() as db:
                db.execute('SELECT foo FROM bar')
        with conn.lock() as db:
            assert db.execute('SELECT 1').fetchone() == (1, )
