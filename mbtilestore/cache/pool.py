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
Shared SQLite connections with an exclusive lock per connection.
"""

import os
import sqlite3
import threading
from collections import namedtuple
from contextlib import contextmanager
from urllib.request import pathname2url

import logging
log = logging.getLogger(__name__)

__all__ = ['ConnectionString', 'ConnectionPool', 'PooledConnection', 'LockTimeout']


class LockTimeout(Exception):
    pass


class ConnectionString(namedtuple('ConnectionString', 'database_path read_only')):
    """
    Identity of a pooled connection. Two stores with equal connection
    strings share the same connection (and the same lock).
    """
    __slots__ = ()

    def __new__(cls, database_path, read_only=True):
        return super(ConnectionString, cls).__new__(
            cls, os.path.abspath(database_path), bool(read_only))

    @property
    def uri(self):
        uri = 'file:' + pathname2url(self.database_path)
        if self.read_only:
            uri += '?mode=ro'
        return uri


class PooledConnection(object):
    """
    A single SQLite connection. All access must happen inside
    `lock()`, which serializes statements from different threads.
    """
    def __init__(self, connection_string, db, lock_timeout=None):
        self.connection_string = connection_string
        self.lock_timeout = lock_timeout
        self._db = db
        self._lock = threading.Lock()

    @contextmanager
    def lock(self):
        """
        Context manager for exclusive access to the connection.
        Yields the `sqlite3.Connection`.

        :raises LockTimeout: if the lock was not released by another
            thread within `lock_timeout` seconds
        """
        timeout = -1 if self.lock_timeout is None else self.lock_timeout
        if not self._lock.acquire(timeout=timeout):
            raise LockTimeout('connection to %s still locked after %ss' % (
                self.connection_string.database_path, self.lock_timeout))
        try:
            yield self._db
        finally:
            self._lock.release()

    def close(self):
        with self.lock() as db:
            db.close()


class ConnectionPool(object):
    """
    Pool of SQLite connections, one for each `ConnectionString`.

    :param timeout: seconds SQLite waits for a locked database file
    :param lock_timeout: seconds to wait for the per-connection lock,
        ``None`` waits forever
    :param read_only: open databases in read-only mode
    """
    def __init__(self, timeout=30, lock_timeout=60, read_only=True):
        self.timeout = timeout
        self.lock_timeout = lock_timeout
        self.read_only = read_only
        self._connections = {}
        self._pool_lock = threading.Lock()

    @classmethod
    def from_config(cls, conf):
        return cls(
            timeout=conf.cache.sqlite_timeout,
            lock_timeout=conf.cache.lock_timeout,
            read_only=conf.cache.read_only,
        )

    def connection_string(self, database_path):
        return ConnectionString(database_path, read_only=self.read_only)

    def get_connection(self, connection_string):
        """
        Return the `PooledConnection` for `connection_string` (a
        `ConnectionString` or a file name). Opens the connection on first use.

        :raises sqlite3.Error: if the database can't be opened
        """
        if not isinstance(connection_string, ConnectionString):
            connection_string = self.connection_string(connection_string)

        if connection_string in self._connections:
            return self._connections[connection_string]

        with self._pool_lock:
            if connection_string not in self._connections:
                self._connections[connection_string] = self._connect(connection_string)

        return self._connections[connection_string]

    def _connect(self, connection_string):
        log.debug('opening connection to %s (read_only=%s)',
                  connection_string.database_path, connection_string.read_only)
        db = sqlite3.connect(connection_string.uri, timeout=self.timeout, uri=True,
                             check_same_thread=False)
        return PooledConnection(connection_string, db, lock_timeout=self.lock_timeout)

    def __contains__(self, connection_string):
        if not isinstance(connection_string, ConnectionString):
            connection_string = self.connection_string(connection_string)
        return connection_string in self._connections

    def __len__(self):
        return len(self._connections)

    def cleanup(self):
        """
        Close all open connections and remove them from the pool.
        """
        with self._pool_lock:
            connections = list(self._connections.values())
            self._connections.clear()
        for conn in connections:
            conn.close()
