import logging

import pytest

from mbtilestore.cache.pool import ConnectionPool


@pytest.fixture
def pool():
    pool = ConnectionPool(timeout=5, lock_timeout=5)
    yield pool
    pool.cleanup()


@pytest.fixture(autouse=True)
def reset_mbtilestore_logging():
    # the command line tool adds handlers to the package logger
    yield
    mbtilestore_log = logging.getLogger('mbtilestore')
    for handler in list(mbtilestore_log.handlers):
        mbtilestore_log.removeHandler(handler)
    mbtilestore_log.setLevel(logging.NOTSET)
