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
import optparse
import sqlite3
import sys
import logging
from logging.config import fileConfig

from mbtilestore.cache.base import CacheBackendError
from mbtilestore.cache.mbtiles import MBTilesCache
from mbtilestore.cache.pool import ConnectionPool
from mbtilestore.cache.tile import TileIndex
from mbtilestore.config import load_config, ConfigurationError
from mbtilestore.grid.resolutions import res_to_ogc_scale
from mbtilestore.util.bbox import format_bbox
from mbtilestore.version import version


def setup_logging(level=logging.INFO, format=None):
    mbtilestore_log = logging.getLogger('mbtilestore')
    mbtilestore_log.setLevel(level)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    if not format:
        format = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
    formatter = logging.Formatter(format)
    ch.setFormatter(formatter)
    mbtilestore_log.addHandler(ch)


def _add_common_options(parser):
    parser.add_option("-f", "--config",
                      dest="config_file", default=None,
                      help="MBTileStore configuration (YAML)")
    parser.add_option("--log-config",
                      dest="log_config", default=None,
                      help="logging configuration (INI)")
    parser.add_option("-q", "--quiet",
                      action="count", dest="quiet", default=0,
                      help="reduce number of messages to stderr")
    parser.add_option("-v", "--verbose",
                      action="count", dest="verbose", default=0,
                      help="increase number of messages to stderr")


def _load(options):
    try:
        conf = load_config(options.config_file)
    except ConfigurationError as ex:
        print('ERROR: %s' % (ex, ), file=sys.stderr)
        sys.exit(1)

    log_config = options.log_config or conf.log_conf
    if log_config:
        fileConfig(log_config, {'here': os.path.dirname(os.path.abspath(log_config))})
    else:
        level = logging.WARNING - 10 * options.verbose + 10 * options.quiet
        setup_logging(max(logging.DEBUG, level))
    return conf


def _open_cache(conf, mbtile_file):
    if not os.path.exists(mbtile_file):
        print('ERROR: %s does not exist' % (mbtile_file, ), file=sys.stderr)
        sys.exit(1)
    pool = ConnectionPool.from_config(conf)
    try:
        return MBTilesCache(mbtile_file, pool,
                            tile_size=conf.grid.tile_size, levels=conf.grid.levels)
    except (CacheBackendError, sqlite3.Error) as ex:
        print('ERROR: unable to open %s: %s' % (mbtile_file, ex), file=sys.stderr)
        sys.exit(1)


def info_command(args):
    parser = optparse.OptionParser("usage: %prog info [options] file.mbtiles",
        description="Display the detected tile schema of an MBTiles file.")
    _add_common_options(parser)
    options, args = parser.parse_args(args)

    if len(args) != 2:
        parser.print_help()
        sys.exit(1)

    conf = _load(options)
    cache = _open_cache(conf, args[1])

    print('%s:' % (cache.mbtile_file, ))
    print('    Type: %s' % (cache.type.value, ))
    print('    Format: %s' % (cache.format.value, ))
    print('    Extent: %s' % (format_bbox(cache.extent), ))
    print('    Tile grid: %r' % (cache.tile_grid, ))

    if cache.level_ranges is None:
        print('    Levels: unrestricted')
        for level_name, res in cache.tile_grid.resolutions.iteritems():
            print('        %2s:  res %-18r scale 1:%d' % (level_name, res, res_to_ogc_scale(res)))
    else:
        print('    Levels: columns, rows')
        for level_name in cache.tile_grid.level_names():
            r = cache.level_ranges[level_name]
            print('        %2s:  %d..%d, %d..%d' % (
                level_name, r.col_min, r.col_max, r.row_min, r.row_max))


def metadata_command(args):
    parser = optparse.OptionParser("usage: %prog metadata [options] file.mbtiles",
        description="Display the metadata table of an MBTiles file.")
    _add_common_options(parser)
    options, args = parser.parse_args(args)

    if len(args) != 2:
        parser.print_help()
        sys.exit(1)

    conf = _load(options)
    cache = _open_cache(conf, args[1])

    metadata = cache.read_metadata()
    if not metadata:
        return
    name_len = max(len(name) for name in metadata)
    for name in sorted(metadata):
        print(('%%-%ds  %%s' % name_len) % (name, metadata[name]))


def tile_command(args):
    parser = optparse.OptionParser("usage: %prog tile [options] file.mbtiles level col row",
        description="Write the data of a single tile.")
    _add_common_options(parser)
    parser.add_option("-o", "--output",
                      dest="output", default=None,
                      help="write tile to this file instead of stdout")
    options, args = parser.parse_args(args)

    if len(args) != 5:
        parser.print_help()
        sys.exit(1)

    try:
        level, col, row = [int(v) for v in args[2:5]]
    except ValueError:
        print('ERROR: level, col and row need to be integers', file=sys.stderr)
        sys.exit(1)

    conf = _load(options)
    cache = _open_cache(conf, args[1])

    data = cache.find(TileIndex(col, row, level))
    if data is None:
        print('tile %d/%d/%d not found' % (level, col, row), file=sys.stderr)
        sys.exit(2)

    if options.output:
        with open(options.output, 'wb') as f:
            f.write(data)
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.flush()


commands = {
    'info': {
        'func': info_command,
        'help': 'Display the detected tile schema of an MBTiles file.'
    },
    'metadata': {
        'func': metadata_command,
        'help': 'Display the metadata of an MBTiles file.'
    },
    'tile': {
        'func': tile_command,
        'help': 'Write the data of a single tile.'
    },
}


def print_items(data, title='Commands'):
    name_len = max(len(name) for name in data)

    if title:
        print('%s:' % (title, ), file=sys.stdout)
    for name, item in data.items():
        help = item.get('help', '')
        name = ('%%-%ds' % name_len) % name
        if help:
            help = '  ' + help
        print('  %s%s' % (name, help), file=sys.stdout)


def main():
    parser = optparse.OptionParser("usage: %prog COMMAND [options]",
        add_help_option=False)
    args = sys.argv[1:]

    if len(args) < 1 or args[0] in ('--help', '-h'):
        parser.print_help()
        print()
        print_items(commands)
        sys.exit(1)

    if len(args) == 1 and args[0] == '--version':
        print('MBTileStore ' + version)
        sys.exit(1)

    command = args[0]
    if command not in commands:
        parser.print_help()
        print()
        print_items(commands)
        print('\nERROR: unknown command %s' % (command,), file=sys.stdout)
        sys.exit(1)

    args = sys.argv[0:1] + sys.argv[2:]
    commands[command]['func'](args)


if __name__ == '__main__':
    main()
