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
Configuration of MBTileStore.

Configurations are plain values: load them with :func:`load_config` and
pass them on to the objects that need them. There is no global
configuration object.
"""
import os
import copy

from mbtilestore.util.yaml import load_yaml_file, YAMLError

import logging
log = logging.getLogger(__name__)


class ConfigurationError(Exception):
    pass


class Options(dict):
    """
    Nested configuration values with attribute access.
    `update` merges nested sections instead of replacing them.

    >>> o = Options(cache=Options(read_only=True, lock_timeout=60))
    >>> o.update({'cache': {'lock_timeout': 5}})
    >>> o.cache.read_only, o.cache.lock_timeout
    (True, 5)
    """
    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            raise AttributeError(name)

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError:
            raise AttributeError(name)

    def update(self, other=(), **kw):
        items = other.items() if hasattr(other, 'items') else other
        for mapping in (items, kw.items()):
            for key, value in mapping:
                current = self.get(key)
                if isinstance(current, Options) and isinstance(value, dict):
                    current.update(value)
                else:
                    self[key] = value

    def __deepcopy__(self, memo):
        return Options((k, copy.deepcopy(v, memo)) for k, v in self.items())

    def __repr__(self):
        return 'Options(%s)' % (dict.__repr__(self), )


def _to_options_map(value):
    if isinstance(value, dict):
        return Options((k, _to_options_map(v)) for k, v in value.items())
    if isinstance(value, list):
        return [_to_options_map(v) for v in value]
    return value


def load_default_config():
    """
    Return a copy of the defaults from :mod:`mbtilestore.config.defaults`.
    """
    from mbtilestore.config import defaults
    return _to_options_map({
        name: copy.deepcopy(value)
        for name, value in vars(defaults).items()
        if not name.startswith('_')
    })


def load_config(config_file=None, config_dict=None):
    """
    Return the default configuration, updated with the values from
    `config_file` (a YAML file) or `config_dict`.

    :raises ConfigurationError: if the YAML is invalid or does not
        match the configuration schema. All schema violations are
        reported at once.
    """
    from mbtilestore.config.validator import validate

    conf = load_default_config()
    conf.conf_base_dir = os.getcwd()

    if config_file is not None:
        try:
            config_dict = load_yaml_file(config_file)
        except (YAMLError, OSError) as ex:
            raise ConfigurationError('unable to load %s: %s' % (config_file, ex))
        conf.conf_base_dir = os.path.abspath(os.path.dirname(config_file))
        log.debug('loaded configuration from %s', config_file)

    if config_dict:
        errors = validate(config_dict)
        if errors:
            raise ConfigurationError('invalid configuration:\n' + '\n'.join(errors))
        conf.update(_to_options_map(config_dict))

    if conf.grid.tile_size is not None:
        conf.grid.tile_size = tuple(conf.grid.tile_size)
    if conf.log_conf:
        conf.log_conf = abspath(conf.log_conf, conf.conf_base_dir)
    return conf


def abspath(path, base_path=None):
    """
    Convert path to absolute path. Uses the current working directory
    as base, if path is relative and ``base_path`` is not set.
    """
    if base_path:
        return os.path.abspath(os.path.join(base_path, path))
    return os.path.abspath(path)
