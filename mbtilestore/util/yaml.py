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

import yaml


class YAMLError(Exception):
    pass


def _safe_loader():
    # libyaml is optional, its loader is only much faster
    return getattr(yaml, 'CSafeLoader', yaml.SafeLoader)


def load_yaml(doc):
    """
    Load a YAML mapping from a string or file object.
    Empty documents result in an empty dict.

    >>> load_yaml('cache: {read_only: false}')
    {'cache': {'read_only': False}}
    """
    try:
        data = yaml.load(doc, Loader=_safe_loader())
    except yaml.YAMLError as ex:
        raise YAMLError(str(ex))

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise YAMLError('expected a YAML mapping, got %s' % (type(data).__name__, ))
    return data


def load_yaml_file(filename):
    with open(filename, 'rb') as f:
        return load_yaml(f)
