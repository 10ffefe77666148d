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


class ImmutableDictList(object):
    """
    Read-only mapping that keeps the order of its items. Items are
    accessed by name or by their position.

    >>> d = ImmutableDictList([('3', 'a'), ('5', 'b')])
    >>> d['5'], d[0], d[-1]
    ('b', 'a', 'b')
    >>> '3' in d, 1 in d, '4' in d
    (True, True, False)
    """
    def __init__(self, items):
        self._items = dict(items)
        self._order = list(self._items)

    def __getitem__(self, key):
        if isinstance(key, int):
            key = self._order[key]
        return self._items[key]

    def __contains__(self, key):
        if isinstance(key, int):
            return -len(self._order) <= key < len(self._order)
        return key in self._items

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        return (self._items[name] for name in self._order)

    def __str__(self):
        return '[%s]' % ', '.join('%s: %s' % item for item in self.iteritems())

    def names(self):
        return iter(self._order)

    def iteritems(self):
        return ((name, self._items[name]) for name in self._order)
