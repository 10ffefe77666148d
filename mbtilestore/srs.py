# -*- coding: utf-8 -*-
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
Spatial reference systems of MBTiles files.

MBTiles stores tiles in spherical mercator (EPSG:3857) and describes its
bounds in geographic coordinates (EPSG:4326). Other systems are supported
as long as pyproj knows them.
"""
import threading

from pyproj import CRS, Transformer

import logging
log_proj = logging.getLogger('mbtilestore.proj')


# codes that are only aliases of another code
SRS_ALIASES = {
    'EPSG:900913': 'EPSG:3857',
    'EPSG:102100': 'EPSG:3857',
    'EPSG:102113': 'EPSG:3857',
    'CRS:84': 'EPSG:4326',
}


def srs_code(code):
    """
    Return the normalized ``AUTHORITY:CODE`` string of `code`.

    >>> srs_code(4326)
    'EPSG:4326'
    >>> srs_code('epsg:900913')
    'EPSG:3857'
    >>> srs_code(' 25832 ')
    'EPSG:25832'
    >>> srs_code('crs:84')
    'EPSG:4326'
    """
    if isinstance(code, str):
        code = code.strip().upper()
        if ':' not in code:
            code = 'EPSG:' + code
    else:
        code = 'EPSG:%d' % code
    return SRS_ALIASES.get(code, code)


_local = threading.local()


def SRS(code):
    """
    Return the `_SRS` for `code` (``4326``, ``'EPSG:3857'``, etc.).
    Instances are cached per thread, pyproj objects are not shared
    between threads.
    """
    if isinstance(code, _SRS):
        return code

    code = srs_code(code)
    cache = getattr(_local, 'srs', None)
    if cache is None:
        cache = _local.srs = {}

    srs = cache.get(code)
    if srs is None:
        srs = cache[code] = _SRS(code)
    return srs


class _SRS(object):
    """
    A spatial reference system backed by a pyproj `CRS`.
    """

    def __init__(self, code):
        self.srs_code = code
        auth_name, auth_code = code.split(':', 1)
        self.proj = CRS.from_authority(auth_name, auth_code)
        self._transformers = {}

    def _transformer(self, other):
        key = other.srs_code
        t = self._transformers.get(key)
        if t is None:
            # x/y order is always lon/lat or easting/northing
            t = Transformer.from_crs(self.proj, other.proj, always_xy=True)
            self._transformers[key] = t
        return t

    def transform_to(self, other, points):
        """
        Transform a single ``(x, y)`` point or a list of points to `other`.
        Returns a tuple for a single point and a list of tuples otherwise.
        Points outside of the projection domain are passed to PROJ as they
        are, the result depends on the PROJ version.

        >>> x, y = SRS(4326).transform_to(SRS(3857), (8.22, 53.15))
        >>> round(x, 2), round(y, 2)
        (915046.21, 7010792.2)
        >>> SRS(3857).transform_to(SRS(3857), [(1, 2)])
        [(1, 2)]
        """
        if self == other:
            return points

        t = self._transformer(other)
        if len(points) == 2 and isinstance(points[0], (int, float)):
            return tuple(t.transform(points[0], points[1]))

        xs, ys = t.transform([p[0] for p in points], [p[1] for p in points])
        log_proj.debug('transformed %d points from %s to %s',
                       len(points), self.srs_code, other.srs_code)
        return list(zip(xs, ys))

    @property
    def is_latlong(self):
        return self.proj.is_geographic

    def __eq__(self, other):
        """
        >>> SRS(900913) == SRS('EPSG:3857')
        True
        >>> SRS(4326) == SRS(3857)
        False
        """
        if not isinstance(other, _SRS):
            return NotImplemented
        return self.srs_code == other.srs_code

    def __ne__(self, other):
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    def __hash__(self):
        return hash(self.srs_code)

    def __repr__(self):
        """
        >>> SRS(4326)
        SRS('EPSG:4326')
        """
        return "SRS('%s')" % (self.srs_code, )
