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

import math


def bbox_tuple(bbox):
    """
    >>> bbox_tuple('20,-30,40,-10')
    (20.0, -30.0, 40.0, -10.0)
    >>> bbox_tuple([20,-30,40,-10])
    (20.0, -30.0, 40.0, -10.0)
    >>> bbox_tuple(' 8.5, 53 ,9,53.5 ')
    (8.5, 53.0, 9.0, 53.5)

    """
    if isinstance(bbox, str):
        bbox = bbox.split(',')
    bbox = tuple(map(float, bbox))
    if len(bbox) != 4:
        raise ValueError('bbox requires four values, got %d' % len(bbox))
    return bbox


def bbox_is_finite(bbox):
    """
    >>> bbox_is_finite((-10, -5, 10, 5))
    True
    >>> bbox_is_finite((-10, float('-inf'), 10, 5))
    False
    """
    return all(math.isfinite(v) for v in bbox)


def format_bbox(bbox, precision=6):
    """
    >>> format_bbox((1, 2.5, 3.123456789, 4))
    '1.000000,2.500000,3.123457,4.000000'
    """
    return ','.join('%.*f' % (precision, v) for v in bbox)
