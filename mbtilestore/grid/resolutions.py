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

OGC_PIXEL_SIZE = 0.00028  # m/px


def res_to_ogc_scale(res):
    """
    >>> round(res_to_ogc_scale(0.28), 1)
    1000.0
    """
    return res / OGC_PIXEL_SIZE


def pyramid_res_level(initial_res, factor=2.0, levels=20):
    """
    Return resolutions of an image pyramid.

    :param initial_res: the resolution of the top level (0)
    :param factor: the factor between each level, for tms access 2
    :param levels: number of resolutions to generate, or an iterable
        with the level numbers to generate

    >>> list(pyramid_res_level(10000, levels=5))
    [10000.0, 5000.0, 2500.0, 1250.0, 625.0]
    >>> list(pyramid_res_level(10000, levels=[1, 3]))
    [5000.0, 1250.0]
    """
    if isinstance(levels, int):
        levels = range(levels)
    return [initial_res/factor**n for n in levels]
