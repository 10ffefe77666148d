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
Read access to tiles stored in MBTiles files.

.. digraph:: Schematic Call Graph

    ranksep = 0.1;
    node [shape="box", height="0", width="0"]

    mc  [label="MBTilesCache" href="<mbtilestore.cache.mbtiles.MBTilesCache>"]
    sd  [label="schema",  href="<mbtilestore.cache.schema>"];
    cp  [label="ConnectionPool", href="<mbtilestore.cache.pool.ConnectionPool>"];
    tg  [label="TileGrid", href="<mbtilestore.grid.tile_grid.TileGrid>"];

    {
        mc -> cp [label="get_connection\\nlock"];
        mc -> sd [label="read_type\\nread_format\\nread_extent\\nread_level_ranges"];
        mc -> tg [label="global_mercator_grid"]
    }

"""
