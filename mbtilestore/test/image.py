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

from io import BytesIO

from PIL import Image


def create_image(size, color=None, mode=None):
    if color is None:
        color = (200, 200, 200)
    if mode is None:
        mode = 'RGBA' if isinstance(color, tuple) and len(color) == 4 else 'RGB'
    return Image.new(mode, size, color=color)


def create_tmp_image(size, format='png', color=None, mode=None):
    img = create_image(size, color, mode)
    data = BytesIO()
    img.save(data, format)
    return data.getvalue()


def is_png(data):
    return data.startswith(b'\x89PNG\r\n\x1a\n')


def is_jpeg(data):
    return data.startswith(b'\xff\xd8')
